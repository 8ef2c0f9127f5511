"""
Abstract Notification Scheduler Interface

DESIGN DECISION: The planner decides *when* and *what*; delivering a local
notification at an instant is the platform's job and sits behind this
interface. Tests use the in-memory scheduler.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional


class NotificationSchedulerInterface(ABC):
    """Schedules and cancels one-shot local notifications."""

    @abstractmethod
    async def schedule_at(
        self,
        trigger_at: datetime,
        title: str,
        body: str,
        data: Optional[dict[str, Any]] = None,
    ) -> str:
        """
        Schedule a notification.

        Args:
            trigger_at: Timezone-aware instant to fire at
            title: Notification title
            body: Notification text
            data: Payload handed back when the notification is opened

        Returns:
            The scheduler's notification id

        Raises:
            NotificationError: If scheduling fails
        """
        pass

    @abstractmethod
    async def cancel(self, notification_id: str) -> None:
        """
        Cancel a scheduled notification.

        Raises:
            NotificationError: If the scheduler rejects the cancellation
        """
        pass


class NotificationError(Exception):
    """Base exception for notification scheduling."""
    pass
