"""In-memory notification scheduler."""

from datetime import datetime
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from cashflow_calendar.services.notifications.interface import (
    NotificationError,
    NotificationSchedulerInterface,
)


class ScheduledNotification(BaseModel):
    """A notification waiting to fire."""

    notification_id: str
    trigger_at: datetime
    title: str
    body: str
    data: dict[str, Any] = Field(default_factory=dict)


class InMemoryNotificationScheduler(NotificationSchedulerInterface):
    """Keeps pending notifications in a dict keyed by id."""

    def __init__(self):
        self.pending: dict[str, ScheduledNotification] = {}

    async def schedule_at(
        self,
        trigger_at: datetime,
        title: str,
        body: str,
        data: Optional[dict[str, Any]] = None,
    ) -> str:
        if trigger_at.tzinfo is None:
            raise NotificationError("trigger_at must be timezone-aware")
        notification_id = str(uuid4())
        self.pending[notification_id] = ScheduledNotification(
            notification_id=notification_id,
            trigger_at=trigger_at,
            title=title,
            body=body,
            data=dict(data or {}),
        )
        return notification_id

    async def cancel(self, notification_id: str) -> None:
        # Cancelling an unknown id is a no-op, like an already fired notification
        self.pending.pop(notification_id, None)
