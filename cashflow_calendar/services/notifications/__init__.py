"""
Notification Services Package

Bill reminders: the scheduler interface, an in-memory scheduler and the
planner that keeps one pending reminder per recurring bill.
"""

from cashflow_calendar.services.notifications.interface import (
    NotificationError,
    NotificationSchedulerInterface,
)
from cashflow_calendar.services.notifications.memory import (
    InMemoryNotificationScheduler,
    ScheduledNotification,
)
from cashflow_calendar.services.notifications.reminders import (
    NOTIFICATION_MAPPINGS_KEY,
    REMINDER_DAYS_BEFORE_KEY,
    REMINDERS_ENABLED_KEY,
    ReminderPlanner,
    next_occurrence_after,
    plan_reminder,
)

__all__ = [
    "NotificationError",
    "NotificationSchedulerInterface",
    "InMemoryNotificationScheduler",
    "ScheduledNotification",
    "NOTIFICATION_MAPPINGS_KEY",
    "REMINDER_DAYS_BEFORE_KEY",
    "REMINDERS_ENABLED_KEY",
    "ReminderPlanner",
    "next_occurrence_after",
    "plan_reminder",
]
