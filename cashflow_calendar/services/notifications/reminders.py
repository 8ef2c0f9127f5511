"""
Bill Reminder Planner

Schedules one local notification per recurring bill, a configurable number
of days before its next occurrence at a fixed time of day (UTC).

DESIGN DECISION: The bill -> notification id mapping lives in the key-value
store next to the bills themselves, so a reminder can be cancelled or
replaced after a restart. A bill has at most one pending reminder.

Reminder preferences are stored as plain strings:
- @settings_reminders_enabled_v1      "true" enables reminders
- @settings_reminders_days_before_v1  non-negative integer
"""

import json
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from cashflow_calendar.config import get_settings
from cashflow_calendar.diagnostics import DiagnosticLogger, get_diagnostic_logger
from cashflow_calendar.engine.dates import format_date
from cashflow_calendar.engine.errors import RecurrenceError
from cashflow_calendar.engine.recurrence import occurrences
from cashflow_calendar.models.diagnostics import DiagnosticEventBuilder
from cashflow_calendar.models.items import RecurringItem, ReminderPlan
from cashflow_calendar.services.currency import (
    CurrencyFormatterInterface,
    SymbolCurrencyFormatter,
)
from cashflow_calendar.services.notifications.interface import (
    NotificationError,
    NotificationSchedulerInterface,
)
from cashflow_calendar.services.storage.interface import KeyValueStoreInterface


NOTIFICATION_MAPPINGS_KEY = "@notification_mappings_v1"
REMINDERS_ENABLED_KEY = "@settings_reminders_enabled_v1"
REMINDER_DAYS_BEFORE_KEY = "@settings_reminders_days_before_v1"


def next_occurrence_after(
    item: RecurringItem,
    reference: date,
    inclusive: bool = False,
    max_iterations: Optional[int] = None,
    diagnostics: Optional[DiagnosticLogger] = None,
) -> Optional[date]:
    """
    First occurrence after `reference` (or on it, when `inclusive`).

    Returns None if the recurrence stalls or the iteration cap is hit
    before reaching the reference date.
    """
    try:
        for occurrence in occurrences(
            item.start_date,
            item.interval,
            max_iterations=max_iterations,
            item_id=item.id,
            diagnostics=diagnostics,
        ):
            if occurrence > reference or (inclusive and occurrence == reference):
                return occurrence
    except RecurrenceError:
        return None
    return None


def plan_reminder(
    item: RecurringItem,
    now: datetime,
    days_before: int,
    schedule_after: Optional[date] = None,
    hour_utc: Optional[int] = None,
    minute_utc: Optional[int] = None,
    body: str = "",
    diagnostics: Optional[DiagnosticLogger] = None,
) -> Optional[ReminderPlan]:
    """
    Plan the reminder for the bill's first occurrence strictly after
    `schedule_after` (default: today, UTC).

    Pass the occurrence a delivered reminder was for as `schedule_after` to
    roll the reminder forward to the following occurrence.

    Returns None when there is no next occurrence or the trigger instant is
    not in the future.
    """
    if days_before < 0:
        raise ValueError("days_before must not be negative")
    if now.tzinfo is None:
        raise ValueError("now must be timezone-aware")

    settings = get_settings().reminders
    hour = settings.hour_utc if hour_utc is None else hour_utc
    minute = settings.minute_utc if minute_utc is None else minute_utc

    reference = schedule_after or now.astimezone(timezone.utc).date()
    occurrence = next_occurrence_after(item, reference, diagnostics=diagnostics)
    if occurrence is None:
        return None

    try:
        trigger_day = occurrence - timedelta(days=days_before)
    except OverflowError:
        return None
    trigger_at = datetime.combine(trigger_day, time(hour, minute), tzinfo=timezone.utc)
    if trigger_at <= now:
        return None

    return ReminderPlan(
        bill_id=item.id,
        occurrence_date=occurrence,
        trigger_at=trigger_at,
        body=body,
    )


class ReminderPlanner:
    """
    Keeps each recurring bill's pending reminder in line with the bill.

    Scheduler failures are logged and never propagate: a reminder is a
    convenience, and saving a bill must not fail because of it.
    """

    def __init__(
        self,
        store: KeyValueStoreInterface,
        scheduler: NotificationSchedulerInterface,
        formatter: Optional[CurrencyFormatterInterface] = None,
        diagnostics: Optional[DiagnosticLogger] = None,
    ):
        self._store = store
        self._scheduler = scheduler
        self._formatter = formatter or SymbolCurrencyFormatter()
        self._diagnostics = diagnostics or get_diagnostic_logger()
        self._settings = get_settings().reminders

    # ===== Preferences =====

    async def reminders_enabled(self) -> bool:
        return await self._store.get(REMINDERS_ENABLED_KEY) == "true"

    async def set_reminders_enabled(self, enabled: bool) -> None:
        await self._store.set(REMINDERS_ENABLED_KEY, "true" if enabled else "false")

    async def days_before(self) -> int:
        """Stored days-before value, or the configured default if unusable."""
        raw = await self._store.get(REMINDER_DAYS_BEFORE_KEY)
        if raw is None:
            return self._settings.default_days_before
        try:
            days = int(raw.strip())
        except ValueError:
            days = -1
        if days < 0:
            self._diagnostics.log(DiagnosticEventBuilder.default_substituted(
                REMINDER_DAYS_BEFORE_KEY, self._settings.default_days_before, raw,
            ))
            return self._settings.default_days_before
        return days

    async def set_days_before(self, days: int) -> None:
        if days < 0:
            raise ValueError("days_before must not be negative")
        await self._store.set(REMINDER_DAYS_BEFORE_KEY, str(days))

    # ===== Mapping =====

    async def _load_mappings(self) -> dict[str, str]:
        raw = await self._store.get(NOTIFICATION_MAPPINGS_KEY)
        if raw is None:
            return {}
        try:
            mappings = json.loads(raw)
        except ValueError as e:
            self._diagnostics.log(DiagnosticEventBuilder.store_value_malformed(
                NOTIFICATION_MAPPINGS_KEY, str(e),
            ))
            return {}
        if not isinstance(mappings, dict):
            return {}
        return {str(k): str(v) for k, v in mappings.items()}

    async def _save_mappings(self, mappings: dict[str, str]) -> None:
        await self._store.set(NOTIFICATION_MAPPINGS_KEY, json.dumps(mappings))

    async def notification_id_for(self, bill_id: str) -> Optional[str]:
        return (await self._load_mappings()).get(bill_id)

    # ===== Scheduling =====

    async def cancel_bill_reminder(self, bill_id: str) -> bool:
        """
        Cancel the bill's pending reminder and forget its mapping.

        The mapping is removed even when the scheduler refuses the cancel
        (the notification may already have fired).

        Returns:
            True if a reminder was mapped for the bill
        """
        mappings = await self._load_mappings()
        notification_id = mappings.pop(bill_id, None)
        if notification_id is None:
            return False

        try:
            await self._scheduler.cancel(notification_id)
            self._diagnostics.log(
                DiagnosticEventBuilder.reminder_cancelled(bill_id, notification_id)
            )
        except NotificationError as e:
            self._diagnostics.log(
                DiagnosticEventBuilder.notification_failed(bill_id, "cancel", str(e))
            )

        await self._save_mappings(mappings)
        return True

    def _reminder_body(self, item: RecurringItem, currency_code: str, occurrence: date) -> str:
        amount = self._formatter.format(item.amount, currency_code)
        return (
            f'Reminder: "{item.name}" for {amount} is due around '
            f"{format_date(occurrence)}."
        )

    async def schedule_bill_reminder(
        self,
        item: RecurringItem,
        currency_code: str,
        now: Optional[datetime] = None,
        schedule_after: Optional[date] = None,
    ) -> Optional[str]:
        """
        Replace the bill's reminder with one for its first occurrence
        strictly after `schedule_after` (default: today, UTC).

        Disabled reminders or a trigger that is already past cancel the
        existing reminder instead.

        Returns:
            The new notification id, or None if nothing was scheduled
        """
        now = now or datetime.now(timezone.utc)

        if not await self.reminders_enabled():
            self._diagnostics.log(
                DiagnosticEventBuilder.reminder_skipped(item.id, "reminders disabled")
            )
            await self.cancel_bill_reminder(item.id)
            return None

        plan = plan_reminder(
            item,
            now,
            await self.days_before(),
            schedule_after=schedule_after,
            hour_utc=self._settings.hour_utc,
            minute_utc=self._settings.minute_utc,
            diagnostics=self._diagnostics,
        )
        if plan is None:
            self._diagnostics.log(
                DiagnosticEventBuilder.reminder_skipped(item.id, "no future reminder time")
            )
            await self.cancel_bill_reminder(item.id)
            return None

        plan = plan.model_copy(
            update={"body": self._reminder_body(item, currency_code, plan.occurrence_date)}
        )

        # Only one pending reminder per bill
        await self.cancel_bill_reminder(item.id)

        try:
            notification_id = await self._scheduler.schedule_at(
                plan.trigger_at,
                plan.title,
                plan.body,
                data={"billId": item.id, "occurrenceDate": format_date(plan.occurrence_date)},
            )
        except NotificationError as e:
            self._diagnostics.log(
                DiagnosticEventBuilder.notification_failed(item.id, "schedule", str(e))
            )
            return None

        mappings = await self._load_mappings()
        mappings[item.id] = notification_id
        await self._save_mappings(mappings)

        self._diagnostics.log(DiagnosticEventBuilder.reminder_scheduled(
            item.id, notification_id, plan.trigger_at.isoformat(),
        ))
        return notification_id
