"""
Main Orchestrator for Cashflow Calendar

This module ties together all the components and defines the
end-to-end flows for:
1. Calendar (load snapshot -> project balance / mark dates / list a day)
2. Item entry (form input -> validate -> save -> reschedule bill reminder)

DESIGN DECISION: The orchestrator enforces the boundaries:
- The engine only ever sees a validated snapshot loaded before it starts
- Nothing is saved without passing item validation
- Reminder failures never fail a save

This is the "glue" between the async store boundary and the synchronous
engine.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional, Union

from cashflow_calendar.config import get_settings
from cashflow_calendar.diagnostics import DiagnosticLogger, get_diagnostic_logger
from cashflow_calendar.engine import (
    build_marking_index,
    dashboard_summary,
    default_range_end,
    items_occurring_on,
    month_totals,
    project_snapshot,
    today_utc,
)
from cashflow_calendar.engine.marking import MarkingIndex
from cashflow_calendar.models.items import (
    DashboardSummary,
    DayEntry,
    FlowDirection,
    MarkCategory,
    OneTimeItem,
    PeriodTotals,
    RecurringItem,
    ValidationResult,
)
from cashflow_calendar.services.currency import (
    CurrencyFormatterInterface,
    SymbolCurrencyFormatter,
)
from cashflow_calendar.services.notifications import (
    InMemoryNotificationScheduler,
    NotificationSchedulerInterface,
    ReminderPlanner,
)
from cashflow_calendar.services.storage import (
    FinanceRepository,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
)
from cashflow_calendar.validation import ItemValidator


class CalendarFlow:
    """
    Read-side flows behind the calendar, income, spending and dashboard views.

    Each call loads a fresh snapshot, then runs the pure engine on it.
    """

    def __init__(
        self,
        repository: FinanceRepository,
        formatter: Optional[CurrencyFormatterInterface] = None,
        diagnostics: Optional[DiagnosticLogger] = None,
    ):
        self._repository = repository
        self._formatter = formatter or SymbolCurrencyFormatter()
        self._diagnostics = diagnostics or get_diagnostic_logger()

    async def balance_on(self, target_date: date, today: Optional[date] = None) -> Decimal:
        """Projected balance as of `target_date` (unrounded)."""
        snapshot = await self._repository.load_snapshot(today)
        return project_snapshot(snapshot, target_date, diagnostics=self._diagnostics)

    async def formatted_balance_on(
        self,
        target_date: date,
        today: Optional[date] = None,
    ) -> str:
        """Projected balance rendered in the user's currency."""
        snapshot = await self._repository.load_snapshot(today)
        balance = project_snapshot(snapshot, target_date, diagnostics=self._diagnostics)
        return self._formatter.format(balance, snapshot.currency_code)

    async def marking_index(
        self,
        today: Optional[date] = None,
        range_start: Optional[date] = None,
        range_end: Optional[date] = None,
    ) -> MarkingIndex:
        """
        Calendar marks.

        The range defaults to [tracking start, today + stored dot range years].
        """
        today = today or today_utc()
        snapshot = await self._repository.load_snapshot(today)
        start = range_start or snapshot.anchor.tracking_start_date
        end = range_end or default_range_end(today, snapshot.dot_range_years)
        return build_marking_index(snapshot.items, start, end, diagnostics=self._diagnostics)

    async def transactions_on(self, query_date: date) -> list[DayEntry]:
        """Every item applying on one day (the calendar's day view)."""
        items = await self._repository.load_items()
        return items_occurring_on(items, query_date, diagnostics=self._diagnostics)

    async def month_summary(
        self,
        direction: FlowDirection,
        year: int,
        month: int,
    ) -> PeriodTotals:
        """Recurring plus one-time totals for income or spending in a month."""
        items = await self._repository.load_items()
        if direction == FlowDirection.INCOME:
            recurring, one_time = items.recurring_income, items.one_time_income
        else:
            recurring, one_time = items.recurring_expenses, items.one_time_expenses
        return month_totals(recurring, one_time, year, month, diagnostics=self._diagnostics)

    async def dashboard(self) -> DashboardSummary:
        return dashboard_summary(await self._repository.load_items())


class ItemEntryFlow:
    """
    Write-side flows behind the income and spending forms.

    Flow:
    1. Validate the raw form values
    2. Add (new id) or update (existing id) the stored record
    3. For recurring bills, reschedule the reminder

    Invalid input returns the ValidationResult and saves nothing.
    """

    def __init__(
        self,
        repository: FinanceRepository,
        validator: Optional[ItemValidator] = None,
        reminder_planner: Optional[ReminderPlanner] = None,
        diagnostics: Optional[DiagnosticLogger] = None,
    ):
        self._repository = repository
        self._diagnostics = diagnostics or get_diagnostic_logger()
        self._validator = validator or ItemValidator(self._diagnostics)
        self._reminder_planner = reminder_planner

    async def _store(
        self,
        category: MarkCategory,
        item: Union[RecurringItem, OneTimeItem],
        is_edit: bool,
    ) -> None:
        if is_edit:
            await self._repository.update_item(category, item)
        else:
            await self._repository.add_item(category, item)

    async def save_recurring(
        self,
        direction: FlowDirection,
        name: Any,
        amount: Any,
        start_date: Any,
        interval: Any,
        item_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> tuple[Optional[RecurringItem], ValidationResult]:
        """
        Save a recurring income or bill.

        Raises:
            NotFoundError: `item_id` was given but no such item is stored
        """
        snapshot = await self._repository.load_snapshot()
        result = self._validator.validate_recurring(
            name, amount, start_date, interval,
            tracking_start=snapshot.anchor.tracking_start_date,
        )
        if result.has_errors:
            return None, result

        item = self._validator.build_recurring(
            name, amount, start_date, interval, item_id=item_id,
        )
        await self._store(MarkCategory.for_recurring(direction), item, item_id is not None)

        if direction == FlowDirection.EXPENSE and self._reminder_planner is not None:
            await self._reminder_planner.schedule_bill_reminder(
                item, snapshot.currency_code, now=now,
            )

        return item, result

    async def save_one_time(
        self,
        direction: FlowDirection,
        name: Any,
        amount: Any,
        on_date: Any,
        item_id: Optional[str] = None,
    ) -> tuple[Optional[OneTimeItem], ValidationResult]:
        """Save a one-time income or spend."""
        snapshot = await self._repository.load_snapshot()
        result = self._validator.validate_one_time(
            name, amount, on_date,
            tracking_start=snapshot.anchor.tracking_start_date,
        )
        if result.has_errors:
            return None, result

        item = self._validator.build_one_time(
            name, amount, on_date, kind=direction, item_id=item_id,
        )
        await self._store(MarkCategory.for_one_time(direction), item, item_id is not None)
        return item, result

    async def delete_item(self, category: MarkCategory, item_id: str) -> bool:
        """Delete an item; a recurring bill's reminder is cancelled too."""
        deleted = await self._repository.delete_item(category, item_id)
        if category == MarkCategory.RECURRING_EXPENSE and self._reminder_planner is not None:
            await self._reminder_planner.cancel_bill_reminder(item_id)
        return deleted


def create_app_components(
    store: Optional[KeyValueStoreInterface] = None,
    scheduler: Optional[NotificationSchedulerInterface] = None,
    use_file_store: bool = True,
    diagnostics: Optional[DiagnosticLogger] = None,
) -> tuple[CalendarFlow, ItemEntryFlow, KeyValueStoreInterface]:
    """
    Factory function to create all application components.

    Args:
        store: Key-value store to use. If None, a JSON file store at the
               configured path (or an in-memory store when use_file_store
               is False).
        scheduler: Notification scheduler. If None, an in-memory scheduler.
        use_file_store: Whether the default store is file-backed.
                        Set to False for testing without a data file.
        diagnostics: Diagnostic logger shared by every component.

    Returns:
        (calendar_flow, item_entry_flow, store)
    """
    diagnostics = diagnostics or get_diagnostic_logger()

    if store is None:
        if use_file_store:
            store = JsonFileKeyValueStore(get_settings().store.data_file)
        else:
            store = InMemoryKeyValueStore()

    formatter = SymbolCurrencyFormatter()
    repository = FinanceRepository(store, diagnostics=diagnostics)
    reminder_planner = ReminderPlanner(
        store,
        scheduler or InMemoryNotificationScheduler(),
        formatter=formatter,
        diagnostics=diagnostics,
    )

    calendar_flow = CalendarFlow(repository, formatter=formatter, diagnostics=diagnostics)
    item_entry_flow = ItemEntryFlow(
        repository,
        validator=ItemValidator(diagnostics),
        reminder_planner=reminder_planner,
        diagnostics=diagnostics,
    )

    return calendar_flow, item_entry_flow, store
