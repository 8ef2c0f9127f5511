"""
Period Summaries

Aggregates used by the income, spending and dashboard views: what a month
adds up to, what is configured overall, and what happens on a single day.
"""

import calendar
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from cashflow_calendar.diagnostics import DiagnosticLogger, get_diagnostic_logger
from cashflow_calendar.engine.errors import RecurrenceError
from cashflow_calendar.engine.recurrence import has_occurrence_on, occurrences_between
from cashflow_calendar.models.items import (
    DashboardSummary,
    DayEntry,
    ItemCollections,
    OneTimeItem,
    PeriodTotals,
    RecurringItem,
)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a calendar month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def month_totals(
    recurring: Iterable[RecurringItem],
    one_time: Iterable[OneTimeItem],
    year: int,
    month: int,
    max_iterations: Optional[int] = None,
    diagnostics: Optional[DiagnosticLogger] = None,
) -> PeriodTotals:
    """
    Totals for one calendar month.

    Every occurrence of a recurring item inside the month counts (a weekly
    bill counts four or five times). One-time items count when dated in the
    month. Items are totalled as given; direction is the caller's concern.
    """
    logger = diagnostics or get_diagnostic_logger()
    period_start, period_end = month_bounds(year, month)

    recurring_total = Decimal("0")
    for item in recurring:
        try:
            hits = sum(1 for _ in occurrences_between(
                item.start_date,
                item.interval,
                period_start,
                period_end,
                max_iterations=max_iterations,
                item_id=item.id,
                diagnostics=logger,
            ))
        except RecurrenceError:
            continue
        recurring_total += item.amount * hits

    one_time_total = sum(
        (item.amount for item in one_time if period_start <= item.date <= period_end),
        Decimal("0"),
    )

    return PeriodTotals(
        period_start=period_start,
        period_end=period_end,
        recurring_total=recurring_total,
        one_time_total=one_time_total,
    )


def dashboard_summary(items: ItemCollections) -> DashboardSummary:
    """
    Configured amounts, each item counted once.

    The expense breakdown groups every expense (recurring and one-time) by
    name; items sharing a name are added together.
    """
    total_income = Decimal("0")
    total_expenses = Decimal("0")
    breakdown: dict[str, Decimal] = {}

    for item in (*items.recurring_income, *items.one_time_income):
        total_income += item.amount

    for item in (*items.recurring_expenses, *items.one_time_expenses):
        total_expenses += item.amount
        breakdown[item.name] = breakdown.get(item.name, Decimal("0")) + item.amount

    return DashboardSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        expense_breakdown=breakdown,
    )


def items_occurring_on(
    items: ItemCollections,
    query_date: date,
    max_iterations: Optional[int] = None,
    diagnostics: Optional[DiagnosticLogger] = None,
) -> list[DayEntry]:
    """Every item applying on `query_date`, tagged with its category."""
    entries = []
    for category, item in items.categorized():
        if category.is_recurring:
            hit = has_occurrence_on(
                item, query_date,
                max_iterations=max_iterations,
                diagnostics=diagnostics,
            )
        else:
            hit = item.date == query_date
        if hit:
            entries.append(DayEntry(
                category=category,
                item_id=item.id,
                name=item.name,
                amount=item.amount,
            ))
    return entries
