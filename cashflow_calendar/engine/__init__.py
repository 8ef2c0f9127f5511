"""
Engine Package

Pure, synchronous computations over calendar dates: date normalization,
occurrence generation, balance projection, calendar marking and summaries.
Nothing here touches storage.
"""

from cashflow_calendar.engine.dates import (
    format_date,
    parse_date,
    to_utc_midnight,
    today_utc,
)
from cashflow_calendar.engine.errors import (
    CashflowError,
    RecurrenceError,
    StalledRecurrenceError,
    UnknownIntervalError,
)
from cashflow_calendar.engine.marking import (
    build_marking_index,
    default_range_end,
    marking_date_keys,
)
from cashflow_calendar.engine.normalize import (
    coerce_one_time_item,
    coerce_one_time_items,
    coerce_recurring_item,
    coerce_recurring_items,
)
from cashflow_calendar.engine.projection import (
    build_collections,
    item_contributions,
    iter_contributions,
    project_balance,
    project_collections,
    project_snapshot,
    round_money,
)
from cashflow_calendar.engine.recurrence import (
    has_occurrence_on,
    interval_step,
    next_occurrence,
    occurrences,
    occurrences_between,
)
from cashflow_calendar.engine.summary import (
    dashboard_summary,
    items_occurring_on,
    month_bounds,
    month_totals,
)

__all__ = [
    # Dates
    "format_date",
    "parse_date",
    "to_utc_midnight",
    "today_utc",
    # Errors
    "CashflowError",
    "RecurrenceError",
    "StalledRecurrenceError",
    "UnknownIntervalError",
    # Recurrence
    "has_occurrence_on",
    "interval_step",
    "next_occurrence",
    "occurrences",
    "occurrences_between",
    # Normalization
    "coerce_one_time_item",
    "coerce_one_time_items",
    "coerce_recurring_item",
    "coerce_recurring_items",
    # Projection
    "build_collections",
    "item_contributions",
    "iter_contributions",
    "project_balance",
    "project_collections",
    "project_snapshot",
    "round_money",
    # Marking
    "build_marking_index",
    "default_range_end",
    "marking_date_keys",
    # Summaries
    "dashboard_summary",
    "items_occurring_on",
    "month_bounds",
    "month_totals",
]
