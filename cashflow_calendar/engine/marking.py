"""
Marking Index Builder

Builds the date -> category-set index used to put dots on a calendar. The
range is inclusive on both ends and is usually
[tracking start, today + N years].
"""

from collections import defaultdict
from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta

from cashflow_calendar.diagnostics import DiagnosticLogger, get_diagnostic_logger
from cashflow_calendar.engine.errors import RecurrenceError
from cashflow_calendar.engine.recurrence import occurrences_between
from cashflow_calendar.models.items import ItemCollections, MarkCategory


MarkingIndex = dict[date, frozenset[MarkCategory]]

MAX_DOT_RANGE_YEARS = 10


def default_range_end(today: date, dot_range_years: int) -> date:
    """`today` plus the configured number of years (0 to 10)."""
    if not 0 <= dot_range_years <= MAX_DOT_RANGE_YEARS:
        raise ValueError(
            f"dot_range_years must be between 0 and {MAX_DOT_RANGE_YEARS}, "
            f"got {dot_range_years}"
        )
    return today + relativedelta(years=dot_range_years)


def build_marking_index(
    items: ItemCollections,
    range_start: date,
    range_end: date,
    max_iterations: Optional[int] = None,
    diagnostics: Optional[DiagnosticLogger] = None,
) -> MarkingIndex:
    """
    Map every date in [range_start, range_end] that has at least one
    occurrence to the categories occurring on it.

    Recurring items are walked from their own start date, so an item that
    starts after `range_start` contributes from its start onward. An item
    whose recurrence stalls contributes nothing. The result is a fresh dict
    ordered by date; the inputs are never modified.
    """
    if range_end < range_start:
        return {}

    logger = diagnostics or get_diagnostic_logger()
    marks: dict[date, set[MarkCategory]] = defaultdict(set)

    for category, item in items.categorized():
        if not category.is_recurring:
            if range_start <= item.date <= range_end:
                marks[item.date].add(category)
            continue

        try:
            dates = list(occurrences_between(
                item.start_date,
                item.interval,
                range_start,
                range_end,
                max_iterations=max_iterations,
                item_id=item.id,
                diagnostics=logger,
            ))
        except RecurrenceError:
            continue
        for occurrence in dates:
            marks[occurrence].add(category)

    return {d: frozenset(marks[d]) for d in sorted(marks)}


def marking_date_keys(index: MarkingIndex) -> dict[str, list[str]]:
    """The index keyed by `YYYY-MM-DD` with sorted category names."""
    return {
        d.isoformat(): sorted(category.value for category in categories)
        for d, categories in index.items()
    }
