"""
Occurrence Generator and Recurrence Validator

A recurring item is an infinite, strictly increasing sequence of dates that
starts at the item's start date. The sequence is produced lazily and capped,
so a pathological configuration can never loop forever.

MONTH OVERFLOW: month and year steps use dateutil's relativedelta, which
clamps to the last valid day of the target month (Jan 31 + 1 month is
Feb 28 or 29; Feb 29 + 1 year is Feb 28). Each occurrence is the previous
one plus one step, so a clamped day carries forward to later months.
"""

from datetime import date
from typing import Iterator, Optional, Union

from dateutil.relativedelta import relativedelta

from cashflow_calendar.config import get_settings
from cashflow_calendar.diagnostics import DiagnosticLogger, get_diagnostic_logger
from cashflow_calendar.engine.errors import (
    RecurrenceError,
    StalledRecurrenceError,
    UnknownIntervalError,
)
from cashflow_calendar.models.diagnostics import DiagnosticEventBuilder
from cashflow_calendar.models.items import Interval, RecurringItem


_STEPS: dict[Interval, relativedelta] = {
    Interval.WEEKLY: relativedelta(days=7),
    Interval.BIWEEKLY: relativedelta(days=14),
    Interval.MONTHLY: relativedelta(months=1),
    Interval.QUARTERLY: relativedelta(months=3),
    Interval.BIANNUALLY: relativedelta(months=6),
    Interval.YEARLY: relativedelta(years=1),
}


def interval_step(interval: Union[Interval, str]) -> relativedelta:
    """The calendar step for an interval; raises UnknownIntervalError."""
    try:
        return _STEPS[Interval(interval)]
    except ValueError:
        raise UnknownIntervalError(interval) from None


def next_occurrence(current: date, interval: Union[Interval, str]) -> date:
    """
    The next occurrence strictly after `current`.

    Raises:
        UnknownIntervalError: interval is not a supported step
        StalledRecurrenceError: the step does not advance the date
    """
    step = interval_step(interval)
    try:
        upcoming = current + step
    except (OverflowError, ValueError):
        # Past date.max: the sequence cannot continue
        raise StalledRecurrenceError(current, interval)

    if upcoming <= current:
        raise StalledRecurrenceError(current, interval)
    return upcoming


def _resolve_max_iterations(max_iterations: Optional[int]) -> int:
    if max_iterations is not None:
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        return max_iterations
    return get_settings().engine.max_occurrence_iterations


def occurrences(
    anchor: date,
    interval: Union[Interval, str],
    max_iterations: Optional[int] = None,
    item_id: Optional[str] = None,
    diagnostics: Optional[DiagnosticLogger] = None,
) -> Iterator[date]:
    """
    Yield `anchor` and every later occurrence in increasing order.

    Each call returns a fresh generator. The sequence ends after
    `max_iterations` dates (settings default 10,000) with a warning.

    Raises (while iterating):
        UnknownIntervalError, StalledRecurrenceError. A stall is logged
        before it propagates.
    """
    logger = diagnostics or get_diagnostic_logger()
    limit = _resolve_max_iterations(max_iterations)
    interval_name = getattr(interval, "value", str(interval))
    interval_step(interval)

    current = anchor
    produced = 0
    while True:
        yield current
        produced += 1
        if produced >= limit:
            logger.log(DiagnosticEventBuilder.iteration_cap_reached(
                item_id=item_id,
                interval=interval_name,
                max_iterations=limit,
                last_date=current.isoformat(),
            ))
            return
        try:
            current = next_occurrence(current, interval)
        except StalledRecurrenceError as e:
            e.item_id = item_id
            logger.log(DiagnosticEventBuilder.recurrence_stalled(
                item_id=item_id,
                interval=interval_name,
                current=current.isoformat(),
            ))
            raise


def occurrences_between(
    anchor: date,
    interval: Union[Interval, str],
    range_start: date,
    range_end: date,
    max_iterations: Optional[int] = None,
    item_id: Optional[str] = None,
    diagnostics: Optional[DiagnosticLogger] = None,
) -> Iterator[date]:
    """Occurrences inside [range_start, range_end]; stops once past range_end."""
    if range_end < range_start or anchor > range_end:
        return
    for occurrence in occurrences(
        anchor,
        interval,
        max_iterations=max_iterations,
        item_id=item_id,
        diagnostics=diagnostics,
    ):
        if occurrence > range_end:
            return
        if occurrence >= range_start:
            yield occurrence


def has_occurrence_on(
    item: RecurringItem,
    query_date: date,
    max_iterations: Optional[int] = None,
    diagnostics: Optional[DiagnosticLogger] = None,
) -> bool:
    """
    Does the recurring item have an occurrence exactly on `query_date`?

    The walk stops at the first occurrence past the query date. A stalled
    recurrence (already logged by the generator) answers False.
    """
    if query_date < item.start_date:
        return False

    try:
        for occurrence in occurrences(
            item.start_date,
            item.interval,
            max_iterations=max_iterations,
            item_id=item.id,
            diagnostics=diagnostics,
        ):
            if occurrence == query_date:
                return True
            if occurrence > query_date:
                return False
    except RecurrenceError:
        return False

    return False
