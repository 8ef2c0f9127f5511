"""
Date Normalizer

Every date the engine stores or compares is a plain calendar date. Strings
are accepted only in `YYYY-MM-DD` form, optionally followed by a time
component that is discarded. Anything else is rejected with `None` so the
caller can skip the item instead of crashing.
"""

import re
from datetime import date, datetime, timezone
from typing import Any, Optional

from cashflow_calendar.diagnostics import DiagnosticLogger, get_diagnostic_logger
from cashflow_calendar.models.diagnostics import DiagnosticEventBuilder


_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})(?:[T ].*)?$")


def parse_date(
    value: Any,
    item_id: Optional[str] = None,
    diagnostics: Optional[DiagnosticLogger] = None,
) -> Optional[date]:
    """
    Parse a `YYYY-MM-DD` string (time component ignored) into a date.

    Date and datetime objects pass through as their calendar day.

    Returns:
        The calendar date, or None when the value is missing, does not
        match the pattern, or names a day that does not exist.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    logger = diagnostics or get_diagnostic_logger()

    if not isinstance(value, str) or not value.strip():
        logger.log(DiagnosticEventBuilder.date_rejected(value, item_id, "missing"))
        return None

    match = _ISO_DATE.match(value.strip())
    if match is None:
        logger.log(DiagnosticEventBuilder.date_rejected(value, item_id, "invalid format"))
        return None

    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        logger.log(
            DiagnosticEventBuilder.date_rejected(value, item_id, "nonexistent calendar day")
        )
        return None


def format_date(value: date) -> str:
    """Format a calendar date as `YYYY-MM-DD`."""
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def to_utc_midnight(value: date) -> datetime:
    """The timezone-aware instant at which a calendar day begins in UTC."""
    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)


def today_utc() -> date:
    """Current calendar day in UTC."""
    return datetime.now(timezone.utc).date()
