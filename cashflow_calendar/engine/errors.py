"""Engine exceptions."""

from datetime import date
from typing import Optional


class CashflowError(Exception):
    """Base exception for the projection engine."""
    pass


class RecurrenceError(CashflowError):
    """A recurring item cannot produce its occurrence sequence."""
    pass


class UnknownIntervalError(RecurrenceError):
    """Interval value is not one of the supported steps."""

    def __init__(self, interval: object):
        self.interval = interval
        super().__init__(f"Unknown interval: {interval!r}")


class StalledRecurrenceError(RecurrenceError):
    """
    Applying the interval did not move the date strictly forward.

    Also raised when the next date would fall outside the representable
    calendar, which is the only way a valid interval can fail to advance.
    """

    def __init__(self, current: date, interval: object, item_id: Optional[str] = None):
        self.current = current
        self.interval = interval
        self.item_id = item_id
        super().__init__(
            f"Interval {interval!r} does not advance past {current.isoformat()}"
        )
