"""Tests for the occurrence generator and recurrence validator."""

from datetime import date, timedelta
from itertools import islice

import pytest
from dateutil.relativedelta import relativedelta

from cashflow_calendar.config import get_settings
from cashflow_calendar.engine import (
    StalledRecurrenceError,
    UnknownIntervalError,
    has_occurrence_on,
    interval_step,
    next_occurrence,
    occurrences,
    occurrences_between,
)
from cashflow_calendar.models import DiagnosticEventType, Interval, RecurringItem


def _item(start, interval, item_id="bill-1"):
    return RecurringItem(id=item_id, name="Bill", amount=10, start_date=start, interval=interval)


class TestNextOccurrence:
    """Tests for next_occurrence."""

    @pytest.mark.parametrize("interval, expected", [
        (Interval.WEEKLY, date(2024, 1, 22)),
        (Interval.BIWEEKLY, date(2024, 1, 29)),
        (Interval.MONTHLY, date(2024, 2, 15)),
        (Interval.QUARTERLY, date(2024, 4, 15)),
        (Interval.BIANNUALLY, date(2024, 7, 15)),
        (Interval.YEARLY, date(2025, 1, 15)),
    ])
    def test_steps(self, interval, expected):
        assert next_occurrence(date(2024, 1, 15), interval) == expected

    def test_accepts_interval_string(self):
        assert next_occurrence(date(2024, 1, 15), "weekly") == date(2024, 1, 22)

    def test_month_end_clamps(self):
        """Test Jan 31 + 1 month lands on the last day of February."""
        assert next_occurrence(date(2024, 1, 31), Interval.MONTHLY) == date(2024, 2, 29)
        assert next_occurrence(date(2023, 1, 31), Interval.MONTHLY) == date(2023, 2, 28)
        assert next_occurrence(date(2024, 8, 31), Interval.QUARTERLY) == date(2024, 11, 30)

    def test_leap_day_yearly(self):
        assert next_occurrence(date(2024, 2, 29), Interval.YEARLY) == date(2025, 2, 28)

    def test_always_strictly_later(self):
        """Test next_occurrence(d) > d over a range of days and every interval."""
        day = date(2023, 12, 1)
        for _ in range(120):
            for interval in Interval:
                assert next_occurrence(day, interval) > day
            day += timedelta(days=3)

    def test_unknown_interval(self):
        with pytest.raises(UnknownIntervalError):
            next_occurrence(date(2024, 1, 1), "fortnightly")

    @pytest.mark.parametrize("interval", list(Interval))
    def test_calendar_overflow_stalls(self, interval):
        """Test that stepping past the last representable day stalls."""
        with pytest.raises(StalledRecurrenceError) as exc_info:
            next_occurrence(date(9999, 12, 31), interval)
        assert exc_info.value.current == date(9999, 12, 31)

    def test_interval_step(self):
        assert interval_step(Interval.MONTHLY) == relativedelta(months=1)
        with pytest.raises(UnknownIntervalError):
            interval_step("daily")


class TestOccurrences:
    """Tests for the occurrence sequence."""

    def test_starts_at_anchor_and_strictly_increases(self):
        dates = list(islice(occurrences(date(2024, 1, 31), Interval.MONTHLY), 24))
        assert dates[0] == date(2024, 1, 31)
        assert all(a < b for a, b in zip(dates, dates[1:]))

    def test_kth_element_is_k_steps(self):
        """Test the k-th element equals the anchor plus k applications of the step."""
        anchor = date(2024, 1, 31)
        dates = list(islice(occurrences(anchor, Interval.MONTHLY), 12))
        expected = anchor
        for k, value in enumerate(dates):
            assert value == expected, k
            expected = next_occurrence(expected, Interval.MONTHLY)

    def test_clamped_day_carries_forward(self):
        dates = list(islice(occurrences(date(2024, 1, 31), Interval.MONTHLY), 4))
        assert dates == [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 29), date(2024, 4, 29)]

    def test_restartable(self):
        """Test that each call starts a fresh sequence."""
        first = list(islice(occurrences(date(2024, 1, 1), Interval.WEEKLY), 5))
        second = list(islice(occurrences(date(2024, 1, 1), Interval.WEEKLY), 5))
        assert first == second

    def test_iteration_cap(self, diagnostics):
        """Test that the sequence ends at the cap with a warning."""
        dates = list(occurrences(
            date(2024, 1, 1), Interval.WEEKLY, max_iterations=5,
            item_id="bill-1", diagnostics=diagnostics.logger,
        ))
        assert len(dates) == 5
        [event] = diagnostics.of_type(DiagnosticEventType.ITERATION_CAP_REACHED)
        assert event.item_id == "bill-1"
        assert event.details["last_date"] == "2024-01-29"

    def test_cap_from_settings(self, monkeypatch, diagnostics):
        monkeypatch.setenv("CASHFLOW_ENGINE_MAX_OCCURRENCE_ITERATIONS", "3")
        get_settings.cache_clear()
        dates = list(occurrences(date(2024, 1, 1), Interval.YEARLY, diagnostics=diagnostics.logger))
        assert len(dates) == 3

    def test_invalid_cap(self):
        with pytest.raises(ValueError):
            list(occurrences(date(2024, 1, 1), Interval.WEEKLY, max_iterations=0))

    def test_unknown_interval_raises_before_yielding(self):
        with pytest.raises(UnknownIntervalError):
            next(occurrences(date(2024, 1, 1), "fortnightly"))

    def test_stall_is_logged_and_raised(self, diagnostics):
        gen = occurrences(
            date(9999, 12, 25), Interval.WEEKLY,
            item_id="bill-9", diagnostics=diagnostics.logger,
        )
        assert next(gen) == date(9999, 12, 25)
        with pytest.raises(StalledRecurrenceError) as exc_info:
            next(gen)
        assert exc_info.value.item_id == "bill-9"
        [event] = diagnostics.of_type(DiagnosticEventType.RECURRENCE_STALLED)
        assert event.item_id == "bill-9"


class TestOccurrencesBetween:
    """Tests for range-limited occurrences."""

    def test_inclusive_both_ends(self):
        dates = list(occurrences_between(
            date(2024, 1, 1), Interval.WEEKLY, date(2024, 1, 8), date(2024, 1, 22),
        ))
        assert dates == [date(2024, 1, 8), date(2024, 1, 15), date(2024, 1, 22)]

    def test_anchor_after_range(self):
        assert list(occurrences_between(
            date(2025, 1, 1), Interval.WEEKLY, date(2024, 1, 1), date(2024, 12, 31),
        )) == []

    def test_reversed_range(self):
        assert list(occurrences_between(
            date(2024, 1, 1), Interval.WEEKLY, date(2024, 2, 1), date(2024, 1, 1),
        )) == []


class TestHasOccurrenceOn:
    """Tests for the recurrence validator."""

    def test_before_start(self):
        assert has_occurrence_on(_item(date(2024, 1, 15), Interval.MONTHLY), date(2024, 1, 14)) is False

    def test_on_start(self):
        assert has_occurrence_on(_item(date(2024, 1, 15), Interval.MONTHLY), date(2024, 1, 15)) is True

    def test_exact_hit_and_miss(self):
        item = _item(date(2024, 1, 15), Interval.BIWEEKLY)
        assert has_occurrence_on(item, date(2024, 2, 12)) is True
        assert has_occurrence_on(item, date(2024, 2, 5)) is False

    def test_clamped_month_end(self):
        item = _item(date(2024, 1, 31), Interval.MONTHLY)
        assert has_occurrence_on(item, date(2024, 2, 29)) is True
        assert has_occurrence_on(item, date(2024, 3, 31)) is False
        assert has_occurrence_on(item, date(2024, 3, 29)) is True

    def test_far_future(self):
        item = _item(date(2024, 1, 1), Interval.WEEKLY)
        assert has_occurrence_on(item, date(2024, 1, 1) + timedelta(weeks=500)) is True

    def test_stalled_recurrence_answers_false(self, diagnostics):
        item = _item(date(9999, 12, 25), Interval.WEEKLY)
        assert has_occurrence_on(item, date(9999, 12, 31), diagnostics=diagnostics.logger) is False
        assert DiagnosticEventType.RECURRENCE_STALLED in diagnostics.types()
