"""Tests for the date normalizer."""

import time
from datetime import date, datetime, timedelta, timezone

import pytest

from cashflow_calendar.engine import format_date, parse_date, to_utc_midnight, today_utc
from cashflow_calendar.models import DiagnosticEventType


class TestParseDate:
    """Tests for parse_date."""

    def test_plain_date(self):
        assert parse_date("2024-03-10") == date(2024, 3, 10)

    @pytest.mark.parametrize("value", [
        "2024-03-10T00:00:00.000Z",
        "2024-03-10T23:59:59+05:30",
        "2024-03-10 08:15",
        "  2024-03-10  ",
    ])
    def test_time_component_discarded(self, value):
        """Test that the calendar day is taken as written, whatever the time."""
        assert parse_date(value) == date(2024, 3, 10)

    @pytest.mark.parametrize("value", ["2024-3-10", "03/10/2024", "20240310", "tomorrow"])
    def test_pattern_mismatch(self, value, diagnostics):
        """Test that non-ISO strings are rejected with a diagnostic."""
        assert parse_date(value, item_id="bill-1", diagnostics=diagnostics.logger) is None
        [event] = diagnostics.of_type(DiagnosticEventType.DATE_REJECTED)
        assert event.item_id == "bill-1"
        assert "invalid format" in event.description

    @pytest.mark.parametrize("value", ["2024-02-30", "2023-02-29", "2024-13-01", "2024-00-10"])
    def test_nonexistent_day(self, value, diagnostics):
        """Test that days that do not exist are rejected, not rolled over."""
        assert parse_date(value, diagnostics=diagnostics.logger) is None
        [event] = diagnostics.of_type(DiagnosticEventType.DATE_REJECTED)
        assert "nonexistent" in event.description

    @pytest.mark.parametrize("value", [None, "", "   ", 20240310, ["2024-03-10"]])
    def test_missing_or_not_a_string(self, value, diagnostics):
        assert parse_date(value, diagnostics=diagnostics.logger) is None
        assert diagnostics.types() == {DiagnosticEventType.DATE_REJECTED}

    def test_leap_day(self):
        assert parse_date("2024-02-29") == date(2024, 2, 29)

    def test_date_and_datetime_pass_through(self, diagnostics):
        assert parse_date(date(2024, 3, 10)) == date(2024, 3, 10)
        assert parse_date(datetime(2024, 3, 10, 23, 30)) == date(2024, 3, 10)
        assert diagnostics.events == []


class TestFormatDate:
    """Tests for formatting and UTC helpers."""

    def test_zero_padded(self):
        assert format_date(date(2024, 3, 5)) == "2024-03-05"

    def test_round_trip(self):
        """Test format then parse yields the same day across a span of years."""
        day = date(2023, 12, 25)
        for _ in range(800):
            assert parse_date(format_date(day)) == day
            day += timedelta(days=1)

    @pytest.mark.skipif(not hasattr(time, "tzset"), reason="requires time.tzset")
    @pytest.mark.parametrize("zone", ["Pacific/Kiritimati", "Pacific/Pago_Pago", "UTC"])
    def test_round_trip_independent_of_host_time_zone(self, zone, monkeypatch):
        monkeypatch.setenv("TZ", zone)
        time.tzset()
        try:
            for day in (date(2024, 1, 1), date(2024, 2, 29), date(2024, 12, 31)):
                assert parse_date(format_date(day)) == day
                assert to_utc_midnight(day).date() == day
        finally:
            monkeypatch.undo()
            time.tzset()

    def test_to_utc_midnight(self):
        instant = to_utc_midnight(date(2024, 3, 10))
        assert instant == datetime(2024, 3, 10, tzinfo=timezone.utc)
        assert instant.utcoffset() == timedelta(0)

    def test_today_utc(self):
        before = datetime.now(timezone.utc).date()
        result = today_utc()
        after = datetime.now(timezone.utc).date()
        assert result in {before, after}
