"""Tests for item input validation."""

from datetime import date
from decimal import Decimal

import pytest

from cashflow_calendar.models import FlowDirection, Interval
from cashflow_calendar.validation import ItemValidator, generate_item_id


@pytest.fixture
def validator(diagnostics):
    return ItemValidator(diagnostics.logger)


def _fields(result):
    return {(issue.field, issue.issue_type) for issue in result.issues}


class TestValidateRecurring:
    """Tests for recurring item validation."""

    def test_valid(self, validator):
        result = validator.validate_recurring("Rent", "800", "2024-01-01", "monthly")
        assert result.is_valid is True
        assert result.issues == []

    def test_missing_name(self, validator):
        result = validator.validate_recurring("   ", "800", "2024-01-01", "monthly")
        assert result.is_valid is False
        assert ("name", "missing") in _fields(result)

    @pytest.mark.parametrize("amount, issue_type", [
        ("", "missing"),
        (None, "missing"),
        ("abc", "invalid_format"),
        ("Infinity", "invalid_format"),
        ("0", "invalid_value"),
        ("-5", "invalid_value"),
    ])
    def test_bad_amount(self, validator, amount, issue_type):
        result = validator.validate_recurring("Rent", amount, "2024-01-01", "monthly")
        assert result.has_errors
        assert ("amount", issue_type) in _fields(result)

    @pytest.mark.parametrize("start_date, issue_type", [
        ("", "missing"),
        ("2024-02-30", "invalid_format"),
        ("01/02/2024", "invalid_format"),
    ])
    def test_bad_date(self, validator, start_date, issue_type):
        result = validator.validate_recurring("Rent", "800", start_date, "monthly")
        assert ("start_date", issue_type) in _fields(result)

    def test_unknown_interval(self, validator):
        result = validator.validate_recurring("Rent", "800", "2024-01-01", "fortnightly")
        assert ("interval", "invalid_value") in _fields(result)
        [issue] = result.issues
        assert "biweekly" in issue.suggested_fix

    def test_all_errors_reported_together(self, validator):
        result = validator.validate_recurring("", "-1", "nope", "daily")
        assert result.error_count == 4

    def test_before_tracking_start_is_a_warning(self, validator):
        result = validator.validate_recurring(
            "Rent", "800", "2023-12-01", "monthly", tracking_start=date(2024, 1, 1),
        )
        assert result.is_valid is True
        assert ("start_date", "before_tracking_start") in _fields(result)

    def test_sub_cent_amount_is_info(self, validator):
        result = validator.validate_recurring("Rent", "10.555", "2024-01-01", "monthly")
        assert result.is_valid is True
        assert [i.severity for i in result.issues] == ["info"]


class TestValidateOneTime:
    """Tests for one-time item validation."""

    def test_valid(self, validator):
        assert validator.validate_one_time("TV", 299.99, "2024-02-02").is_valid is True

    def test_bad_date(self, validator):
        result = validator.validate_one_time("TV", 10, "2024-13-01")
        assert ("date", "invalid_format") in _fields(result)


class TestBuildItems:
    """Tests for building items from valid input."""

    def test_build_recurring(self, validator):
        item = validator.build_recurring(" Rent ", "800.50", "2024-01-01T00:00:00Z", "monthly")
        assert item.id.startswith("recurring-")
        assert item.name == "Rent"
        assert item.amount == Decimal("800.50")
        assert item.start_date == date(2024, 1, 1)
        assert item.interval == Interval.MONTHLY

    def test_build_keeps_existing_id(self, validator):
        item = validator.build_recurring("Rent", "800", "2024-01-01", "monthly", item_id="rent")
        assert item.id == "rent"

    def test_build_one_time(self, validator):
        item = validator.build_one_time("Bonus", 250, "2024-06-30", kind=FlowDirection.INCOME)
        assert item.id.startswith("one-time-")
        assert item.kind == FlowDirection.INCOME
        assert item.date == date(2024, 6, 30)

    def test_build_invalid_raises(self, validator):
        with pytest.raises(ValueError, match="positive amount"):
            validator.build_one_time("TV", "-1", "2024-02-02")

    def test_generated_ids_unique(self):
        assert generate_item_id("recurring") != generate_item_id("recurring")


class TestSummary:

    def test_summary_orders_errors_first(self, validator):
        result = validator.validate_recurring("", "10.555", "2023-01-01", "monthly")
        summary = validator.get_user_friendly_summary(result)
        assert summary.splitlines()[0].startswith("ERROR:")

    def test_summary_when_clean(self, validator):
        result = validator.validate_one_time("TV", 10, "2024-02-02")
        assert validator.get_user_friendly_summary(result) == "All checks passed."
