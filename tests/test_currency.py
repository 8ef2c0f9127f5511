"""Tests for currency formatting."""

from decimal import Decimal

import pytest

from cashflow_calendar.services.currency import (
    SUPPORTED_CURRENCIES,
    SymbolCurrencyFormatter,
    currency_symbol,
    is_supported_currency,
)


@pytest.fixture
def formatter():
    return SymbolCurrencyFormatter()


class TestSupportedCurrencies:

    def test_codes(self):
        assert list(SUPPORTED_CURRENCIES) == ["USD", "EUR", "GBP", "KRW", "CNY", "INR", "KES", "UGX"]

    def test_lookup(self):
        assert currency_symbol("INR") == "₹"
        assert currency_symbol("XYZ") == "$"
        assert currency_symbol(None) == "$"
        assert is_supported_currency("KES") is True
        assert is_supported_currency("JPY") is False


class TestSymbolCurrencyFormatter:

    @pytest.mark.parametrize("amount, code, expected", [
        (Decimal("1234.5"), "USD", "$1,234.50"),
        (Decimal("1234567.891"), "EUR", "€1,234,567.89"),
        (5000, "UGX", "UGX 5,000.00"),
        (Decimal("12"), "KES", "KSh12.00"),
        (Decimal("-5"), "GBP", "-£5.00"),
        (0.1 + 0.2, "USD", "$0.30"),
        (Decimal("9.99"), "XYZ", "$9.99"),
    ])
    def test_format(self, formatter, amount, code, expected):
        assert formatter.format(amount, code) == expected

    def test_none_amount(self, formatter):
        assert formatter.format(None, "USD") == ""
