"""
Currency Formatting

The engine is currency-agnostic; only display goes through a formatter keyed
by the user's selected currency code.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

from cashflow_calendar.engine.projection import round_money


class Currency(BaseModel):
    """A selectable display currency."""
    model_config = ConfigDict(frozen=True)

    code: str
    symbol: str
    name: str


SUPPORTED_CURRENCIES: dict[str, Currency] = {
    c.code: c
    for c in (
        Currency(code="USD", symbol="$", name="Dollar"),
        Currency(code="EUR", symbol="€", name="Euro"),
        Currency(code="GBP", symbol="£", name="Pound"),
        Currency(code="KRW", symbol="₩", name="Won"),
        Currency(code="CNY", symbol="¥", name="Yen"),
        Currency(code="INR", symbol="₹", name="Rupee"),
        Currency(code="KES", symbol="KSh", name="Kenyan Shilling"),
        Currency(code="UGX", symbol="UGX ", name="Ugandan Shilling"),
    )
}

DEFAULT_CURRENCY_CODE = "USD"


def is_supported_currency(code: Optional[str]) -> bool:
    return code in SUPPORTED_CURRENCIES


def currency_symbol(code: Optional[str]) -> str:
    """Symbol for a code; unknown codes get the dollar sign."""
    currency = SUPPORTED_CURRENCIES.get(code or "")
    return currency.symbol if currency else SUPPORTED_CURRENCIES[DEFAULT_CURRENCY_CODE].symbol


class CurrencyFormatterInterface(ABC):
    """Turns an amount into a display string for a currency code."""

    @abstractmethod
    def format(
        self,
        amount: Optional[Union[Decimal, int, float]],
        currency_code: str,
    ) -> str:
        """
        Format an amount for display.

        Returns:
            The display string, or "" when amount is None
        """
        pass


class SymbolCurrencyFormatter(CurrencyFormatterInterface):
    """
    Symbol, thousands separators and two decimals: `$1,234.56`.

    Negative amounts put the sign before the symbol (`-$5.00`).
    """

    def format(
        self,
        amount: Optional[Union[Decimal, int, float]],
        currency_code: str,
    ) -> str:
        if amount is None:
            return ""
        if isinstance(amount, float):
            amount = Decimal(repr(amount))
        value = round_money(Decimal(amount))
        sign = "-" if value < 0 else ""
        return f"{sign}{currency_symbol(currency_code)}{abs(value):,.2f}"
