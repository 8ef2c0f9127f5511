"""Validation package."""

from cashflow_calendar.validation.validator import (
    ItemValidator,
    generate_item_id,
)

__all__ = [
    "ItemValidator",
    "generate_item_id",
]
