"""Configuration package."""

from cashflow_calendar.config.settings import (
    AppSettings,
    EngineSettings,
    ReminderSettings,
    Settings,
    StoreSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "EngineSettings",
    "ReminderSettings",
    "Settings",
    "StoreSettings",
    "get_settings",
    "validate_all_settings",
]
