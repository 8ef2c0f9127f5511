"""
Configuration Management for Cashflow Calendar

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The engine itself takes explicit arguments; these settings only supply the
defaults (iteration caps, calendar range, reminder time, store location).
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cashflow_calendar.models.items import Interval


class EngineSettings(BaseSettings):
    """Projection engine tuning."""

    model_config = SettingsConfigDict(
        env_prefix="CASHFLOW_ENGINE_",
        extra="ignore"
    )

    max_occurrence_iterations: int = Field(
        default=10_000,
        ge=1,
        description="Maximum occurrences generated per recurring item"
    )
    default_dot_range_years: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Calendar marking range (years ahead) when none is stored"
    )
    # None means unknown intervals are rejected at load time
    fallback_interval: Optional[Interval] = Field(
        default=None,
        description="Interval substituted for unknown stored interval values"
    )


class StoreSettings(BaseSettings):
    """Key-value store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="CASHFLOW_STORE_",
        extra="ignore"
    )

    data_path: str = Field(
        default="data/cashflow.json",
        description="Path of the JSON file backing the key-value store"
    )
    retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for file reads/writes before giving up"
    )

    @field_validator('data_path')
    @classmethod
    def validate_data_path(cls, v: str) -> str:
        """Reject an empty path; the file itself is created on first write."""
        if not v.strip():
            raise ValueError("data_path must not be empty")
        return v

    @property
    def data_file(self) -> Path:
        return Path(self.data_path)


class ReminderSettings(BaseSettings):
    """Bill reminder scheduling configuration."""

    model_config = SettingsConfigDict(
        env_prefix="CASHFLOW_REMINDER_",
        extra="ignore"
    )

    hour_utc: int = Field(
        default=9,
        ge=0,
        le=23,
        description="Hour of day (UTC) a reminder fires"
    )
    minute_utc: int = Field(
        default=0,
        ge=0,
        le=59,
        description="Minute of the hour (UTC) a reminder fires"
    )
    default_days_before: int = Field(
        default=1,
        ge=0,
        description="Days before an occurrence to remind when none is stored"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured logs"
    )
    default_currency: str = Field(
        default="USD",
        min_length=3,
        max_length=3,
        description="Currency code used when none is stored"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return v.upper()

    @property
    def effective_log_level(self) -> str:
        """Debug mode lowers the threshold to DEBUG whatever log_level says."""
        return "DEBUG" if self.debug_mode else self.log_level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def engine(self) -> EngineSettings:
        return EngineSettings()

    @property
    def store(self) -> StoreSettings:
        return StoreSettings()

    @property
    def reminders(self) -> ReminderSettings:
        return ReminderSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with a
    `<name>_error` entry describing each failure.
    """
    results = {}
    settings = get_settings()

    for name in ("engine", "store", "reminders", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
