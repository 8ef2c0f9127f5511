"""Tests for configuration."""

import pytest
from pydantic import ValidationError

from cashflow_calendar.config import (
    AppSettings,
    EngineSettings,
    StoreSettings,
    get_settings,
    validate_all_settings,
)
from cashflow_calendar.models import Interval


class TestDefaults:

    def test_engine_defaults(self):
        engine = get_settings().engine
        assert engine.max_occurrence_iterations == 10_000
        assert engine.default_dot_range_years == 2
        assert engine.fallback_interval is None

    def test_reminder_defaults(self):
        reminders = get_settings().reminders
        assert (reminders.hour_utc, reminders.minute_utc) == (9, 0)
        assert reminders.default_days_before == 1

    def test_store_defaults(self):
        assert get_settings().store.data_file.name == "cashflow.json"

    def test_validate_all(self):
        results = validate_all_settings()
        assert all(results[name] for name in ("engine", "store", "reminders", "app"))


class TestEnvironment:

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("CASHFLOW_ENGINE_FALLBACK_INTERVAL", "monthly")
        monkeypatch.setenv("CASHFLOW_ENGINE_DEFAULT_DOT_RANGE_YEARS", "5")
        engine = EngineSettings()
        assert engine.fallback_interval == Interval.MONTHLY
        assert engine.default_dot_range_years == 5

    def test_log_level_normalized(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert AppSettings().log_level == "DEBUG"

    def test_debug_mode_lowers_effective_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "warning")
        assert AppSettings().effective_log_level == "WARNING"
        monkeypatch.setenv("DEBUG_MODE", "true")
        assert AppSettings().effective_log_level == "DEBUG"

    def test_invalid_values(self, monkeypatch):
        monkeypatch.setenv("CASHFLOW_ENGINE_DEFAULT_DOT_RANGE_YEARS", "11")
        with pytest.raises(ValidationError):
            EngineSettings()

    def test_empty_data_path(self):
        with pytest.raises(ValidationError):
            StoreSettings(data_path="  ")

    def test_validate_all_reports_failures(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        get_settings.cache_clear()
        results = validate_all_settings()
        assert results["app"] is False
        assert "app_error" in results
        assert results["engine"] is True
