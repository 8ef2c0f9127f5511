"""
Shared fixtures.

Async code is driven with asyncio.run inside each test, so no async test
plugin is needed.
"""

import pytest

from cashflow_calendar.config import get_settings
from cashflow_calendar.diagnostics import DiagnosticLogger
from cashflow_calendar.models.diagnostics import DiagnosticEvent, DiagnosticEventType


class DiagnosticCollector:
    """A DiagnosticLogger whose events are kept for assertions."""

    def __init__(self):
        self.events: list[DiagnosticEvent] = []
        self.logger = DiagnosticLogger(sink=self.events.append)

    def of_type(self, event_type: DiagnosticEventType) -> list[DiagnosticEvent]:
        return [e for e in self.events if e.event_type == event_type]

    def types(self) -> set[DiagnosticEventType]:
        return {e.event_type for e in self.events}


@pytest.fixture
def diagnostics() -> DiagnosticCollector:
    return DiagnosticCollector()


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Every test starts from default settings."""
    for name in (
        "CASHFLOW_ENGINE_MAX_OCCURRENCE_ITERATIONS",
        "CASHFLOW_ENGINE_DEFAULT_DOT_RANGE_YEARS",
        "CASHFLOW_ENGINE_FALLBACK_INTERVAL",
        "CASHFLOW_STORE_DATA_PATH",
        "CASHFLOW_STORE_RETRY_ATTEMPTS",
        "CASHFLOW_REMINDER_HOUR_UTC",
        "CASHFLOW_REMINDER_MINUTE_UTC",
        "CASHFLOW_REMINDER_DEFAULT_DAYS_BEFORE",
        "DEFAULT_CURRENCY",
        "LOG_LEVEL",
        "DEBUG_MODE",
        "APP_ENVIRONMENT",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
