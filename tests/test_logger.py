"""Tests for the diagnostic logger and its configured level."""

import json
import logging

from cashflow_calendar.diagnostics import DiagnosticLogger, configure_logging
from cashflow_calendar.models import DiagnosticEventBuilder, DiagnosticEventType


class TestConfiguredLevel:
    """Tests that LOG_LEVEL and DEBUG_MODE reach the underlying logger."""

    def test_default_level_is_info(self):
        configure_logging("cashflow_calendar.level_default")
        assert logging.getLogger("cashflow_calendar.level_default").level == logging.INFO

    def test_log_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "error")
        configure_logging("cashflow_calendar.level_env")
        assert logging.getLogger("cashflow_calendar.level_env").level == logging.ERROR

    def test_debug_mode_overrides_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        monkeypatch.setenv("DEBUG_MODE", "true")
        configure_logging("cashflow_calendar.level_debug")
        assert logging.getLogger("cashflow_calendar.level_debug").level == logging.DEBUG

    def test_events_below_level_not_logged(self, monkeypatch, caplog):
        """Filtered events still reach the sink; only the log output is dropped."""
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        events = []
        logger = DiagnosticLogger(sink=events.append, logger_name="cashflow_calendar.filtered")

        logger.log(DiagnosticEventBuilder.item_skipped("x", "bad record"))
        logger.log(DiagnosticEventBuilder.store_read_failed(["balance"], "boom"))

        records = [r for r in caplog.records if r.name == "cashflow_calendar.filtered"]
        assert len(records) == 1
        assert json.loads(records[0].getMessage())["event_type"] == "store_read_failed"
        assert [e.event_type for e in events] == [
            DiagnosticEventType.ITEM_SKIPPED,
            DiagnosticEventType.STORE_READ_FAILED,
        ]

    def test_environment_bound_to_records(self, monkeypatch, caplog):
        monkeypatch.setenv("APP_ENVIRONMENT", "staging")
        logger = DiagnosticLogger(logger_name="cashflow_calendar.env")

        logger.log(DiagnosticEventBuilder.store_read_failed(["balance"], "boom"))

        [record] = [r for r in caplog.records if r.name == "cashflow_calendar.env"]
        assert json.loads(record.getMessage())["environment"] == "staging"


class TestSinkFailure:

    def test_failing_sink_does_not_raise(self):
        def broken(event):
            raise RuntimeError("sink down")

        DiagnosticLogger(sink=broken).log(
            DiagnosticEventBuilder.item_skipped("x", "bad record")
        )
