"""Diagnostic logging package."""

from cashflow_calendar.diagnostics.logger import (
    DiagnosticLogger,
    configure_logging,
    get_diagnostic_logger,
)

__all__ = ["DiagnosticLogger", "configure_logging", "get_diagnostic_logger"]
