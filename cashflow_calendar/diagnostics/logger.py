"""
Diagnostic Logger

DESIGN DECISION: The engine recovers from bad data locally, so the only trace
of a skipped item or a substituted default is a log record. Every such event
goes through this logger as a structured DiagnosticEvent.

The diagnostic logger:
- Is synchronous, because the engine it serves is synchronous
- Never raises (a failing sink must not break a projection)
- Can forward events to an extra sink (tests collect them this way)
"""

import logging
from typing import Callable, Optional

import structlog

from cashflow_calendar.config import get_settings
from cashflow_calendar.models.diagnostics import DiagnosticEvent, DiagnosticSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


DiagnosticSink = Callable[[DiagnosticEvent], None]


def configure_logging(logger_name: str = "cashflow_calendar") -> None:
    """Apply the configured minimum level (LOG_LEVEL, or DEBUG in debug mode)."""
    logging.getLogger(logger_name).setLevel(get_settings().app.effective_log_level)


class DiagnosticLogger:
    """
    Central diagnostic logging service.

    Logs events to:
    1. Structured local log (always)
    2. An optional sink callable (e.g. a list's append in tests)
    """

    def __init__(
        self,
        sink: Optional[DiagnosticSink] = None,
        logger_name: str = "cashflow_calendar",
    ):
        """
        Initialize diagnostic logger.

        Args:
            sink: Extra receiver for every event. If None, only logs locally.
            logger_name: Name of the underlying structlog logger.
        """
        configure_logging(logger_name)
        self._sink = sink
        self._logger = structlog.get_logger(logger_name).bind(
            environment=get_settings().app.app_environment,
        )

    def log(self, event: DiagnosticEvent) -> None:
        """Log a diagnostic event at a level matching its severity."""
        log_dict = event.to_log_dict()

        if event.severity == DiagnosticSeverity.ERROR:
            self._logger.error("diagnostic_event", **log_dict)
        elif event.severity == DiagnosticSeverity.WARNING:
            self._logger.warning("diagnostic_event", **log_dict)
        elif event.severity == DiagnosticSeverity.DEBUG:
            self._logger.debug("diagnostic_event", **log_dict)
        else:
            self._logger.info("diagnostic_event", **log_dict)

        if self._sink is not None:
            try:
                self._sink(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "diagnostic_sink_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )


_default_logger: Optional[DiagnosticLogger] = None


def get_diagnostic_logger() -> DiagnosticLogger:
    """Process-wide logger used when a caller does not pass one."""
    global _default_logger
    if _default_logger is None:
        _default_logger = DiagnosticLogger()
    return _default_logger
