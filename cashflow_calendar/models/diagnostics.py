"""
Diagnostic Models for Cashflow Calendar

The engine never raises to its callers for bad data. Instead, every skipped
item, substituted default and aborted recurrence produces a diagnostic event
so the reason for a stale or approximate balance can be traced in the logs.

DESIGN DECISION: Diagnostics are log records, not history. They are emitted
and forgotten; nothing reads them back.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class DiagnosticEventType(str, Enum):
    """Kinds of events the engine and its boundaries report."""
    # Date normalization
    DATE_REJECTED = "date_rejected"

    # Recurrence
    RECURRENCE_STALLED = "recurrence_stalled"
    ITERATION_CAP_REACHED = "iteration_cap_reached"

    # Item handling
    ITEM_SKIPPED = "item_skipped"
    UNKNOWN_INTERVAL = "unknown_interval"

    # Store boundary
    STORE_VALUE_MALFORMED = "store_value_malformed"
    STORE_READ_FAILED = "store_read_failed"
    STORE_WRITE_FAILED = "store_write_failed"
    DEFAULT_SUBSTITUTED = "default_substituted"

    # Reminders
    REMINDER_SCHEDULED = "reminder_scheduled"
    REMINDER_CANCELLED = "reminder_cancelled"
    REMINDER_SKIPPED = "reminder_skipped"
    NOTIFICATION_FAILED = "notification_failed"


class DiagnosticSeverity(str, Enum):
    """Severity level for diagnostic events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class DiagnosticEvent(BaseModel):
    """A single diagnostic event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    event_type: DiagnosticEventType = Field(
        ...,
        description="Type of event"
    )
    severity: DiagnosticSeverity = Field(
        default=DiagnosticSeverity.INFO,
        description="Event severity"
    )

    # Context - which item or store key is this about?
    item_id: Optional[str] = Field(
        default=None,
        description="ID of the item this event relates to"
    )
    store_key: Optional[str] = Field(
        default=None,
        description="Key-value store key this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "item_id": self.item_id,
            "store_key": self.store_key,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class DiagnosticEventBuilder:
    """
    Helper class to build diagnostic events with common patterns.

    Usage:
        event = DiagnosticEventBuilder.date_rejected("2024-13-01", "bill-1")
        event = DiagnosticEventBuilder.recurrence_stalled("bill-1", "monthly", "9999-12-31")
    """

    @staticmethod
    def date_rejected(
        raw_value: Any,
        item_id: Optional[str] = None,
        reason: str = "invalid format",
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.DATE_REJECTED,
            severity=DiagnosticSeverity.WARNING,
            item_id=item_id,
            description=f"Date rejected: {reason}",
            details={"raw_value": repr(raw_value)},
        )

    @staticmethod
    def recurrence_stalled(
        item_id: Optional[str],
        interval: str,
        current: str,
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.RECURRENCE_STALLED,
            severity=DiagnosticSeverity.WARNING,
            item_id=item_id,
            description="Interval did not advance the date; item contribution aborted",
            details={"interval": interval, "current": current},
        )

    @staticmethod
    def iteration_cap_reached(
        item_id: Optional[str],
        interval: str,
        max_iterations: int,
        last_date: str,
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.ITERATION_CAP_REACHED,
            severity=DiagnosticSeverity.WARNING,
            item_id=item_id,
            description=f"Stopped after {max_iterations} occurrences",
            details={
                "interval": interval,
                "max_iterations": max_iterations,
                "last_date": last_date,
            },
        )

    @staticmethod
    def item_skipped(
        item_id: Optional[str],
        reason: str,
        store_key: Optional[str] = None,
        error_message: Optional[str] = None,
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.ITEM_SKIPPED,
            severity=DiagnosticSeverity.WARNING,
            item_id=item_id,
            store_key=store_key,
            description=f"Item skipped: {reason}",
            error_message=error_message,
        )

    @staticmethod
    def unknown_interval(
        item_id: Optional[str],
        raw_interval: Any,
        fallback: Optional[str],
    ) -> DiagnosticEvent:
        action = f"using {fallback}" if fallback else "item rejected"
        return DiagnosticEvent(
            event_type=DiagnosticEventType.UNKNOWN_INTERVAL,
            severity=DiagnosticSeverity.WARNING,
            item_id=item_id,
            description=f"Unknown interval {raw_interval!r}, {action}",
            details={"raw_interval": repr(raw_interval), "fallback": fallback},
        )

    @staticmethod
    def store_value_malformed(
        store_key: str,
        error_message: str,
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.STORE_VALUE_MALFORMED,
            severity=DiagnosticSeverity.WARNING,
            store_key=store_key,
            description=f"Stored value for {store_key} could not be decoded",
            error_message=error_message,
        )

    @staticmethod
    def store_read_failed(
        keys: list[str],
        error_message: str,
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.STORE_READ_FAILED,
            severity=DiagnosticSeverity.ERROR,
            description="Key-value store read failed; continuing with defaults",
            details={"keys": keys},
            error_message=error_message,
        )

    @staticmethod
    def store_write_failed(
        store_key: str,
        error_message: str,
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.STORE_WRITE_FAILED,
            severity=DiagnosticSeverity.ERROR,
            description="Key-value store write failed; value kept in memory only",
            store_key=store_key,
            error_message=error_message,
        )

    @staticmethod
    def default_substituted(
        store_key: str,
        default: Any,
        raw_value: Any = None,
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.DEFAULT_SUBSTITUTED,
            severity=DiagnosticSeverity.INFO,
            store_key=store_key,
            description=f"Using default for {store_key}",
            details={"default": str(default), "raw_value": repr(raw_value)},
        )

    @staticmethod
    def reminder_scheduled(
        bill_id: str,
        notification_id: str,
        trigger_at: str,
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.REMINDER_SCHEDULED,
            item_id=bill_id,
            description="Bill reminder scheduled",
            details={"notification_id": notification_id, "trigger_at": trigger_at},
        )

    @staticmethod
    def reminder_cancelled(
        bill_id: str,
        notification_id: str,
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.REMINDER_CANCELLED,
            item_id=bill_id,
            description="Bill reminder cancelled",
            details={"notification_id": notification_id},
        )

    @staticmethod
    def reminder_skipped(
        bill_id: str,
        reason: str,
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.REMINDER_SKIPPED,
            item_id=bill_id,
            description=f"Reminder not scheduled: {reason}",
        )

    @staticmethod
    def notification_failed(
        bill_id: str,
        operation: str,
        error_message: str,
    ) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=DiagnosticEventType.NOTIFICATION_FAILED,
            severity=DiagnosticSeverity.ERROR,
            item_id=bill_id,
            description=f"Notification scheduler {operation} failed",
            error_message=error_message,
        )
