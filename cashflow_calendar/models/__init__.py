"""
Data Models Package

This package contains all Pydantic models used by Cashflow Calendar.
Everything the engine consumes or returns conforms to these schemas.
"""

from cashflow_calendar.models.items import (
    BalanceAnchor,
    Contribution,
    DashboardSummary,
    DayEntry,
    FinanceSnapshot,
    FlowDirection,
    Interval,
    ItemCollections,
    MarkCategory,
    OneTimeItem,
    PeriodTotals,
    RecurringItem,
    ReminderPlan,
    TransactionItem,
    ValidationIssue,
    ValidationResult,
)
from cashflow_calendar.models.diagnostics import (
    DiagnosticEvent,
    DiagnosticEventBuilder,
    DiagnosticEventType,
    DiagnosticSeverity,
)

__all__ = [
    # Item models
    "BalanceAnchor",
    "Contribution",
    "DashboardSummary",
    "DayEntry",
    "FinanceSnapshot",
    "FlowDirection",
    "Interval",
    "ItemCollections",
    "MarkCategory",
    "OneTimeItem",
    "PeriodTotals",
    "RecurringItem",
    "ReminderPlan",
    "TransactionItem",
    "ValidationIssue",
    "ValidationResult",
    # Diagnostic models
    "DiagnosticEvent",
    "DiagnosticEventBuilder",
    "DiagnosticEventType",
    "DiagnosticSeverity",
]
