"""
Core Data Models for Cashflow Calendar

These models define the schemas for everything the engine consumes and
produces. They are designed to:
1. Enforce the positive-amount invariant at construction time
2. Carry calendar dates only (never local-time instants)
3. Round-trip the persisted camelCase layout through aliases
4. Be immutable, so a snapshot cannot change during a projection

DESIGN DECISION: Amounts are Decimal. Floats read from storage are converted
through their shortest repr so 19.99 stays 19.99 across many occurrences.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

# Used where a field is itself named `date`
CalendarDate = date


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Interval(str, Enum):
    """
    Recurrence step of a recurring item.

    DESIGN DECISION: A closed enum. Unknown stored values are rejected at the
    storage boundary instead of silently becoming monthly deep in the engine.
    """
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    BIANNUALLY = "biannually"
    YEARLY = "yearly"


class FlowDirection(str, Enum):
    """Whether an item adds to or subtracts from the balance."""
    INCOME = "income"
    EXPENSE = "expense"


class MarkCategory(str, Enum):
    """Category dots shown on a calendar day."""
    RECURRING_INCOME = "recurring_income"
    RECURRING_EXPENSE = "recurring_expense"
    ONE_TIME_INCOME = "one_time_income"
    ONE_TIME_EXPENSE = "one_time_expense"

    @property
    def direction(self) -> FlowDirection:
        if self in (MarkCategory.RECURRING_INCOME, MarkCategory.ONE_TIME_INCOME):
            return FlowDirection.INCOME
        return FlowDirection.EXPENSE

    @property
    def is_recurring(self) -> bool:
        return self in (MarkCategory.RECURRING_INCOME, MarkCategory.RECURRING_EXPENSE)

    @classmethod
    def for_recurring(cls, direction: FlowDirection) -> "MarkCategory":
        if direction == FlowDirection.INCOME:
            return cls.RECURRING_INCOME
        return cls.RECURRING_EXPENSE

    @classmethod
    def for_one_time(cls, direction: FlowDirection) -> "MarkCategory":
        if direction == FlowDirection.INCOME:
            return cls.ONE_TIME_INCOME
        return cls.ONE_TIME_EXPENSE


def _strip_time_component(value: Any) -> Any:
    """Drop a trailing time component from an ISO string before date parsing."""
    if isinstance(value, str):
        return value.strip().split("T")[0].split(" ")[0]
    if isinstance(value, datetime):
        return value.date()
    return value


# =============================================================================
# ITEM MODELS
# =============================================================================

class TransactionItem(BaseModel):
    """
    Base of every income/expense item.

    The sign of an item's effect comes from the collection it lives in
    (or `kind` for one-time items), never from the amount.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        frozen=True,
        populate_by_name=True,
    )

    id: str = Field(
        ...,
        min_length=1,
        description="Unique item identifier"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Display label"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Positive, currency-agnostic amount"
    )

    @field_validator('amount', mode='before')
    @classmethod
    def coerce_float_amount(cls, v: Any) -> Any:
        """Convert floats via repr so binary noise never enters the Decimal."""
        if isinstance(v, float):
            return Decimal(repr(v))
        return v


class RecurringItem(TransactionItem):
    """An item repeating at a fixed interval from its start date onward."""

    start_date: date = Field(
        ...,
        alias="startDate",
        description="First occurrence"
    )
    interval: Interval = Field(
        ...,
        description="Step between occurrences"
    )

    @field_validator('start_date', mode='before')
    @classmethod
    def normalize_start_date(cls, v: Any) -> Any:
        return _strip_time_component(v)

    def to_storage_dict(self) -> dict:
        """Persisted shape: {id, name, amount, startDate, interval}."""
        return {
            "id": self.id,
            "name": self.name,
            "amount": float(self.amount),
            "startDate": self.start_date.isoformat(),
            "interval": self.interval.value,
        }


class OneTimeItem(TransactionItem):
    """A single income or expense on one calendar date."""

    date: CalendarDate = Field(
        ...,
        description="The date the item applies to"
    )
    kind: FlowDirection = Field(
        default=FlowDirection.EXPENSE,
        description="Income or expense"
    )

    @field_validator('date', mode='before')
    @classmethod
    def normalize_date(cls, v: Any) -> Any:
        return _strip_time_component(v)

    def to_storage_dict(self) -> dict:
        """Persisted shape: {id, name, amount, date}. `kind` is implied by the key."""
        return {
            "id": self.id,
            "name": self.name,
            "amount": float(self.amount),
            "date": self.date.isoformat(),
        }


class BalanceAnchor(BaseModel):
    """The known balance and the date from which it is valid."""
    model_config = ConfigDict(frozen=True)

    initial_balance: Decimal = Field(
        default=Decimal("0"),
        description="Signed balance on the tracking start date"
    )
    tracking_start_date: date = Field(
        ...,
        description="Occurrences before this date are excluded from projection"
    )

    @field_validator('initial_balance', mode='before')
    @classmethod
    def coerce_float_balance(cls, v: Any) -> Any:
        if isinstance(v, float):
            return Decimal(repr(v))
        return v


class ItemCollections(BaseModel):
    """
    Snapshot of every item collection.

    Tuples, so a caller cannot mutate the collections of an in-flight call
    through this object.
    """
    model_config = ConfigDict(frozen=True)

    recurring_income: tuple[RecurringItem, ...] = ()
    recurring_expenses: tuple[RecurringItem, ...] = ()
    one_time_income: tuple[OneTimeItem, ...] = ()
    one_time_expenses: tuple[OneTimeItem, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (
            self.recurring_income
            or self.recurring_expenses
            or self.one_time_income
            or self.one_time_expenses
        )

    def categorized(self) -> list[tuple[MarkCategory, TransactionItem]]:
        """Every item paired with its calendar category."""
        pairs: list[tuple[MarkCategory, TransactionItem]] = []
        pairs.extend((MarkCategory.RECURRING_INCOME, i) for i in self.recurring_income)
        pairs.extend((MarkCategory.RECURRING_EXPENSE, i) for i in self.recurring_expenses)
        pairs.extend((MarkCategory.ONE_TIME_INCOME, i) for i in self.one_time_income)
        pairs.extend((MarkCategory.ONE_TIME_EXPENSE, i) for i in self.one_time_expenses)
        return pairs


class FinanceSnapshot(BaseModel):
    """Everything loaded from the store before a computation begins."""
    model_config = ConfigDict(frozen=True)

    anchor: BalanceAnchor
    items: ItemCollections = Field(default_factory=ItemCollections)
    dot_range_years: int = Field(
        default=2,
        ge=0,
        le=10,
        description="How many years ahead the calendar is marked"
    )
    currency_code: str = Field(
        default="USD",
        min_length=3,
        max_length=3,
    )


# =============================================================================
# RESULT MODELS
# =============================================================================

class Contribution(BaseModel):
    """One signed balance change produced by an item on a date."""
    model_config = ConfigDict(frozen=True)

    date: CalendarDate
    item_id: str
    category: MarkCategory
    amount: Decimal = Field(
        ...,
        description="Signed: positive for income, negative for expense"
    )


class DayEntry(BaseModel):
    """An item that applies on a specific calendar day."""
    model_config = ConfigDict(frozen=True)

    category: MarkCategory
    item_id: str
    name: str
    amount: Decimal


class PeriodTotals(BaseModel):
    """Recurring plus one-time totals inside a period."""
    model_config = ConfigDict(frozen=True)

    period_start: date
    period_end: date
    recurring_total: Decimal = Decimal("0")
    one_time_total: Decimal = Decimal("0")

    @property
    def total(self) -> Decimal:
        return self.recurring_total + self.one_time_total


class DashboardSummary(BaseModel):
    """Configured income against configured expenses, by name."""
    model_config = ConfigDict(frozen=True)

    total_income: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    expense_breakdown: dict[str, Decimal] = Field(default_factory=dict)

    @property
    def net_balance(self) -> Decimal:
        return self.total_income - self.total_expenses


class ReminderPlan(BaseModel):
    """When and what to notify for a bill's next occurrence."""
    model_config = ConfigDict(frozen=True)

    bill_id: str
    occurrence_date: date
    trigger_at: datetime = Field(
        ...,
        description="Timezone-aware (UTC) instant the notification fires"
    )
    title: str = "Upcoming Bill Reminder"
    body: str = ""


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'invalid_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """Outcome of checking user input for a new or edited item."""

    is_valid: bool = Field(
        ...,
        description="Overall validation result"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")
