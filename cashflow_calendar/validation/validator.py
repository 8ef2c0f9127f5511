"""
Item Input Validation

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - FIELD VALIDATION:
- Required field presence (name, amount, date)
- Amount is a positive, finite number
- Date parses as YYYY-MM-DD
- Interval is one of the supported steps

STAGE 2 - CONTEXT CHECKS (only when stage 1 passes):
- Start date before the tracking start (earlier occurrences are not counted)
- Amount with more than two decimal places

IMPORTANT: Validation NEVER silently fixes issues.
It reports them so the form can show them to the user.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional
from uuid import uuid4

from cashflow_calendar.diagnostics import DiagnosticLogger
from cashflow_calendar.engine.dates import parse_date
from cashflow_calendar.models.items import (
    FlowDirection,
    Interval,
    OneTimeItem,
    RecurringItem,
    ValidationIssue,
    ValidationResult,
)


RECURRING_ID_PREFIX = "recurring"
ONE_TIME_ID_PREFIX = "one-time"


def generate_item_id(kind: str) -> str:
    """New unique item id, e.g. `recurring-<uuid>`."""
    return f"{kind}-{uuid4()}"


def _parse_amount(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        value = repr(value)
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    if not amount.is_finite():
        return None
    return amount


class ItemValidator:
    """
    Validates user input for a new or edited item.

    Raw form values are accepted (strings included) so the validator can be
    called before anything is converted.
    """

    def __init__(self, diagnostics: Optional[DiagnosticLogger] = None):
        """
        Initialize validator.

        Args:
            diagnostics: Receives date rejections from parsing. If None,
                         the process-wide diagnostic logger is used.
        """
        self._diagnostics = diagnostics

    def _validate_common(self, name: Any, amount: Any) -> list[ValidationIssue]:
        issues = []

        if not isinstance(name, str) or not name.strip():
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="Please enter a name",
                severity="error",
            ))
        elif len(name.strip()) > 200:
            issues.append(ValidationIssue(
                field="name",
                issue_type="invalid_value",
                message="Name must be 200 characters or fewer",
                severity="error",
                suggested_fix="Shorten the name",
            ))

        parsed = _parse_amount(amount)
        if amount is None or (isinstance(amount, str) and not amount.strip()):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Please enter an amount",
                severity="error",
            ))
        elif parsed is None:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message=f"Amount ({amount}) is not a number",
                severity="error",
                suggested_fix="Enter digits only, e.g. 19.99",
            ))
        elif parsed <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Please enter a valid positive amount",
                severity="error",
                suggested_fix="Income and expenses are told apart by type, not sign",
            ))

        return issues

    def _validate_date(self, field: str, value: Any) -> tuple[Optional[date], list[ValidationIssue]]:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None, [ValidationIssue(
                field=field,
                issue_type="missing",
                message="Please choose a date",
                severity="error",
            )]
        parsed = parse_date(value, diagnostics=self._diagnostics)
        if parsed is None:
            return None, [ValidationIssue(
                field=field,
                issue_type="invalid_format",
                message=f"Date ({value}) is not a valid calendar date",
                severity="error",
                suggested_fix="Use the YYYY-MM-DD format",
            )]
        return parsed, []

    def _context_checks(
        self,
        amount: Any,
        field: str,
        on_date: date,
        tracking_start: Optional[date],
    ) -> list[ValidationIssue]:
        issues = []

        if tracking_start is not None and on_date < tracking_start:
            issues.append(ValidationIssue(
                field=field,
                issue_type="before_tracking_start",
                message=(
                    f"Date ({on_date.isoformat()}) is before the tracking start "
                    f"({tracking_start.isoformat()}); earlier occurrences are not counted"
                ),
                severity="warning",
            ))

        parsed = _parse_amount(amount)
        if parsed is not None and parsed.as_tuple().exponent < -2:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="precision",
                message="Amount has more than two decimal places",
                severity="info",
                suggested_fix="Amounts are shown rounded to cents",
            ))

        return issues

    @staticmethod
    def _result(issues: list[ValidationIssue]) -> ValidationResult:
        return ValidationResult(
            is_valid=not any(issue.severity == "error" for issue in issues),
            issues=issues,
        )

    def validate_recurring(
        self,
        name: Any,
        amount: Any,
        start_date: Any,
        interval: Any,
        tracking_start: Optional[date] = None,
    ) -> ValidationResult:
        """
        Validate a recurring item form.

        Returns:
            ValidationResult with all issues found
        """
        issues = self._validate_common(name, amount)
        parsed_start, date_issues = self._validate_date("start_date", start_date)
        issues.extend(date_issues)

        try:
            Interval(interval)
        except ValueError:
            issues.append(ValidationIssue(
                field="interval",
                issue_type="invalid_value",
                message=f"Unknown interval: {interval!r}",
                severity="error",
                suggested_fix=f"Choose one of: {', '.join(i.value for i in Interval)}",
            ))

        if not any(issue.severity == "error" for issue in issues):
            issues.extend(self._context_checks(amount, "start_date", parsed_start, tracking_start))

        return self._result(issues)

    def validate_one_time(
        self,
        name: Any,
        amount: Any,
        on_date: Any,
        tracking_start: Optional[date] = None,
    ) -> ValidationResult:
        """Validate a one-time item form."""
        issues = self._validate_common(name, amount)
        parsed_date, date_issues = self._validate_date("date", on_date)
        issues.extend(date_issues)

        if not any(issue.severity == "error" for issue in issues):
            issues.extend(self._context_checks(amount, "date", parsed_date, tracking_start))

        return self._result(issues)

    def build_recurring(
        self,
        name: Any,
        amount: Any,
        start_date: Any,
        interval: Any,
        item_id: Optional[str] = None,
    ) -> RecurringItem:
        """
        Validate and build a recurring item; a new id is generated unless
        an existing one is being edited.

        Raises:
            ValueError: the input has errors (message lists them)
        """
        result = self.validate_recurring(name, amount, start_date, interval)
        if result.has_errors:
            raise ValueError(self.get_user_friendly_summary(result))
        return RecurringItem(
            id=item_id or generate_item_id(RECURRING_ID_PREFIX),
            name=name,
            amount=_parse_amount(amount),
            start_date=parse_date(start_date, diagnostics=self._diagnostics),
            interval=Interval(interval),
        )

    def build_one_time(
        self,
        name: Any,
        amount: Any,
        on_date: Any,
        kind: FlowDirection = FlowDirection.EXPENSE,
        item_id: Optional[str] = None,
    ) -> OneTimeItem:
        """Validate and build a one-time item. Raises ValueError on errors."""
        result = self.validate_one_time(name, amount, on_date)
        if result.has_errors:
            raise ValueError(self.get_user_friendly_summary(result))
        return OneTimeItem(
            id=item_id or generate_item_id(ONE_TIME_ID_PREFIX),
            name=name,
            amount=_parse_amount(amount),
            date=parse_date(on_date, diagnostics=self._diagnostics),
            kind=kind,
        )

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """One line per issue, errors first; what a form shows the user."""
        if not result.issues:
            return "All checks passed."

        order = {"error": 0, "warning": 1, "info": 2}
        lines = []
        for issue in sorted(result.issues, key=lambda i: order[i.severity]):
            line = f"{issue.severity.upper()}: {issue.message}"
            if issue.suggested_fix:
                line += f" ({issue.suggested_fix})"
            lines.append(line)
        return "\n".join(lines)
