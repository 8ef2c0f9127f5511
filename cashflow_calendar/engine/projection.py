"""
Balance Projector

The balance on a target date is the initial balance plus every income
occurrence and minus every expense occurrence that lands inside
[tracking start, target], both ends inclusive.

DESIGN DECISION: Occurrence-sequence semantics. Each recurring item's
occurrences are generated from its own start date and filtered by the
tracking window; occurrences before the tracking start are excluded, not the
whole item. Accumulation is Decimal with no intermediate rounding;
`round_money` is for display only.
"""

from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Iterator, Optional, Sequence

from cashflow_calendar.diagnostics import DiagnosticLogger, get_diagnostic_logger
from cashflow_calendar.engine.errors import RecurrenceError
from cashflow_calendar.engine.normalize import (
    coerce_one_time_items,
    coerce_recurring_items,
)
from cashflow_calendar.engine.recurrence import occurrences_between
from cashflow_calendar.models.items import (
    BalanceAnchor,
    Contribution,
    FinanceSnapshot,
    FlowDirection,
    ItemCollections,
    MarkCategory,
    RecurringItem,
)


_CENT = Decimal("0.01")


def round_money(value: Decimal) -> Decimal:
    """Quantize to cents (half up) for display."""
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


def _signed(amount: Decimal, category: MarkCategory) -> Decimal:
    if category.direction == FlowDirection.INCOME:
        return amount
    return -amount


def _recurring_contributions(
    item: RecurringItem,
    category: MarkCategory,
    window_start: date,
    window_end: date,
    max_iterations: Optional[int],
    diagnostics: DiagnosticLogger,
) -> list[Contribution]:
    """All of one item's contributions, or none if its recurrence stalls."""
    try:
        dates = list(occurrences_between(
            item.start_date,
            item.interval,
            window_start,
            window_end,
            max_iterations=max_iterations,
            item_id=item.id,
            diagnostics=diagnostics,
        ))
    except RecurrenceError:
        # Already logged by the generator; the whole item is dropped
        return []

    amount = _signed(item.amount, category)
    return [
        Contribution(date=d, item_id=item.id, category=category, amount=amount)
        for d in dates
    ]


def iter_contributions(
    items: ItemCollections,
    window_start: date,
    window_end: date,
    max_iterations: Optional[int] = None,
    diagnostics: Optional[DiagnosticLogger] = None,
) -> Iterator[Contribution]:
    """Every contribution dated inside [window_start, window_end], item by item."""
    if window_end < window_start:
        return
    logger = diagnostics or get_diagnostic_logger()

    for category, item in items.categorized():
        if category.is_recurring:
            yield from _recurring_contributions(
                item, category, window_start, window_end, max_iterations, logger,
            )
        elif window_start <= item.date <= window_end:
            yield Contribution(
                date=item.date,
                item_id=item.id,
                category=category,
                amount=_signed(item.amount, category),
            )


def build_collections(
    recurring_income: Optional[Iterable[Any]] = None,
    recurring_expenses: Optional[Iterable[Any]] = None,
    one_time_income: Optional[Iterable[Any]] = None,
    one_time_expenses: Optional[Iterable[Any]] = None,
    diagnostics: Optional[DiagnosticLogger] = None,
) -> ItemCollections:
    """
    Collect items (models or raw records) into an ItemCollections snapshot.

    Raw records that cannot be validated are skipped and logged.
    """
    return ItemCollections(
        recurring_income=coerce_recurring_items(
            recurring_income, diagnostics=diagnostics,
        ),
        recurring_expenses=coerce_recurring_items(
            recurring_expenses, diagnostics=diagnostics,
        ),
        one_time_income=coerce_one_time_items(
            one_time_income, FlowDirection.INCOME, diagnostics=diagnostics,
        ),
        one_time_expenses=coerce_one_time_items(
            one_time_expenses, FlowDirection.EXPENSE, diagnostics=diagnostics,
        ),
    )


def project_collections(
    anchor: BalanceAnchor,
    items: ItemCollections,
    target_date: date,
    max_iterations: Optional[int] = None,
    diagnostics: Optional[DiagnosticLogger] = None,
) -> Decimal:
    """Balance on `target_date` for an already validated snapshot."""
    balance = anchor.initial_balance
    if target_date < anchor.tracking_start_date:
        return balance

    for contribution in iter_contributions(
        items,
        anchor.tracking_start_date,
        target_date,
        max_iterations=max_iterations,
        diagnostics=diagnostics,
    ):
        balance += contribution.amount
    return balance


def project_balance(
    anchor: BalanceAnchor,
    recurring_income: Sequence[Any],
    recurring_expenses: Sequence[Any],
    one_time_income: Sequence[Any],
    one_time_expenses: Sequence[Any],
    target_date: date,
    max_iterations: Optional[int] = None,
    diagnostics: Optional[DiagnosticLogger] = None,
) -> Decimal:
    """
    Project the balance as of `target_date`.

    Items may be models or raw store records; records with an unparseable
    date or a missing field are skipped (and logged), so the result is
    always a number. A target before the tracking start yields the initial
    balance unchanged.
    """
    items = build_collections(
        recurring_income,
        recurring_expenses,
        one_time_income,
        one_time_expenses,
        diagnostics=diagnostics,
    )
    return project_collections(
        anchor,
        items,
        target_date,
        max_iterations=max_iterations,
        diagnostics=diagnostics,
    )


def project_snapshot(
    snapshot: FinanceSnapshot,
    target_date: date,
    max_iterations: Optional[int] = None,
    diagnostics: Optional[DiagnosticLogger] = None,
) -> Decimal:
    """Balance on `target_date` for a snapshot loaded from the store."""
    return project_collections(
        snapshot.anchor,
        snapshot.items,
        target_date,
        max_iterations=max_iterations,
        diagnostics=diagnostics,
    )


def item_contributions(
    anchor: BalanceAnchor,
    items: ItemCollections,
    after: date,
    through: date,
    max_iterations: Optional[int] = None,
    diagnostics: Optional[DiagnosticLogger] = None,
) -> list[Contribution]:
    """
    Contributions dated in (after, through] and on/after the tracking start,
    ordered by date then item id.

    Their sum is exactly the difference between the projected balances on
    `through` and on `after`.
    """
    if through <= after:
        return []
    window_start = max(anchor.tracking_start_date, after + timedelta(days=1))
    if through < window_start:
        return []

    contributions = list(iter_contributions(
        items,
        window_start,
        through,
        max_iterations=max_iterations,
        diagnostics=diagnostics,
    ))
    contributions.sort(key=lambda c: (c.date, c.item_id))
    return contributions
