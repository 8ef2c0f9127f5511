"""
Item Normalization

Turns loosely typed item records (decoded JSON from the key-value store, or
anything else a caller hands the engine) into validated models. Records that
cannot be trusted are skipped and logged; callers get `None` and move on.
"""

from typing import Any, Iterable, Optional, Union

from pydantic import ValidationError

from cashflow_calendar.diagnostics import DiagnosticLogger, get_diagnostic_logger
from cashflow_calendar.engine.dates import parse_date
from cashflow_calendar.models.diagnostics import DiagnosticEventBuilder
from cashflow_calendar.models.items import (
    FlowDirection,
    Interval,
    OneTimeItem,
    RecurringItem,
)


def _raw_id(raw: Any) -> Optional[str]:
    if isinstance(raw, dict) and raw.get("id") is not None:
        return str(raw["id"])
    return None


def coerce_recurring_item(
    raw: Union[RecurringItem, dict, Any],
    fallback_interval: Optional[Interval] = None,
    store_key: Optional[str] = None,
    diagnostics: Optional[DiagnosticLogger] = None,
) -> Optional[RecurringItem]:
    """
    Validate one recurring record.

    Returns None (and logs why) for a missing field, an unparseable start
    date, a non-positive amount or an unknown interval with no fallback.
    """
    if isinstance(raw, RecurringItem):
        return raw

    logger = diagnostics or get_diagnostic_logger()
    item_id = _raw_id(raw)

    if not isinstance(raw, dict):
        logger.log(DiagnosticEventBuilder.item_skipped(
            item_id, "record is not an object", store_key=store_key,
        ))
        return None

    start_date = parse_date(
        raw.get("startDate", raw.get("start_date")),
        item_id=item_id,
        diagnostics=logger,
    )
    if start_date is None:
        logger.log(DiagnosticEventBuilder.item_skipped(
            item_id, "unparseable start date", store_key=store_key,
        ))
        return None

    raw_interval = raw.get("interval")
    try:
        interval = Interval(raw_interval)
    except ValueError:
        logger.log(DiagnosticEventBuilder.unknown_interval(
            item_id,
            raw_interval,
            fallback_interval.value if fallback_interval else None,
        ))
        if fallback_interval is None:
            return None
        interval = fallback_interval

    try:
        return RecurringItem(
            id=item_id,
            name=raw.get("name"),
            amount=raw.get("amount"),
            start_date=start_date,
            interval=interval,
        )
    except ValidationError as e:
        logger.log(DiagnosticEventBuilder.item_skipped(
            item_id,
            "invalid recurring item",
            store_key=store_key,
            error_message=str(e),
        ))
        return None


def coerce_one_time_item(
    raw: Union[OneTimeItem, dict, Any],
    kind: FlowDirection,
    store_key: Optional[str] = None,
    diagnostics: Optional[DiagnosticLogger] = None,
) -> Optional[OneTimeItem]:
    """
    Validate one one-time record; `kind` comes from the collection it was
    stored in and overrides whatever the record says.
    """
    if isinstance(raw, OneTimeItem):
        if raw.kind != kind:
            return raw.model_copy(update={"kind": kind})
        return raw

    logger = diagnostics or get_diagnostic_logger()
    item_id = _raw_id(raw)

    if not isinstance(raw, dict):
        logger.log(DiagnosticEventBuilder.item_skipped(
            item_id, "record is not an object", store_key=store_key,
        ))
        return None

    on_date = parse_date(raw.get("date"), item_id=item_id, diagnostics=logger)
    if on_date is None:
        logger.log(DiagnosticEventBuilder.item_skipped(
            item_id, "unparseable date", store_key=store_key,
        ))
        return None

    try:
        return OneTimeItem(
            id=item_id,
            name=raw.get("name"),
            amount=raw.get("amount"),
            date=on_date,
            kind=kind,
        )
    except ValidationError as e:
        logger.log(DiagnosticEventBuilder.item_skipped(
            item_id,
            "invalid one-time item",
            store_key=store_key,
            error_message=str(e),
        ))
        return None


def coerce_recurring_items(
    records: Optional[Iterable[Any]],
    fallback_interval: Optional[Interval] = None,
    store_key: Optional[str] = None,
    diagnostics: Optional[DiagnosticLogger] = None,
) -> tuple[RecurringItem, ...]:
    """Validate a collection of recurring records, dropping the bad ones."""
    items = []
    for raw in records or ():
        item = coerce_recurring_item(raw, fallback_interval, store_key, diagnostics)
        if item is not None:
            items.append(item)
    return tuple(items)


def coerce_one_time_items(
    records: Optional[Iterable[Any]],
    kind: FlowDirection,
    store_key: Optional[str] = None,
    diagnostics: Optional[DiagnosticLogger] = None,
) -> tuple[OneTimeItem, ...]:
    """Validate a collection of one-time records, dropping the bad ones."""
    items = []
    for raw in records or ():
        item = coerce_one_time_item(raw, kind, store_key, diagnostics)
        if item is not None:
            items.append(item)
    return tuple(items)
