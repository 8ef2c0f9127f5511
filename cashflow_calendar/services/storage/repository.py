"""
Finance Repository

Reads and writes the persisted layout:

    balance                 decimal string
    startDate/balanceDate   YYYY-MM-DD string
    recurringBills          JSON array of {id, name, amount, startDate, interval}
    recurringIncome         JSON array of {id, name, amount, startDate, interval}
    oneTimeSpends           JSON array of {id, name, amount, date}
    oneTimeIncome           JSON array of {id, name, amount, date}
    dotRangeYears           integer string (0-10)
    @user_currency          three-letter currency code

DESIGN DECISION: Malformed persisted data never reaches the engine. Every
value is decoded here, bad values are replaced by safe defaults (empty
collection, zero balance, today's date) and each substitution is logged.
The engine then only ever sees a validated FinanceSnapshot.
"""

import json
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union

from cashflow_calendar.config import get_settings
from cashflow_calendar.diagnostics import DiagnosticLogger, get_diagnostic_logger
from cashflow_calendar.engine.dates import format_date, parse_date, today_utc
from cashflow_calendar.engine.marking import MAX_DOT_RANGE_YEARS
from cashflow_calendar.engine.normalize import (
    coerce_one_time_items,
    coerce_recurring_items,
)
from cashflow_calendar.models.diagnostics import DiagnosticEventBuilder
from cashflow_calendar.models.items import (
    BalanceAnchor,
    FinanceSnapshot,
    FlowDirection,
    Interval,
    ItemCollections,
    MarkCategory,
    OneTimeItem,
    RecurringItem,
)
from cashflow_calendar.services.currency import is_supported_currency
from cashflow_calendar.services.storage.interface import (
    KeyValueStoreInterface,
    NotFoundError,
    StorageError,
)


# Store keys
BALANCE_KEY = "balance"
START_DATE_KEY = "startDate"
LEGACY_START_DATE_KEY = "balanceDate"
RECURRING_BILLS_KEY = "recurringBills"
RECURRING_INCOME_KEY = "recurringIncome"
ONE_TIME_SPENDS_KEY = "oneTimeSpends"
ONE_TIME_INCOME_KEY = "oneTimeIncome"
DOT_RANGE_YEARS_KEY = "dotRangeYears"
CURRENCY_KEY = "@user_currency"

COLLECTION_KEYS: dict[MarkCategory, str] = {
    MarkCategory.RECURRING_EXPENSE: RECURRING_BILLS_KEY,
    MarkCategory.RECURRING_INCOME: RECURRING_INCOME_KEY,
    MarkCategory.ONE_TIME_EXPENSE: ONE_TIME_SPENDS_KEY,
    MarkCategory.ONE_TIME_INCOME: ONE_TIME_INCOME_KEY,
}

SNAPSHOT_KEYS = [
    BALANCE_KEY,
    START_DATE_KEY,
    LEGACY_START_DATE_KEY,
    RECURRING_BILLS_KEY,
    RECURRING_INCOME_KEY,
    ONE_TIME_SPENDS_KEY,
    ONE_TIME_INCOME_KEY,
    DOT_RANGE_YEARS_KEY,
    CURRENCY_KEY,
]


StoredItem = Union[RecurringItem, OneTimeItem]


class FinanceRepository:
    """
    The only component that knows how finance data is laid out in the store.

    All methods are async because the store is; decoding and validation are
    synchronous and happen after the values are read.
    """

    def __init__(
        self,
        store: KeyValueStoreInterface,
        diagnostics: Optional[DiagnosticLogger] = None,
        fallback_interval: Optional[Interval] = None,
        default_dot_range_years: Optional[int] = None,
        default_currency: Optional[str] = None,
    ):
        settings = get_settings()
        engine_settings = settings.engine
        self._store = store
        self._diagnostics = diagnostics or get_diagnostic_logger()
        self._fallback_interval = fallback_interval or engine_settings.fallback_interval
        self._default_dot_range_years = (
            default_dot_range_years
            if default_dot_range_years is not None
            else engine_settings.default_dot_range_years
        )
        self._default_currency = default_currency or settings.app.default_currency

    # ===== Decoding =====

    def _decode_records(self, key: str, raw: Optional[str]) -> list[Any]:
        """A stored JSON array, or [] (logged) when absent or malformed."""
        if raw is None:
            return []
        try:
            records = json.loads(raw)
        except (TypeError, ValueError) as e:
            self._diagnostics.log(DiagnosticEventBuilder.store_value_malformed(key, str(e)))
            return []
        if records is None:
            return []
        if not isinstance(records, list):
            self._diagnostics.log(DiagnosticEventBuilder.store_value_malformed(
                key, f"expected a JSON array, got {type(records).__name__}",
            ))
            return []
        return records

    def _decode_balance(self, raw: Optional[str]) -> Decimal:
        if raw is None:
            return Decimal("0")
        try:
            balance = Decimal(raw.strip())
        except (InvalidOperation, AttributeError):
            balance = None
        if balance is None or not balance.is_finite():
            self._diagnostics.log(
                DiagnosticEventBuilder.default_substituted(BALANCE_KEY, 0, raw)
            )
            return Decimal("0")
        return balance

    def _decode_dot_range(self, raw: Optional[str]) -> int:
        if raw is None:
            return self._default_dot_range_years
        try:
            years = int(raw.strip())
        except (ValueError, AttributeError):
            years = -1
        if not 0 <= years <= MAX_DOT_RANGE_YEARS:
            self._diagnostics.log(DiagnosticEventBuilder.default_substituted(
                DOT_RANGE_YEARS_KEY, self._default_dot_range_years, raw,
            ))
            return self._default_dot_range_years
        return years

    def _decode_currency(self, raw: Optional[str]) -> str:
        if raw is None:
            return self._default_currency
        if not is_supported_currency(raw):
            self._diagnostics.log(DiagnosticEventBuilder.default_substituted(
                CURRENCY_KEY, self._default_currency, raw,
            ))
            return self._default_currency
        return raw

    def _decode_items(self, values: dict[str, Optional[str]]) -> ItemCollections:
        def recurring(key: str):
            return coerce_recurring_items(
                self._decode_records(key, values.get(key)),
                fallback_interval=self._fallback_interval,
                store_key=key,
                diagnostics=self._diagnostics,
            )

        def one_time(key: str, kind: FlowDirection):
            return coerce_one_time_items(
                self._decode_records(key, values.get(key)),
                kind,
                store_key=key,
                diagnostics=self._diagnostics,
            )

        return ItemCollections(
            recurring_income=recurring(RECURRING_INCOME_KEY),
            recurring_expenses=recurring(RECURRING_BILLS_KEY),
            one_time_income=one_time(ONE_TIME_INCOME_KEY, FlowDirection.INCOME),
            one_time_expenses=one_time(ONE_TIME_SPENDS_KEY, FlowDirection.EXPENSE),
        )

    async def _read(self, keys: list[str]) -> dict[str, Optional[str]]:
        """One multi_get; a failed read is logged and treated as an empty store."""
        try:
            return await self._store.multi_get(keys)
        except StorageError as e:
            self._diagnostics.log(DiagnosticEventBuilder.store_read_failed(keys, str(e)))
            return {key: None for key in keys}

    async def _write_back(self, key: str, value: str) -> None:
        """Persist a substituted default; a failed write is logged, not raised."""
        try:
            await self._store.set(key, value)
        except StorageError as e:
            self._diagnostics.log(DiagnosticEventBuilder.store_write_failed(key, str(e)))

    # ===== Loading =====

    async def load_snapshot(self, today: Optional[date] = None) -> FinanceSnapshot:
        """
        Read everything a projection needs in one store round trip.

        A missing or unparseable tracking start date becomes `today` and is
        written back, so later projections stay anchored to the same day.
        """
        today = today or today_utc()
        values = await self._read(SNAPSHOT_KEYS)

        raw_start = values.get(START_DATE_KEY) or values.get(LEGACY_START_DATE_KEY)
        tracking_start = None
        if raw_start is not None:
            tracking_start = parse_date(raw_start, diagnostics=self._diagnostics)
        if tracking_start is None:
            tracking_start = today
            self._diagnostics.log(DiagnosticEventBuilder.default_substituted(
                START_DATE_KEY, format_date(today), raw_start,
            ))
            await self._write_back(START_DATE_KEY, format_date(today))

        return FinanceSnapshot(
            anchor=BalanceAnchor(
                initial_balance=self._decode_balance(values.get(BALANCE_KEY)),
                tracking_start_date=tracking_start,
            ),
            items=self._decode_items(values),
            dot_range_years=self._decode_dot_range(values.get(DOT_RANGE_YEARS_KEY)),
            currency_code=self._decode_currency(values.get(CURRENCY_KEY)),
        )

    async def load_items(self) -> ItemCollections:
        """Only the four item collections."""
        keys = list(COLLECTION_KEYS.values())
        return self._decode_items(await self._read(keys))

    async def get_currency(self) -> str:
        values = await self._read([CURRENCY_KEY])
        return self._decode_currency(values.get(CURRENCY_KEY))

    async def get_dot_range_years(self) -> int:
        values = await self._read([DOT_RANGE_YEARS_KEY])
        return self._decode_dot_range(values.get(DOT_RANGE_YEARS_KEY))

    # ===== Settings writes =====

    async def set_balance(
        self,
        balance: Union[Decimal, int, float, str],
        tracking_start: Optional[date] = None,
    ) -> None:
        """Store a new initial balance (and optionally restart tracking)."""
        if isinstance(balance, float):
            balance = Decimal(repr(balance))
        try:
            value = Decimal(balance)
        except InvalidOperation:
            raise ValueError(f"Balance is not a number: {balance!r}") from None
        if not value.is_finite():
            raise ValueError(f"Balance must be finite: {balance!r}")

        await self._store.set(BALANCE_KEY, str(value))
        if tracking_start is not None:
            await self._store.set(START_DATE_KEY, format_date(tracking_start))

    async def set_tracking_start(self, tracking_start: date) -> None:
        await self._store.set(START_DATE_KEY, format_date(tracking_start))

    async def set_dot_range_years(self, years: int) -> None:
        if not 0 <= years <= MAX_DOT_RANGE_YEARS:
            raise ValueError(
                f"dot_range_years must be between 0 and {MAX_DOT_RANGE_YEARS}, got {years}"
            )
        await self._store.set(DOT_RANGE_YEARS_KEY, str(years))

    async def set_currency(self, currency_code: str) -> None:
        if not is_supported_currency(currency_code):
            raise ValueError(f"Unsupported currency: {currency_code!r}")
        await self._store.set(CURRENCY_KEY, currency_code)

    # ===== Item writes =====

    async def _read_records(self, key: str) -> list[Any]:
        return self._decode_records(key, await self._store.get(key))

    async def _write_records(self, key: str, records: list[Any]) -> None:
        await self._store.set(key, json.dumps(records))

    @staticmethod
    def _check_category(category: MarkCategory, item: StoredItem) -> None:
        expected = RecurringItem if category.is_recurring else OneTimeItem
        if not isinstance(item, expected):
            raise TypeError(
                f"{category.value} holds {expected.__name__}, got {type(item).__name__}"
            )

    async def add_item(self, category: MarkCategory, item: StoredItem) -> None:
        """Append an item to its collection; ids must be unique within it."""
        self._check_category(category, item)
        key = COLLECTION_KEYS[category]
        records = await self._read_records(key)
        if any(isinstance(r, dict) and str(r.get("id")) == item.id for r in records):
            raise ValueError(f"Item {item.id} already exists in {key}")
        records.append(item.to_storage_dict())
        await self._write_records(key, records)

    async def update_item(self, category: MarkCategory, item: StoredItem) -> None:
        """
        Replace the stored record with the same id.

        Raises:
            NotFoundError: no record with that id exists in the collection
        """
        self._check_category(category, item)
        key = COLLECTION_KEYS[category]
        records = await self._read_records(key)
        for index, record in enumerate(records):
            if isinstance(record, dict) and str(record.get("id")) == item.id:
                records[index] = item.to_storage_dict()
                await self._write_records(key, records)
                return
        raise NotFoundError(f"Item not found in {key}: {item.id}")

    async def delete_item(self, category: MarkCategory, item_id: str) -> bool:
        """Remove a record by id. Returns False if it was not there."""
        key = COLLECTION_KEYS[category]
        records = await self._read_records(key)
        kept = [
            r for r in records
            if not (isinstance(r, dict) and str(r.get("id")) == item_id)
        ]
        if len(kept) == len(records):
            return False
        await self._write_records(key, kept)
        return True
