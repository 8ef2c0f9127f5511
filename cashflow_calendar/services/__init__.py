"""Services package."""

from cashflow_calendar.services.currency import (
    SUPPORTED_CURRENCIES,
    Currency,
    CurrencyFormatterInterface,
    SymbolCurrencyFormatter,
)
from cashflow_calendar.services.storage import (
    FinanceRepository,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    NotFoundError,
    StorageError,
    StoreConnectionError,
)
from cashflow_calendar.services.notifications import (
    InMemoryNotificationScheduler,
    NotificationError,
    NotificationSchedulerInterface,
    ReminderPlanner,
)

__all__ = [
    # Currency
    "SUPPORTED_CURRENCIES",
    "Currency",
    "CurrencyFormatterInterface",
    "SymbolCurrencyFormatter",
    # Storage
    "FinanceRepository",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStoreInterface",
    "NotFoundError",
    "StorageError",
    "StoreConnectionError",
    # Notifications
    "InMemoryNotificationScheduler",
    "NotificationError",
    "NotificationSchedulerInterface",
    "ReminderPlanner",
]
