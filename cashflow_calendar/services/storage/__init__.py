"""
Storage Services Package

Provides the abstract key-value store interface, concrete stores and the
Finance Repository that maps finance data onto the store's keys.
"""

from cashflow_calendar.services.storage.interface import (
    KeyValueStoreInterface,
    NotFoundError,
    StorageError,
    StoreConnectionError,
)
from cashflow_calendar.services.storage.json_file import JsonFileKeyValueStore
from cashflow_calendar.services.storage.memory import InMemoryKeyValueStore
from cashflow_calendar.services.storage.repository import (
    COLLECTION_KEYS,
    FinanceRepository,
)

__all__ = [
    # Interfaces
    "KeyValueStoreInterface",
    # Exceptions
    "NotFoundError",
    "StorageError",
    "StoreConnectionError",
    # Implementations
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    # Repository
    "COLLECTION_KEYS",
    "FinanceRepository",
]
