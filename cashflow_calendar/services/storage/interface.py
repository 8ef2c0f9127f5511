"""
Abstract Key-Value Store Interface

DESIGN DECISION: Persistence is a flat string-keyed store holding JSON text
or plain strings, the same shape a mobile app's local storage offers.
This allows us to:
1. Keep the persisted layout readable and portable
2. Use in-memory storage for testing
3. Swap in another backend without touching the engine

The interface is intentionally minimal: get, set, multi_get and remove.
Interpreting the values is the Finance Repository's job.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for the key-value store.

    Any store implementation (in-memory, JSON file, etc.) must implement
    these methods.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Read one value.

        Args:
            key: The storage key

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """
        Write one value, replacing any previous value.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def multi_get(self, keys: Sequence[str]) -> dict[str, Optional[str]]:
        """
        Read several values in one round trip.

        Returns:
            A dict containing every requested key; absent keys map to None
        """
        pass

    @abstractmethod
    async def remove(self, key: str) -> bool:
        """
        Delete a key.

        Returns:
            True if the key existed
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class StoreConnectionError(StorageError):
    """Could not open the storage backend."""
    pass
