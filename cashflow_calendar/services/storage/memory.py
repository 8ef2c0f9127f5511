"""
In-Memory Key-Value Store

Backs tests and short-lived sessions. Values are kept as the strings that
were written, so anything that survives this store also survives a file.
"""

from typing import Mapping, Optional, Sequence

from cashflow_calendar.services.storage.interface import KeyValueStoreInterface


class InMemoryKeyValueStore(KeyValueStoreInterface):
    """Dict-backed store."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def multi_get(self, keys: Sequence[str]) -> dict[str, Optional[str]]:
        return {key: self._data.get(key) for key in keys}

    async def remove(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def snapshot(self) -> dict[str, str]:
        """Copy of the raw contents (for inspection in tests)."""
        return dict(self._data)
