"""
JSON File Key-Value Store

DESIGN DECISION: The whole store is one JSON object on disk, read on every
access and rewritten on every write. A personal ledger holds a handful of
keys, so simplicity wins over incremental writes.

TRADEOFFS:
- No locking between processes (concurrent writers are out of scope)
- Writes go to a temporary file first and are then renamed into place, so
  a crash never leaves a half-written store
"""

import json
import os
from pathlib import Path
from typing import Optional, Sequence, Union

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from cashflow_calendar.config import get_settings
from cashflow_calendar.services.storage.interface import (
    KeyValueStoreInterface,
    StorageError,
    StoreConnectionError,
)


class JsonFileKeyValueStore(KeyValueStoreInterface):
    """
    File-backed store.

    Transient OS errors are retried with exponential backoff before being
    surfaced as StorageError.
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        retry_attempts: Optional[int] = None,
    ):
        settings = get_settings().store
        self._path = Path(path) if path is not None else settings.data_file
        self._retry_attempts = retry_attempts or settings.retry_attempts

    @property
    def path(self) -> Path:
        return self._path

    def _retrying(self, func):
        return retry(
            stop=stop_after_attempt(self._retry_attempts),
            wait=wait_exponential(multiplier=1, min=2, max=10),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )(func)

    def _read_file(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        text = self._path.read_text(encoding="utf-8")
        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise StoreConnectionError(f"Store file is not valid JSON: {self._path}: {e}")
        if not isinstance(data, dict):
            raise StoreConnectionError(f"Store file is not a JSON object: {self._path}")
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_file(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
        os.replace(tmp_path, self._path)

    def _load(self) -> dict[str, str]:
        try:
            return self._retrying(self._read_file)()
        except OSError as e:
            raise StorageError(f"Failed to read store {self._path}: {e}")

    def _save(self, data: dict[str, str]) -> None:
        try:
            self._retrying(self._write_file)(data)
        except OSError as e:
            raise StorageError(f"Failed to write store {self._path}: {e}")

    async def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    async def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    async def multi_get(self, keys: Sequence[str]) -> dict[str, Optional[str]]:
        data = self._load()
        return {key: data.get(key) for key in keys}

    async def remove(self, key: str) -> bool:
        data = self._load()
        if key not in data:
            return False
        del data[key]
        self._save(data)
        return True
