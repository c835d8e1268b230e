# chat_client/runtime_state/storage.py
# -*- coding: utf-8 -*-
"""
Assistant Chat Client — Key-value storage backends
--------------------------------------------------
The session store only needs a tiny string-keyed, string-valued store:

    chatMessages  -> JSON-encoded list of messages
    chatThreadId  -> plain thread id string

Anything that implements `KeyValueStorage` can back the session. Two
backends ship here:

- JsonFileStorage : one JSON object on disk, rewritten atomically.
- MemoryStorage   : dict in memory (tests, or "no persistence" mode).

`set_many` writes several keys as one unit: either all of them land or
none do. Backends raise StorageUnavailable when a write cannot be
completed. Reads never raise for JsonFileStorage: a missing or corrupt
file reads as empty.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Mapping, Optional, Protocol, Union

from chat_client.utils import read_json_safely, write_json_atomic

logger = logging.getLogger(__name__)


class StorageUnavailable(Exception):
    """Raised when the backing store cannot be written (disk full, read-only, ...)."""


class KeyValueStorage(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def set_many(self, items: Mapping[str, str]) -> None: ...


class MemoryStorage:
    """Plain dict storage. Never fails."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})

    def set_many(self, items: Mapping[str, str]) -> None:
        self.data.update(items)


class JsonFileStorage:
    """
    Key-value storage backed by a single JSON object file.

    The file is read once, lazily, on first access. Every write rewrites the
    whole object with write_json_atomic, so a crash leaves either the old or
    the new file, never a partial one. The in-memory copy only changes once
    the write has succeeded.

    Non-string values found in the file are ignored on read.
    """

    def __init__(self, path: Union[Path, str]) -> None:
        self.path: Path = Path(path)
        self._data: Optional[Dict[str, str]] = None

    def _ensure_loaded(self) -> Dict[str, str]:
        if self._data is None:
            raw = read_json_safely(self.path, default={}, log_missing=True)
            if not isinstance(raw, dict):
                logger.warning(
                    "[JsonFileStorage] %s does not hold a JSON object; ignoring it.",
                    self.path,
                )
                raw = {}
            self._data = {k: v for k, v in raw.items() if isinstance(v, str)}
        return self._data

    def get(self, key: str) -> Optional[str]:
        return self._ensure_loaded().get(key)

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})

    def set_many(self, items: Mapping[str, str]) -> None:
        data = {**self._ensure_loaded(), **items}
        try:
            write_json_atomic(self.path, data)
        except OSError as exc:
            raise StorageUnavailable(f"cannot write {self.path}: {exc}") from exc
        self._data = data
