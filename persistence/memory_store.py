from __future__ import annotations

import threading
from typing import Mapping

from .locks import KeyLockRegistry


class InMemoryHashStore:
    """
    Process-local HashStore. Each key's fields live in one dict that is swapped
    whole on write, so a reader never observes a half-applied update.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks = KeyLockRegistry()
        self._rows: dict[str, dict[str, str]] = {}

    def get(self, key: str) -> dict[str, str] | None:
        with self._guard:
            row = self._rows.get(key)
        return dict(row) if row is not None else None

    def put_fields(self, key: str, fields: Mapping[str, str]) -> None:
        with self._locks.lock_for(key):
            with self._guard:
                current = self._rows.get(key, {})
            updated = {**current, **{str(k): str(v) for k, v in fields.items()}}
            with self._guard:
                self._rows[key] = updated

    def delete(self, key: str) -> bool:
        with self._locks.lock_for(key):
            with self._guard:
                return self._rows.pop(key, None) is not None

    def ping(self) -> bool:
        return True

    def keys(self) -> list[str]:
        with self._guard:
            return sorted(self._rows)
