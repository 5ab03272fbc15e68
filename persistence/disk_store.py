from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from plans.errors import SerializationFailure, StoreUnavailable

from .locks import KeyLockRegistry
from .paths import key_filename, plans_dir

logger = logging.getLogger(__name__)


def _read_json(path: Path) -> Any | None:
    """Return parsed JSON, or None for a missing or empty file."""
    if not path.exists():
        return None
    raw = path.read_text(encoding="utf-8")
    if not raw.strip():
        return None
    return json.loads(raw)


def _atomic_write_json(path: Path, payload: Any) -> None:
    """Write to a temp file then replace, so readers see the old or the new file, never a mix."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True, ensure_ascii=False)
        f.write("\n")
    tmp_path.replace(path)


class DiskHashStore:
    """
    Stores each key as one JSON file of fields under <data_dir>/plans/.

    - One file per key; all fields of a key are replaced together.
    - OS errors surface as StoreUnavailable.
    - A file that is not a JSON object of strings surfaces as SerializationFailure.
    """

    def __init__(self, data_dir: Path):
        try:
            self._dir = plans_dir(data_dir)
        except OSError as e:
            raise StoreUnavailable(f"cannot create plan data dir under {data_dir}: {e}") from e
        self._locks = KeyLockRegistry()

    @property
    def directory(self) -> Path:
        return self._dir

    def _path(self, key: str) -> Path:
        return self._dir / key_filename(key)

    def _load(self, key: str) -> dict[str, str] | None:
        path = self._path(key)
        try:
            raw = _read_json(path)
        except OSError as e:
            raise StoreUnavailable(f"failed to read {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise SerializationFailure(key, f"record file {path.name} is not valid JSON: {e}") from e
        if raw is None:
            return None
        if not isinstance(raw, dict) or not all(isinstance(v, str) for v in raw.values()):
            raise SerializationFailure(key, f"record file {path.name} is not a mapping of string fields")
        return raw

    def get(self, key: str) -> dict[str, str] | None:
        with self._locks.lock_for(key):
            return self._load(key)

    def put_fields(self, key: str, fields: Mapping[str, str]) -> None:
        path = self._path(key)
        with self._locks.lock_for(key):
            current = self._load(key) or {}
            current.update({str(k): str(v) for k, v in fields.items()})
            try:
                _atomic_write_json(path, current)
            except OSError as e:
                raise StoreUnavailable(f"failed to write {path}: {e}") from e
        logger.debug("DISK STORE: wrote %s (%s)", path.name, sorted(fields))

    def delete(self, key: str) -> bool:
        path = self._path(key)
        with self._locks.lock_for(key):
            try:
                path.unlink()
            except FileNotFoundError:
                return False
            except OSError as e:
                raise StoreUnavailable(f"failed to delete {path}: {e}") from e
        return True

    def ping(self) -> bool:
        return self._dir.is_dir()
