from __future__ import annotations

from typing import Mapping, Protocol

DATA_FIELD = "data"
ETAG_FIELD = "etag"


class HashStore(Protocol):
    """
    Associative backend: each key holds a small mapping of named string fields.

    Implementations must write all fields of one key atomically and return a
    consistent snapshot of them on read. I/O failures raise StoreUnavailable.
    """

    def get(self, key: str) -> dict[str, str] | None:
        """Return every field stored under `key`, or None when the key is absent."""
        ...

    def put_fields(self, key: str, fields: Mapping[str, str]) -> None:
        """Set the given fields under `key` as one atomic write."""
        ...

    def delete(self, key: str) -> bool:
        """Remove `key`; return whether it existed."""
        ...

    def ping(self) -> bool:
        ...
