from __future__ import annotations

from .disk_store import DiskHashStore
from .interfaces import DATA_FIELD, ETAG_FIELD, HashStore
from .memory_store import InMemoryHashStore
from .plan_state import StoredRecord

__all__ = [
    "HashStore",
    "InMemoryHashStore",
    "DiskHashStore",
    "StoredRecord",
    "DATA_FIELD",
    "ETAG_FIELD",
]
