from __future__ import annotations

import base64
import hashlib
import json
from typing import Any


def canonical_json(doc: Any) -> str:
    """
    Serialize a document the way it is stored and hashed:
    compact separators, keys sorted at every level, non-ASCII kept literal.
    """
    return json.dumps(doc, separators=(",", ":"), sort_keys=True, ensure_ascii=False, allow_nan=False)


def canonical_bytes(doc: Any) -> bytes:
    return canonical_json(doc).encode("utf-8")


def etag_for_serialized(serialized: str) -> str:
    digest = hashlib.sha256(serialized.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def generate_etag(doc: Any) -> str:
    """SHA-256 of the canonical bytes, base64url without padding."""
    return etag_for_serialized(canonical_json(doc))
