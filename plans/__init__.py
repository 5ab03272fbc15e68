from __future__ import annotations

from .errors import PlanStoreError, SchemaLoadError, SerializationFailure, StoreUnavailable
from .etag import canonical_json, generate_etag
from .merge import json_equal, merge_patch
from .outcomes import (
    Created,
    Deleted,
    Found,
    NotFound,
    NotModified,
    PreconditionFailed,
    PreconditionRequired,
    Unchanged,
    Updated,
    ValidationFailed,
)
from .store import PlanStore
from .validator import PlanSchemaValidator, ValidationReport

__all__ = [
    "PlanStore",
    "PlanSchemaValidator",
    "ValidationReport",
    "merge_patch",
    "json_equal",
    "canonical_json",
    "generate_etag",
    "Created",
    "Unchanged",
    "Found",
    "NotModified",
    "Updated",
    "Deleted",
    "NotFound",
    "PreconditionFailed",
    "PreconditionRequired",
    "ValidationFailed",
    "PlanStoreError",
    "StoreUnavailable",
    "SerializationFailure",
    "SchemaLoadError",
]
