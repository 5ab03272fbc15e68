"""
Plan Store - conditional document store over an associative backend.

Operations:
- put: validate, then create or replace; identical content is a no-op
- get: fetch with an optional If-None-Match style tag
- patch: merge-patch guarded by a mandatory If-Match style tag
- delete: unconditional removal

Every operation reads fresh state from the backend and holds no lock across
its read-decide-write sequence. The patch precondition is therefore checked
against a snapshot: two patches that read the same tag can both pass and the
later write wins. A backend-side conditional write would close that gap.

Usage:
    store = PlanStore(PlanSchemaValidator.from_path(path), InMemoryHashStore())
    outcome = store.put("plan-1", doc)
    if isinstance(outcome, Created):
        ...
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, TypeVar

from persistence.interfaces import HashStore
from persistence.plan_state import StoredRecord

from .errors import PlanStoreError, SerializationFailure, StoreUnavailable
from .etag import canonical_json, etag_for_serialized
from .merge import json_equal, merge_patch
from .outcomes import (
    Created,
    DeleteOutcome,
    Deleted,
    Found,
    GetOutcome,
    NotFound,
    NotModified,
    PatchOutcome,
    PreconditionFailed,
    PreconditionRequired,
    PutOutcome,
    Unchanged,
    Updated,
    ValidationFailed,
)
from .validator import PlanSchemaValidator

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PlanStore:
    def __init__(self, validator: PlanSchemaValidator, backend: HashStore):
        self._validator = validator
        self._backend = backend

    @property
    def validator(self) -> PlanSchemaValidator:
        return self._validator

    # ------------------------------------------------------------------
    # backend access
    # ------------------------------------------------------------------
    def _call(self, what: str, fn: Callable[..., T], *args: Any) -> T:
        try:
            return fn(*args)
        except PlanStoreError:
            raise
        except OSError as e:
            raise StoreUnavailable(f"{what} failed: {e}") from e

    def _read(self, plan_id: str) -> StoredRecord | None:
        fields = self._call("backend get", self._backend.get, plan_id)
        if not fields:
            return None
        return StoredRecord.from_fields(plan_id, fields)

    def _write(self, plan_id: str, serialized: str, etag: str) -> None:
        record = StoredRecord(data=serialized, etag=etag)
        self._call("backend put", self._backend.put_fields, plan_id, record.to_fields())

    @staticmethod
    def _decode(plan_id: str, record: StoredRecord) -> Any:
        try:
            return json.loads(record.data)
        except json.JSONDecodeError as e:
            raise SerializationFailure(plan_id, f"stored data is not valid JSON: {e}") from e

    @staticmethod
    def _current_etag(plan_id: str, record: StoredRecord) -> str:
        # The tag is always derived from the stored bytes; the cached field is checked, not trusted.
        etag = etag_for_serialized(record.data)
        if record.etag is not None and record.etag != etag:
            logger.warning("PLAN ETAG: cached tag for %s is stale (cached=%s actual=%s)", plan_id, record.etag, etag)
        return etag

    @staticmethod
    def _serialize(doc: Any) -> str | None:
        try:
            return canonical_json(doc)
        except (TypeError, ValueError):
            return None

    # ------------------------------------------------------------------
    # operations
    # ------------------------------------------------------------------
    def put(self, plan_id: str, doc: Any) -> PutOutcome:
        """Create or replace a plan. Re-sending identical content is a no-op."""
        report = self._validator.validate(doc)
        if not report.ok:
            logger.info("PLAN PUT: %s rejected (%d schema errors)", plan_id, len(report.errors))
            return ValidationFailed(report.errors)

        serialized = self._serialize(doc)
        if serialized is None:
            return ValidationFailed(["$: document is not representable as strict JSON"])

        existing = self._read(plan_id)
        if existing is not None and existing.data == serialized:
            logger.info("PLAN PUT: %s unchanged", plan_id)
            return Unchanged(etag=self._current_etag(plan_id, existing))

        etag = etag_for_serialized(serialized)
        self._write(plan_id, serialized, etag)
        logger.info("PLAN PUT: %s %s etag=%s", plan_id, "replaced" if existing else "created", etag)
        return Created(etag=etag)

    def get(self, plan_id: str, client_etag: str | None = None) -> GetOutcome:
        """Fetch a plan; a matching `client_etag` short-circuits to NotModified."""
        record = self._read(plan_id)
        if record is None:
            return NotFound()

        etag = self._current_etag(plan_id, record)
        if client_etag is not None and client_etag == etag:
            return NotModified(etag=etag)

        return Found(document=self._decode(plan_id, record), etag=etag)

    def patch(self, plan_id: str, patch_doc: Any, client_etag: str | None) -> PatchOutcome:
        """
        Merge `patch_doc` into the stored plan if `client_etag` is current.

        Objects merge recursively, arrays are unioned, scalars replace. A patch
        that leaves the plan structurally identical is reported as Unchanged
        and not written.
        """
        if client_etag is None or not client_etag.strip():
            return PreconditionRequired()

        record = self._read(plan_id)
        if record is None:
            return NotFound()

        current_etag = self._current_etag(plan_id, record)
        if client_etag != current_etag:
            logger.info("PLAN PATCH: %s precondition failed (client=%s current=%s)", plan_id, client_etag, current_etag)
            return PreconditionFailed(current_etag=current_etag)

        if not isinstance(patch_doc, dict):
            return ValidationFailed(["$: patch document must be a JSON object"])
        report = self._validator.validate_partial(patch_doc)
        if not report.ok:
            logger.info("PLAN PATCH: %s rejected (%d schema errors)", plan_id, len(report.errors))
            return ValidationFailed(report.errors)

        existing = self._decode(plan_id, record)
        if not isinstance(existing, dict):
            raise SerializationFailure(plan_id, "stored plan is not a JSON object")

        merged = merge_patch(existing, patch_doc)
        if json_equal(merged, existing):
            logger.info("PLAN PATCH: %s unchanged", plan_id)
            return Unchanged(etag=current_etag, document=existing)

        serialized = self._serialize(merged)
        if serialized is None:
            return ValidationFailed(["$: patched document is not representable as strict JSON"])
        etag = etag_for_serialized(serialized)
        self._write(plan_id, serialized, etag)
        logger.info("PLAN PATCH: %s updated etag=%s", plan_id, etag)
        return Updated(document=merged, etag=etag)

    def delete(self, plan_id: str) -> DeleteOutcome:
        existed = self._call("backend delete", self._backend.delete, plan_id)
        logger.info("PLAN DELETE: %s %s", plan_id, "deleted" if existed else "not found")
        return Deleted() if existed else NotFound()

    def ping(self) -> bool:
        return bool(self._call("backend ping", self._backend.ping))
