"""
JSON Schema validation for plan documents.

The schema is read and compiled once. Full documents are checked against it
as-is; patch documents are checked against a copy with every `required`
list removed, so a patch may carry any subset of fields while each field it
does carry still has to have the right type, enum value and shape.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from jsonschema.exceptions import SchemaError
from jsonschema.validators import validator_for

from .errors import SchemaLoadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationReport:
    """Outcome of validating one document."""

    ok: bool
    errors: list[str] = field(default_factory=list)


def strip_required(schema: Any) -> Any:
    """Return a copy of `schema` with `required` constraints removed at every level."""
    if isinstance(schema, dict):
        out: dict[str, Any] = {}
        for key, value in schema.items():
            # A property literally named "required" maps to a schema (a dict), not a list.
            if key == "required" and isinstance(value, list):
                continue
            out[key] = strip_required(value)
        return out
    if isinstance(schema, list):
        return [strip_required(item) for item in schema]
    return schema


class PlanSchemaValidator:
    def __init__(self, schema: Mapping[str, Any]):
        schema = dict(schema)
        cls = validator_for(schema)
        try:
            cls.check_schema(schema)
        except SchemaError as e:
            raise SchemaLoadError(f"invalid plan schema: {e.message}") from e
        self._schema = schema
        self._full = cls(schema)
        self._partial = cls(strip_required(schema))

    @classmethod
    def from_path(cls, path: Path) -> "PlanSchemaValidator":
        if not path.is_file():
            raise SchemaLoadError(f"plan schema not found: {path}")
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise SchemaLoadError(f"failed to load plan schema from {path}: {e}") from e
        if not isinstance(raw, dict):
            raise SchemaLoadError(f"plan schema at {path} must be a JSON object")
        logger.info("SCHEMA LOAD: %s (%s)", path, raw.get("$id") or raw.get("title") or "untitled")
        return cls(raw)

    @property
    def schema(self) -> dict[str, Any]:
        return self._schema

    def validate(self, doc: Any) -> ValidationReport:
        return self._run(self._full, doc)

    def validate_partial(self, doc: Any) -> ValidationReport:
        return self._run(self._partial, doc)

    @staticmethod
    def _run(validator: Any, doc: Any) -> ValidationReport:
        errors = sorted(validator.iter_errors(doc), key=lambda e: (e.json_path, e.message))
        messages = [f"{e.json_path}: {e.message}" for e in errors]
        return ValidationReport(ok=not messages, errors=messages)
