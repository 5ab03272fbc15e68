from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ValidationError

from plans.errors import SerializationFailure

from .interfaces import DATA_FIELD, ETAG_FIELD


class StoredRecord(BaseModel):
    """
    Mirrors the two fields kept under each plan key:
      { "data": "<canonical plan JSON>", "etag": "<version tag of data>" }

    `etag` may be absent on records written before tags were cached; readers
    recompute it from `data`.
    """

    data: str
    etag: str | None = None

    @classmethod
    def from_fields(cls, plan_id: str, fields: Mapping[str, Any]) -> "StoredRecord":
        try:
            return cls.model_validate({DATA_FIELD: fields.get(DATA_FIELD), ETAG_FIELD: fields.get(ETAG_FIELD)})
        except ValidationError as e:
            raise SerializationFailure(plan_id, f"stored record has no usable {DATA_FIELD!r} field") from e

    def to_fields(self) -> dict[str, str]:
        fields = {DATA_FIELD: self.data}
        if self.etag is not None:
            fields[ETAG_FIELD] = self.etag
        return fields
