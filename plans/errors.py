from __future__ import annotations


class PlanStoreError(Exception):
    """Base class for infrastructure failures raised by the plan store."""


class StoreUnavailable(PlanStoreError):
    """The associative backend could not be reached or failed mid-call. Transient."""


class SerializationFailure(PlanStoreError):
    """Stored bytes for a plan could not be decoded; the backend holds corrupt data."""

    def __init__(self, plan_id: str, message: str):
        super().__init__(f"{plan_id}: {message}")
        self.plan_id = plan_id


class SchemaLoadError(PlanStoreError):
    """The plan schema is missing, unparseable or not a valid JSON Schema."""
