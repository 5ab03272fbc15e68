from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class Created:
    etag: str


@dataclass(frozen=True)
class Unchanged:
    """A write that had no effect. `document` is set for patches, None for creates."""

    etag: str
    document: dict[str, Any] | None = None


@dataclass(frozen=True)
class Found:
    document: Any
    etag: str


@dataclass(frozen=True)
class NotModified:
    etag: str


@dataclass(frozen=True)
class Updated:
    document: dict[str, Any]
    etag: str


@dataclass(frozen=True)
class Deleted:
    pass


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class PreconditionFailed:
    """The caller's tag is stale; `current_etag` is what the store holds now."""

    current_etag: str


@dataclass(frozen=True)
class PreconditionRequired:
    pass


@dataclass(frozen=True)
class ValidationFailed:
    messages: list[str] = field(default_factory=list)


PutOutcome = Union[Created, Unchanged, ValidationFailed]
GetOutcome = Union[Found, NotModified, NotFound]
PatchOutcome = Union[Updated, Unchanged, NotFound, PreconditionFailed, PreconditionRequired, ValidationFailed]
DeleteOutcome = Union[Deleted, NotFound]
