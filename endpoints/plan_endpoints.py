from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, Header, Request, Response
from fastapi.responses import JSONResponse

from persistence.repositories import AsyncPlanRepository
from plans.outcomes import (
    Created,
    Found,
    NotFound,
    NotModified,
    PreconditionFailed,
    PreconditionRequired,
    Unchanged,
    Updated,
    ValidationFailed,
)

router = APIRouter(prefix="/api/v1", tags=["plans"])
logger = logging.getLogger(__name__)


# -------------------------------------------------------------------
# helpers
# -------------------------------------------------------------------
def _repo(request: Request) -> AsyncPlanRepository:
    return request.app.state.plan_repo


def parse_etag_header(raw: str | None) -> list[str]:
    """
    Split an If-Match / If-None-Match value into bare tags.

    Accepts `"tag"`, `W/"tag"`, bare `tag`, comma-separated lists and `*`.
    """
    if raw is None:
        return []
    tags: list[str] = []
    for part in raw.split(","):
        token = part.strip()
        if token.startswith("W/"):
            token = token[2:].strip()
        if len(token) >= 2 and token[0] == '"' and token[-1] == '"':
            token = token[1:-1]
        if token:
            tags.append(token)
    return tags


def _etag_headers(etag: str) -> dict[str, str]:
    return {"ETag": f'"{etag}"'}


def _api_response(
    status: int,
    message: str,
    *,
    etag: str | None = None,
    errors: list[str] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body: dict[str, Any] = {"status": status, "message": message}
    if etag is not None:
        body["etag"] = etag
    if errors:
        body["errors"] = errors
    return JSONResponse(body, status_code=status, headers=headers)


def _validation_failed(outcome: ValidationFailed) -> JSONResponse:
    return _api_response(400, "Schema validation failed", errors=outcome.messages)


def _unexpected(outcome: Any) -> JSONResponse:
    logger.error("PLAN OUTCOME: unhandled %r", outcome)
    return _api_response(500, "Unexpected plan store outcome")


async def _read_json_body(request: Request) -> tuple[Any, JSONResponse | None]:
    raw = await request.body()
    try:
        return json.loads(raw), None
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        return None, _api_response(400, "Request body is not valid JSON", errors=[str(e)])


# -------------------------------------------------------------------
# HEALTH
# -------------------------------------------------------------------
@router.get("/health")
async def check_health(request: Request):
    if not await _repo(request).ping():
        return _api_response(503, "Plan store is unavailable")
    return _api_response(200, "I'm alive")


# -------------------------------------------------------------------
# PLANS
# -------------------------------------------------------------------
@router.post("/plans")
async def create_plan(request: Request):
    body, error = await _read_json_body(request)
    if error is not None:
        return error
    if not isinstance(body, dict):
        return _api_response(400, "Schema validation failed", errors=["$: plan must be a JSON object"])

    plan_id = body.get("objectId")
    if not isinstance(plan_id, str) or not plan_id.strip():
        return _api_response(400, "Schema validation failed", errors=["$.objectId: a non-empty string is required"])

    outcome = await _repo(request).put(plan_id, body)
    if isinstance(outcome, ValidationFailed):
        return _validation_failed(outcome)
    if isinstance(outcome, Unchanged):
        return _api_response(200, "Plan already exists with identical content", etag=outcome.etag, headers=_etag_headers(outcome.etag))
    if isinstance(outcome, Created):
        return _api_response(201, "Plan created successfully", etag=outcome.etag, headers=_etag_headers(outcome.etag))
    return _unexpected(outcome)


@router.get("/plans/{plan_id}")
async def get_plan(plan_id: str, request: Request, if_none_match: str | None = Header(default=None)):
    tags = parse_etag_header(if_none_match)
    # The store compares a single tag; lists and "*" are resolved here.
    client_etag = tags[0] if len(tags) == 1 and tags[0] != "*" else None

    outcome = await _repo(request).get(plan_id, client_etag)
    if isinstance(outcome, NotFound):
        return _api_response(404, "Plan not found.")
    if isinstance(outcome, NotModified):
        return Response(status_code=304, headers=_etag_headers(outcome.etag))
    if isinstance(outcome, Found):
        if "*" in tags or outcome.etag in tags:
            return Response(status_code=304, headers=_etag_headers(outcome.etag))
        return JSONResponse(outcome.document, headers=_etag_headers(outcome.etag))
    return _unexpected(outcome)


@router.patch("/plans/{plan_id}")
async def patch_plan(plan_id: str, request: Request, if_match: str | None = Header(default=None)):
    tags = parse_etag_header(if_match)
    if not tags:
        return _api_response(428, "If-Match header is required")

    body, error = await _read_json_body(request)
    if error is not None:
        return error

    repo = _repo(request)
    client_etag = tags[0]
    if "*" in tags or len(tags) > 1:
        # The store compares a single tag; "*" and lists resolve against the current one.
        current = await repo.get(plan_id)
        if isinstance(current, NotFound):
            return _api_response(404, "Plan not found.")
        if isinstance(current, Found) and ("*" in tags or current.etag in tags):
            client_etag = current.etag

    outcome = await repo.patch(plan_id, body, client_etag)
    if isinstance(outcome, PreconditionRequired):
        return _api_response(428, "If-Match header is required")
    if isinstance(outcome, NotFound):
        return _api_response(404, "Plan not found.")
    if isinstance(outcome, PreconditionFailed):
        return _api_response(
            412,
            "Plan has been modified; fetch it again and retry with the new ETag",
            headers=_etag_headers(outcome.current_etag),
        )
    if isinstance(outcome, ValidationFailed):
        return _validation_failed(outcome)
    if isinstance(outcome, (Updated, Unchanged)):
        return JSONResponse(outcome.document, headers=_etag_headers(outcome.etag))
    return _unexpected(outcome)


@router.delete("/plans/{plan_id}")
async def delete_plan(plan_id: str, request: Request):
    outcome = await _repo(request).delete(plan_id)
    if isinstance(outcome, NotFound):
        return _api_response(404, "Plan not found.")
    return _api_response(200, "Plan deleted successfully")
