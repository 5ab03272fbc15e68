from __future__ import annotations

import asyncio
from typing import Any, Protocol

from plans.outcomes import DeleteOutcome, GetOutcome, PatchOutcome, PutOutcome
from plans.store import PlanStore


class AsyncPlanRepository(Protocol):
    async def put(self, plan_id: str, doc: Any) -> PutOutcome: ...
    async def get(self, plan_id: str, client_etag: str | None = None) -> GetOutcome: ...
    async def patch(self, plan_id: str, patch_doc: Any, client_etag: str | None) -> PatchOutcome: ...
    async def delete(self, plan_id: str) -> DeleteOutcome: ...
    async def ping(self) -> bool: ...


class AsyncPlanStoreRepository(AsyncPlanRepository):
    """
    Async wrapper around PlanStore.
    Uses asyncio.to_thread so backend I/O never blocks the event loop.
    """

    def __init__(self, store: PlanStore) -> None:
        self._store = store

    @property
    def store(self) -> PlanStore:
        return self._store

    async def put(self, plan_id: str, doc: Any) -> PutOutcome:
        return await asyncio.to_thread(self._store.put, plan_id, doc)

    async def get(self, plan_id: str, client_etag: str | None = None) -> GetOutcome:
        return await asyncio.to_thread(self._store.get, plan_id, client_etag)

    async def patch(self, plan_id: str, patch_doc: Any, client_etag: str | None) -> PatchOutcome:
        return await asyncio.to_thread(self._store.patch, plan_id, patch_doc, client_etag)

    async def delete(self, plan_id: str) -> DeleteOutcome:
        return await asyncio.to_thread(self._store.delete, plan_id)

    async def ping(self) -> bool:
        return await asyncio.to_thread(self._store.ping)
