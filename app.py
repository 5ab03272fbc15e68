from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dotenv import load_dotenv

from persistence import DiskHashStore, HashStore, InMemoryHashStore
from persistence.repositories import AsyncPlanStoreRepository
from plans import PlanSchemaValidator, PlanStore, SerializationFailure, StoreUnavailable
from settings import Settings, get_settings

logger = logging.getLogger(__name__)


def build_backend(settings: Settings) -> HashStore:
    if settings.store_backend == "disk":
        logger.info("PLAN STORE: disk backend at %s", settings.data_dir)
        return DiskHashStore(settings.data_dir)
    logger.info("PLAN STORE: in-memory backend")
    return InMemoryHashStore()


def build_store(settings: Settings) -> PlanStore:
    # Schema problems are fatal here, before the app accepts any request.
    validator = PlanSchemaValidator.from_path(settings.schema_path)
    return PlanStore(validator, build_backend(settings))


def create_app(settings: Settings | None = None, store: PlanStore | None = None) -> FastAPI:
    load_dotenv("local.env")
    settings = settings or get_settings()

    logging.basicConfig(level=settings.log_level)

    from endpoints.plan_endpoints import router as plan_router

    app = FastAPI(title="plan-store")
    app.state.settings = settings
    app.state.plan_repo = AsyncPlanStoreRepository(store or build_store(settings))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        # Browsers hide ETag from scripts unless it is exposed explicitly.
        expose_headers=["ETag"],
    )

    if settings.debug_log_requests:

        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            response = await call_next(request)
            logger.info(
                "REQUEST %s %s -> %s (if-match=%s if-none-match=%s)",
                request.method,
                request.url.path,
                response.status_code,
                request.headers.get("if-match"),
                request.headers.get("if-none-match"),
            )
            return response

    @app.exception_handler(StoreUnavailable)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
        logger.warning("PLAN STORE UNAVAILABLE: %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse({"status": 503, "message": "Plan store is unavailable"}, status_code=503)

    @app.exception_handler(SerializationFailure)
    async def serialization_failure_handler(request: Request, exc: SerializationFailure):
        logger.error("PLAN DATA CORRUPT: %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse({"status": 500, "message": "Stored plan data is corrupt"}, status_code=500)

    app.include_router(plan_router)

    return app


app = create_app()
