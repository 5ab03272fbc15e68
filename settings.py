from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent

BACKENDS = ("memory", "disk")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_path(name: str, default: Path) -> Path:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    p = Path(raw).expanduser()
    return p if p.is_absolute() else PROJECT_ROOT / p


@dataclass(frozen=True)
class Settings:
    # Schema (loaded once at startup)
    schema_path: Path

    # Storage
    store_backend: str
    data_dir: Path

    # Logging / debug
    log_level: str
    debug_log_requests: bool


def get_settings() -> Settings:
    schema_path = _env_path("PLAN_SCHEMA_PATH", PROJECT_ROOT / "schema" / "plan-schema.json")

    # Memory is the default; a disk data dir only matters when PLAN_STORE_BACKEND=disk.
    store_backend = (os.getenv("PLAN_STORE_BACKEND", "memory")).strip().lower()
    if store_backend not in BACKENDS:
        raise ValueError(f"PLAN_STORE_BACKEND must be one of {BACKENDS}, got {store_backend!r}")
    data_dir = _env_path("PLAN_DATA_DIR", PROJECT_ROOT / "data")

    log_level = (os.getenv("LOG_LEVEL", "INFO")).strip().upper() or "INFO"
    debug_log_requests = _env_bool("DEBUG_LOG_REQUESTS", False)

    return Settings(
        schema_path=schema_path,
        store_backend=store_backend,
        data_dir=data_dir,
        log_level=log_level,
        debug_log_requests=debug_log_requests,
    )
