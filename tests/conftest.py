from __future__ import annotations

import copy
from pathlib import Path
import sys
from typing import Any, Mapping


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for imports like `import persistence...` under pytest import modes
# that don't automatically prepend the cwd/rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

SCHEMA_PATH = REPO_ROOT / "schema" / "plan-schema.json"

SAMPLE_PLAN: dict[str, Any] = {
    "planCostShares": {
        "deductible": 2000,
        "_org": "example.com",
        "copay": 23,
        "objectId": "1234vxc2324sdf-501",
        "objectType": "membercostshare",
    },
    "linkedPlanServices": [
        {
            "linkedService": {
                "_org": "example.com",
                "objectId": "1234520xvc30asdf-502",
                "objectType": "service",
                "name": "Yearly physical",
            },
            "planserviceCostShares": {
                "deductible": 10,
                "_org": "example.com",
                "copay": 0,
                "objectId": "1234512xvc1314asdfs-503",
                "objectType": "membercostshare",
            },
            "_org": "example.com",
            "objectId": "27283xvx9asdff-504",
            "objectType": "planservice",
        }
    ],
    "_org": "example.com",
    "objectId": "12xvxc345ssdsds-508",
    "objectType": "plan",
    "planType": "inNetwork",
    "creationDate": "12-12-2017",
}

EXTRA_SERVICE: dict[str, Any] = {
    "linkedService": {
        "_org": "example.com",
        "objectId": "1234520xvc30sfs-505",
        "objectType": "service",
        "name": "well baby",
    },
    "planserviceCostShares": {
        "deductible": 10,
        "_org": "example.com",
        "copay": 175,
        "objectId": "1234512xvc1314sdfsd-506",
        "objectType": "membercostshare",
    },
    "_org": "example.com",
    "objectId": "27283xvx9sdf-507",
    "objectType": "planservice",
}


class SpyHashStore:
    """
    In-memory HashStore that records every call, so tests can assert which
    backend operations an outcome required.
    """

    def __init__(self) -> None:
        self.rows: dict[str, dict[str, str]] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail_with: Exception | None = None
        # When set, reads return this snapshot instead of the live rows.
        self.snapshot: dict[str, dict[str, str]] | None = None

    def _record(self, op: str, key: str) -> None:
        self.calls.append((op, key))
        if self.fail_with is not None:
            raise self.fail_with

    def get(self, key: str) -> dict[str, str] | None:
        self._record("get", key)
        rows = self.snapshot if self.snapshot is not None else self.rows
        row = rows.get(key)
        return dict(row) if row is not None else None

    def put_fields(self, key: str, fields: Mapping[str, str]) -> None:
        self._record("put_fields", key)
        self.rows[key] = {**self.rows.get(key, {}), **fields}

    def delete(self, key: str) -> bool:
        self._record("delete", key)
        return self.rows.pop(key, None) is not None

    def ping(self) -> bool:
        self._record("ping", "")
        return True

    @property
    def writes(self) -> int:
        return sum(1 for op, _ in self.calls if op == "put_fields")


@pytest.fixture
def plan_doc() -> dict[str, Any]:
    return copy.deepcopy(SAMPLE_PLAN)


@pytest.fixture
def extra_service() -> dict[str, Any]:
    return copy.deepcopy(EXTRA_SERVICE)


@pytest.fixture
def validator():
    from plans.validator import PlanSchemaValidator

    return PlanSchemaValidator.from_path(SCHEMA_PATH)


@pytest.fixture
def spy_backend() -> SpyHashStore:
    return SpyHashStore()


@pytest.fixture
def store(validator, spy_backend):
    from plans.store import PlanStore

    return PlanStore(validator, spy_backend)


@pytest.fixture
def client(store):
    from fastapi.testclient import TestClient

    import app as app_module
    from settings import get_settings

    return TestClient(app_module.create_app(settings=get_settings(), store=store))
