from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from certgateway.api.deps import get_executor
from certgateway.core.config import settings
from certgateway.core.pool import PoolManager, QueryExecutor
from certgateway.main import app
from tests.utils.fake_db import FakeDatabase, make_manager


@pytest.fixture
def db() -> FakeDatabase:
    return FakeDatabase(
        tables={
            "certificadosAPS": [{"folio": "A1", "curp": "X"}],
            "certificadosFONE": [
                {"folio": "F1", "curp": "CURP0001"},
                {"folio": "F2", "curp": "CURP0002"},
            ],
            "certificadosCECAP": [],
        }
    )


@pytest.fixture
def manager(db: FakeDatabase) -> PoolManager:
    return make_manager(db)


@pytest.fixture
def executor(manager: PoolManager) -> QueryExecutor:
    return QueryExecutor(manager)


@pytest.fixture
def client(executor: QueryExecutor) -> Generator[TestClient, None, None]:
    # No `with`: the lifespan (startup ping, keep-alive task) is not run here.
    app.dependency_overrides[get_executor] = lambda: executor
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def api_key_headers() -> dict[str, str]:
    return {"x-api-key": settings.API_KEY}
