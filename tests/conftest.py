from __future__ import annotations

from collections.abc import AsyncIterator, Iterator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import Engine, create_engine, event

from ledger_api.config import get_settings
from ledger_api.db.gateway import StoreGateway
from ledger_api.db.models import Base
from ledger_api.main import create_app
from ledger_api.observability.metrics import ServiceMetrics


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite leaves foreign keys off unless asked per connection.
    _ = connection_record
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture(autouse=True)
def test_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'ledger.db'}")
    monkeypatch.setenv("READINESS_INTERVAL_SECONDS", "0")
    get_settings.cache_clear()

    yield

    get_settings.cache_clear()


@pytest.fixture
def metrics() -> ServiceMetrics:
    return ServiceMetrics()


@pytest.fixture
def engine(tmp_path) -> Iterator[Engine]:
    engine = create_engine(f"sqlite:///{tmp_path / 'ledger.db'}")
    event.listen(engine, "connect", _enable_foreign_keys)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def gateway(engine: Engine, metrics: ServiceMetrics) -> StoreGateway:
    return StoreGateway(engine, metrics)


@pytest.fixture
def app(gateway: StoreGateway, metrics: ServiceMetrics) -> FastAPI:
    return create_app(get_settings(), metrics=metrics, gateway=gateway)


@pytest.fixture
async def api_client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
