from __future__ import annotations

from typing import Any

from fastapi import Request
from sqlalchemy import Engine, create_engine

from ledger_api.config import Settings
from ledger_api.db.gateway import StoreGateway


def open_engine(settings: Settings) -> Engine:
    """Open the pooled engine. Does not connect; see `db.readiness`."""

    kwargs: dict[str, Any] = {"pool_pre_ping": True}
    if not settings.is_sqlite:
        kwargs["pool_size"] = settings.db_pool_size
        kwargs["max_overflow"] = settings.db_max_overflow
    # psycopg3 driver uses `postgresql+psycopg://...`
    return create_engine(settings.database_url, **kwargs)


def get_gateway(request: Request) -> StoreGateway:
    return request.app.state.gateway
