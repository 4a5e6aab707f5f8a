"""
Store gateway: parameterized statements per resource kind.

Every statement goes through `StoreGateway.statement`, which times it into
the store-latency histogram (success or failure) and turns driver errors into
`StoreError`. Statements are SQLAlchemy Core constructs, so values are always
sent as bound parameters.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from time import perf_counter
from typing import Any, Generic, TypeVar

import structlog
from pydantic import BaseModel
from sqlalchemy import Connection, Engine, Row, Table, delete, insert, select, text, update
from sqlalchemy.exc import SQLAlchemyError

from ledger_api.db.models import AccountRow, TransactionRow
from ledger_api.models.schemas import Account, Transaction
from ledger_api.observability.metrics import ServiceMetrics


LIST_LIMIT = 100

# Identifier columns are 32-bit INTEGER; ids outside this range match no row.
ID_MIN = -(2**31)
ID_MAX = 2**31 - 1

T = TypeVar("T", bound=BaseModel)

logger = structlog.get_logger("store")


class StoreError(RuntimeError):
    """Any store failure other than an empty point lookup."""


class RecordNotFound(LookupError):
    pass


def _error_text(exc: Exception) -> str:
    # Prefer the driver's own message over SQLAlchemy's wrapped one.
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


def _is_valid_id(record_id: int) -> bool:
    return ID_MIN <= record_id <= ID_MAX


class ResourceStore(Generic[T]):
    """create/list/get/update/delete for one table."""

    def __init__(self, gateway: StoreGateway, table: Table, model: type[T]) -> None:
        self._gateway = gateway
        self._table = table
        self._model = model
        self._fields = list(model.model_fields)
        self._columns = [table.c[name] for name in self._fields]

    @property
    def name(self) -> str:
        return self._table.name

    def _map(self, row: Row[Any]) -> T:
        try:
            return self._model(**dict(zip(self._fields, row, strict=True)))
        except ValueError as exc:
            logger.warning("store_row_mapping_failed", table=self.name, error=str(exc))
            raise StoreError(f"cannot map {self.name} row: {exc}") from exc

    def create(self, values: dict[str, Any]) -> T:
        stmt = insert(self._table).values(**values).returning(*self._columns)
        with self._gateway.statement(f"{self.name}.insert", write=True) as conn:
            row = conn.execute(stmt).one()
        return self._map(row)

    def list(self, limit: int = LIST_LIMIT) -> list[T]:
        stmt = select(*self._columns).order_by(self._table.c.id.desc()).limit(limit)
        with self._gateway.statement(f"{self.name}.list") as conn:
            rows = conn.execute(stmt).all()
        return [self._map(row) for row in rows]

    def get(self, record_id: int) -> T:
        if not _is_valid_id(record_id):
            raise RecordNotFound(f"{self.name} {record_id} not found")
        stmt = select(*self._columns).where(self._table.c.id == record_id)
        with self._gateway.statement(f"{self.name}.get") as conn:
            row = conn.execute(stmt).first()
        if row is None:
            raise RecordNotFound(f"{self.name} {record_id} not found")
        return self._map(row)

    def update(self, record_id: int, values: dict[str, Any]) -> None:
        """Write `values` onto the row; a missing row is not an error."""

        if not values or not _is_valid_id(record_id):
            return
        stmt = update(self._table).where(self._table.c.id == record_id).values(**values)
        with self._gateway.statement(f"{self.name}.update", write=True) as conn:
            conn.execute(stmt)

    def delete(self, record_id: int) -> None:
        if not _is_valid_id(record_id):
            return
        stmt = delete(self._table).where(self._table.c.id == record_id)
        with self._gateway.statement(f"{self.name}.delete", write=True) as conn:
            conn.execute(stmt)


class StoreGateway:
    def __init__(self, engine: Engine, metrics: ServiceMetrics) -> None:
        self.engine = engine
        self.metrics = metrics
        self.accounts: ResourceStore[Account] = ResourceStore(self, AccountRow.__table__, Account)
        self.transactions: ResourceStore[Transaction] = ResourceStore(self, TransactionRow.__table__, Transaction)

    @contextmanager
    def statement(self, kind: str, *, write: bool = False) -> Iterator[Connection]:
        """Yield a pooled connection for a single statement.

        Writes run inside `engine.begin()` so the statement commits on exit.
        """

        start = perf_counter()
        try:
            with (self.engine.begin() if write else self.engine.connect()) as conn:
                yield conn
        except (SQLAlchemyError, OverflowError) as exc:
            # OverflowError comes straight from drivers binding an oversized int.
            message = _error_text(exc)
            logger.warning("store_call_failed", statement=kind, error=message)
            raise StoreError(message) from exc
        finally:
            self.metrics.observe_store_call(perf_counter() - start)

    def ping(self) -> None:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def dispose(self) -> None:
        self.engine.dispose()
