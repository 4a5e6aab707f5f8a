from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


# Field order on the entity models matches the column order the store
# gateway selects; rows are mapped positionally.


class Account(BaseModel):
    id: int
    name: str
    email: str
    created_at: datetime


class Transaction(BaseModel):
    id: int
    user_id: int
    amount: float
    description: str
    created_at: datetime


class _Payload(BaseModel):
    """Request body: no type coercion, and `null` counts as absent."""

    model_config = ConfigDict(strict=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class AccountIn(_Payload):
    name: str = ""
    email: str = ""


class AccountPatch(_Payload):
    name: str | None = None
    email: str | None = None


class TransactionIn(_Payload):
    user_id: int = 0
    amount: float = 0.0
    description: str = ""


class TransactionPatch(_Payload):
    user_id: int | None = None
    amount: float | None = None
    description: str | None = None
