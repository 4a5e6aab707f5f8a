from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from ledger_api.db.gateway import StoreGateway
from ledger_api.db.session import get_gateway
from ledger_api.models.schemas import Account, AccountIn, AccountPatch

router = APIRouter(prefix="/api", tags=["accounts"])


@router.post("/users", response_model=Account, status_code=201)
def create_account(
    payload: AccountIn,
    gateway: StoreGateway = Depends(get_gateway),
) -> Account:
    return gateway.accounts.create(payload.model_dump())


@router.get("/users", response_model=list[Account])
def list_accounts(gateway: StoreGateway = Depends(get_gateway)) -> list[Account]:
    return gateway.accounts.list()


@router.get("/users/{account_id}", response_model=Account)
def get_account(
    account_id: int,
    gateway: StoreGateway = Depends(get_gateway),
) -> Account:
    return gateway.accounts.get(account_id)


@router.put("/users/{account_id}", status_code=204, response_class=Response)
def replace_account(
    account_id: int,
    payload: AccountIn,
    gateway: StoreGateway = Depends(get_gateway),
) -> Response:
    # Whole-record replacement: absent fields are written as their zero value.
    gateway.accounts.update(account_id, payload.model_dump())
    return Response(status_code=204)


@router.patch("/users/{account_id}", status_code=204, response_class=Response)
def patch_account(
    account_id: int,
    payload: AccountPatch,
    gateway: StoreGateway = Depends(get_gateway),
) -> Response:
    gateway.accounts.update(account_id, payload.model_dump(exclude_none=True))
    return Response(status_code=204)


@router.delete("/users/{account_id}", status_code=204, response_class=Response)
def delete_account(
    account_id: int,
    gateway: StoreGateway = Depends(get_gateway),
) -> Response:
    gateway.accounts.delete(account_id)
    return Response(status_code=204)
