from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from ledger_api.db.gateway import StoreGateway
from ledger_api.db.session import get_gateway
from ledger_api.models.schemas import Transaction, TransactionIn, TransactionPatch

router = APIRouter(prefix="/api", tags=["transactions"])


@router.post("/orders", response_model=Transaction, status_code=201)
def create_transaction(
    payload: TransactionIn,
    gateway: StoreGateway = Depends(get_gateway),
) -> Transaction:
    # The owning account is not checked here; the store's foreign key decides.
    return gateway.transactions.create(payload.model_dump())


@router.get("/orders", response_model=list[Transaction])
def list_transactions(gateway: StoreGateway = Depends(get_gateway)) -> list[Transaction]:
    return gateway.transactions.list()


@router.get("/orders/{transaction_id}", response_model=Transaction)
def get_transaction(
    transaction_id: int,
    gateway: StoreGateway = Depends(get_gateway),
) -> Transaction:
    return gateway.transactions.get(transaction_id)


@router.put("/orders/{transaction_id}", status_code=204, response_class=Response)
def replace_transaction(
    transaction_id: int,
    payload: TransactionIn,
    gateway: StoreGateway = Depends(get_gateway),
) -> Response:
    gateway.transactions.update(transaction_id, payload.model_dump())
    return Response(status_code=204)


@router.patch("/orders/{transaction_id}", status_code=204, response_class=Response)
def patch_transaction(
    transaction_id: int,
    payload: TransactionPatch,
    gateway: StoreGateway = Depends(get_gateway),
) -> Response:
    gateway.transactions.update(transaction_id, payload.model_dump(exclude_none=True))
    return Response(status_code=204)


@router.delete("/orders/{transaction_id}", status_code=204, response_class=Response)
def delete_transaction(
    transaction_id: int,
    gateway: StoreGateway = Depends(get_gateway),
) -> Response:
    gateway.transactions.delete(transaction_id)
    return Response(status_code=204)
