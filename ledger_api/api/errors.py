from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse

from ledger_api.db.gateway import RecordNotFound, StoreError


async def _validation_error(request: Request, exc: RequestValidationError) -> PlainTextResponse:
    _ = request
    if any(err.get("loc", ("",))[0] == "path" for err in exc.errors()):
        return PlainTextResponse("invalid id", status_code=400)
    return PlainTextResponse("bad request", status_code=400)


async def _not_found(request: Request, exc: RecordNotFound) -> PlainTextResponse:
    _ = request, exc
    return PlainTextResponse("not found", status_code=404)


async def _store_error(request: Request, exc: StoreError) -> PlainTextResponse:
    _ = request
    # Store messages are passed through verbatim.
    return PlainTextResponse(str(exc), status_code=500)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(RecordNotFound, _not_found)
    app.add_exception_handler(StoreError, _store_error)
