from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ledger_api.api.accounts import router as accounts_router
from ledger_api.api.errors import register_error_handlers
from ledger_api.api.metrics import router as metrics_router
from ledger_api.api.transactions import router as transactions_router
from ledger_api.config import Settings, get_settings
from ledger_api.db.gateway import StoreGateway
from ledger_api.db.readiness import StoreUnavailable, wait_for_store
from ledger_api.db.session import open_engine
from ledger_api.observability.logging import configure_logging
from ledger_api.observability.metrics import ServiceMetrics
from ledger_api.observability.middleware import RequestMetricsMiddleware


logger = structlog.get_logger("startup")


def prepare_store(app: FastAPI, settings: Settings) -> None:
    """Open the store handle and run the readiness probe.

    A failure to open the engine propagates and aborts startup. A failed probe
    aborts startup under the `fail_fast` policy and marks the service
    not-ready under `degrade`.
    """

    if app.state.gateway is None:
        app.state.gateway = StoreGateway(open_engine(settings), app.state.metrics)

    result = wait_for_store(
        app.state.gateway.ping,
        attempts=settings.readiness_attempts,
        interval_s=settings.readiness_interval_seconds,
    )
    app.state.store_ready = result.ready
    if result.ready:
        return

    if settings.readiness_policy == "fail_fast":
        raise StoreUnavailable(f"store unreachable after {result.attempts} attempts: {result.last_error}")

    logger.warning("serving_without_store", attempts=result.attempts, error=result.last_error)


def create_app(
    settings: Settings | None = None,
    *,
    metrics: ServiceMetrics | None = None,
    gateway: StoreGateway | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level, json_logs=settings.log_json)

    metrics = metrics or ServiceMetrics()

    app = FastAPI(title="Ledger API", version="0.1.0")
    app.state.settings = settings
    app.state.metrics = metrics
    app.state.gateway = gateway
    app.state.store_ready = gateway is not None

    app.include_router(accounts_router)
    app.include_router(transactions_router)
    app.include_router(metrics_router)
    register_error_handlers(app)
    app.add_middleware(RequestMetricsMiddleware, metrics=metrics)

    @app.on_event("startup")
    def _startup() -> None:
        prepare_store(app, settings)

    @app.on_event("shutdown")
    def _shutdown() -> None:
        if app.state.gateway is not None:
            app.state.gateway.dispose()

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/health/ready")
    def ready(request: Request) -> JSONResponse:
        state = request.app.state
        if not state.store_ready and state.gateway is not None:
            result = wait_for_store(state.gateway.ping, attempts=1)
            state.store_ready = result.ready

        if state.store_ready:
            return JSONResponse({"status": "ready"})
        return JSONResponse({"status": "not_ready"}, status_code=503)

    return app


app = create_app()
