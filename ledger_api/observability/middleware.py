from __future__ import annotations

import uuid
from time import perf_counter
from typing import Any, Callable

import structlog
from starlette.datastructures import MutableHeaders

from ledger_api.observability.metrics import ServiceMetrics


UNMATCHED_PATH = "<unmatched>"


def _route_template(scope: dict[str, Any]) -> str:
    """Return the path template of the route that served this request.

    Read after the app ran, from what routing left in the scope. Requests no
    route claimed (404) share one label so random URLs cannot grow the
    registry.
    """

    path = getattr(scope.get("route"), "path", None)
    if path:
        return path

    endpoint = scope.get("endpoint")
    if endpoint is None:
        return UNMATCHED_PATH

    router = getattr(scope.get("app"), "router", None)
    for route in getattr(router, "routes", []):
        if getattr(route, "endpoint", None) is endpoint:
            path = getattr(route, "path", None)
            if path:
                return path
    return UNMATCHED_PATH


class RequestMetricsMiddleware:
    """Adds request_id context, access logs, and per-request HTTP metrics."""

    def __init__(self, app: Callable[..., Any], metrics: ServiceMetrics) -> None:
        self.app = app
        self.metrics = metrics

    async def __call__(self, scope: dict[str, Any], receive: Callable[..., Any], send: Callable[..., Any]) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        request_id = str(uuid.uuid4())
        method = scope.get("method", "")

        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=scope.get("path"),
            method=method,
        )

        start = perf_counter()
        status_code: int = 500

        async def send_wrapper(message: dict[str, Any]) -> None:
            nonlocal status_code

            if message.get("type") == "http.response.start":
                status_code = int(message.get("status", 500))
                headers = MutableHeaders(scope=message)
                headers["X-Request-ID"] = request_id

            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            elapsed = perf_counter() - start

            # Metrics first so they update even if logging misbehaves.
            self.metrics.observe_http_request(
                method=method,
                path=_route_template(scope),
                status=status_code,
                elapsed_s=elapsed,
            )

            structlog.get_logger("access").info(
                "http_request",
                status_code=status_code,
                elapsed_ms=round(elapsed * 1000.0, 2),
            )

            structlog.contextvars.clear_contextvars()
