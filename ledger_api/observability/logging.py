from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


SERVICE_NAME = "ledger-api"

_CONFIGURED = False


def add_service_name(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Tag every event with the service name for shared log pipelines."""

    _ = logger, method_name
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: int | str = logging.INFO, *, json_logs: bool = True) -> None:
    """Configure structlog + stdlib logging.

    JSON lines on stdout by default; `json_logs=False` switches to the
    console renderer for local runs. Safe to call multiple times (no-op
    after first call).
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    level = resolve_level(level)

    pre_chain: list[Any] = [
        structlog.contextvars.merge_contextvars,
        add_service_name,
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[
            *pre_chain,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=pre_chain,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    # uvicorn installs its own handlers; route them through ours.
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logger = logging.getLogger(name)
        logger.handlers = [handler]
        logger.propagate = False
        logger.setLevel(level)

    # The middleware already writes one access event per request, and store
    # failures are logged by the gateway; keep SQL echo and uvicorn's access
    # lines out unless debugging.
    quiet = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    logging.getLogger("sqlalchemy.engine").setLevel(quiet)
    logging.getLogger("uvicorn.access").setLevel(quiet)

    _CONFIGURED = True
