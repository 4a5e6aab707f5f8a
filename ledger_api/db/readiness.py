from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

import structlog


logger = structlog.get_logger("readiness")


class StoreUnavailable(RuntimeError):
    """Raised at startup when the store never answered the readiness probe."""


@dataclass(frozen=True)
class ReadinessResult:
    ready: bool
    attempts: int
    last_error: str | None = None


def wait_for_store(
    ping: Callable[[], None],
    *,
    attempts: int = 10,
    interval_s: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
) -> ReadinessResult:
    """Ping the store until it answers or `attempts` run out.

    Never raises for ping failures; the caller decides what a failed probe means.
    """

    last_error: str | None = None
    for attempt in range(1, attempts + 1):
        try:
            ping()
        except Exception as exc:  # noqa: BLE001
            last_error = str(exc)
            logger.warning("store_not_ready", attempt=attempt, attempts=attempts, error=last_error)
            if attempt < attempts:
                sleep(interval_s)
            continue

        logger.info("store_ready", attempt=attempt)
        return ReadinessResult(ready=True, attempts=attempt)

    logger.error("store_unreachable", attempts=attempts, error=last_error)
    return ReadinessResult(ready=False, attempts=attempts, last_error=last_error)
