from __future__ import annotations

import uvicorn

from ledger_api.config import get_settings
from ledger_api.observability.logging import configure_logging


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level, json_logs=settings.log_json)
    # uvicorn exits nonzero when it cannot bind or when startup fails.
    uvicorn.run("ledger_api.main:app", host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
