"""Run the ledger API with uvicorn: ``python -m ledger_server``."""

import uvicorn

from ledger_server.core.config import get_settings
from ledger_server.core.logging_config import build_logging_config


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "ledger_server.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.server.reload,
        log_config=build_logging_config(settings.logging.level.upper()),
    )


if __name__ == "__main__":
    main()
