"""Entry point: ``python -m tuhoshop`` or the ``tuhoshop`` console script."""
from __future__ import annotations

import asyncio
import logging
import os

from tuhoshop.api import run_api_server
from tuhoshop.core.config import load_settings
from tuhoshop.core.logging_config import setup_logging
from tuhoshop.core.sentry_integration import init_sentry

logger = logging.getLogger(__name__)


def main() -> None:
    settings = load_settings()
    setup_logging(os.getenv("LOG_LEVEL", "INFO"))
    init_sentry(settings.sentry_dsn, environment=settings.environment)

    try:
        asyncio.run(run_api_server(settings))
    except KeyboardInterrupt:
        logger.info("Stopped by user")


if __name__ == "__main__":
    main()
