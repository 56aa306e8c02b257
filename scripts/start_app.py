#!/usr/bin/env python3
"""Start the API server, reporting startup failures to Logfire."""

import sys

import logfire
import uvicorn

from guild.config import Settings
from guild.util.logging import setup_logging
from guild.util.observability import configure_logfire


def main() -> int:
    """Run uvicorn with the Guild app."""
    settings = Settings()

    # Before the app module is imported, so instrumentation has a target
    setup_logging(settings)
    configure_logfire(settings)

    try:
        logfire.info("Starting Guild API", environment=settings.environment)
        uvicorn.run(
            "guild.interface.api.app:app",
            host="0.0.0.0",
            port=settings.port,
            log_level="debug" if settings.debug else "info",
        )
        return 0

    except Exception as e:
        logfire.error(
            "Application startup failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise


if __name__ == "__main__":
    sys.exit(main())
