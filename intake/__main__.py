"""
Record Intake Service — Process Entry Point
=============================================

Usage:
    python -m intake          (or the `intake` console script)

Startup errors are fatal: invalid configuration (e.g. DATABASE_URL unset) or
an unusable upload directory is logged and the process exits with status 1.
Database and listener failures abort uvicorn's startup, which also exits
non-zero.
"""

import logging
import sys

import pydantic
import uvicorn

from intake.config import get_settings
from intake.exceptions import FileStorageError
from intake.main import create_app, setup_logging

logger = logging.getLogger("intake")


def main() -> None:
    setup_logging()
    try:
        settings = get_settings()
    except pydantic.ValidationError as e:
        missing = [".".join(str(part) for part in err["loc"]) for err in e.errors()]
        logger.critical("Configuration error, check environment variables: %s", ", ".join(missing))
        sys.exit(1)

    setup_logging(settings.log_level)

    try:
        app = create_app(settings)
    except FileStorageError as e:
        logger.critical("Startup failed: %s", e.message)
        sys.exit(1)

    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,
        lifespan="on",
    )
    server = uvicorn.Server(config)
    server.run()
    # uvicorn returns normally when lifespan startup or the socket bind fails
    if not server.started:
        logger.critical("Server failed to start")
        sys.exit(1)


if __name__ == "__main__":
    main()
