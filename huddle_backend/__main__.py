"""Entrypoint: python -m huddle_backend"""
from __future__ import annotations

import logging
import sys

import uvicorn

from huddle_backend.errors import ConfigurationError
from huddle_backend.main import create_app
from huddle_backend.settings import get_settings

logger = logging.getLogger("huddle_backend")


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        settings.require_credentials()
    except ConfigurationError as exc:
        logger.critical("Error: %s", exc)
        sys.exit(1)

    app = create_app(settings)
    logger.info("Starting huddle backend (in-memory) on port %s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
