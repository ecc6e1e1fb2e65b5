"""Basic logging configuration."""

import logging

from flashkit.config import get_settings


def configure_logging() -> None:
    """Configure logging for the application."""
    # Uvicorn keeps its own access log config
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    # Flash decisions are per request; only surface them when debugging
    logging.getLogger("flashkit.services").setLevel(
        logging.DEBUG if settings.debug else logging.INFO
    )
