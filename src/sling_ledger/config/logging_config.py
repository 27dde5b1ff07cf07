"""Logging configuration."""

import logging
import sys
from typing import Optional

from sling_ledger.config.settings import Settings, get_settings

PACKAGE_LOGGER = "sling_ledger"
HANDLER_NAME = "sling_ledger.stdout"

# Kept at WARNING unless the package itself logs at DEBUG
NOISY_LOGGERS = ("sqlalchemy.engine", "urllib3", "httpx")


def setup_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """
    Send the engine's log records to stdout.

    Only the ``sling_ledger`` logger is configured, so the host (uvicorn, a
    test runner) keeps control of the root logger. Calling this again updates
    the level and format without stacking a second handler.

    Returns:
        The package logger
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    handler = next((h for h in logger.handlers if h.get_name() == HANDLER_NAME), None)
    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(HANDLER_NAME)
        logger.addHandler(handler)
    handler.setFormatter(logging.Formatter(settings.log_format))

    noisy_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)

    return logger
