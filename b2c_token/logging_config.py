from __future__ import annotations

import logging

from .settings import get_settings

PACKAGE_LOGGER = "b2c_token"


def configure_logging(level: str | None = None) -> None:
    """
    Set the verbosity of this library's loggers.

    ``level`` defaults to ``B2C_LOG_LEVEL`` (see ``B2CSettings.log_level``).
    Handlers and formatting stay with the host application; this only sets
    the level that ``b2c_token.*`` loggers inherit.
    """
    if level is None:
        level = get_settings().log_level
    logging.getLogger(PACKAGE_LOGGER).setLevel(level.upper())
