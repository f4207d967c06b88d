"""Logging setup for the hierahelpers package logger."""

import logging
from typing import Optional, Union

PACKAGE_LOGGER = "hierahelpers"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[Union[str, int]] = None) -> logging.Logger:
    """
    Attach a stream handler to the package logger and set its level.

    Safe to call repeatedly; only one handler is ever installed.
    """
    if level is None:
        from hierahelpers.config import get_config
        level = get_config().log_level
    if isinstance(level, str):
        level = level.upper()

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    if not any(getattr(h, "_hierahelpers", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._hierahelpers = True
        logger.addHandler(handler)

    return logger
