"""Logging configuration for the path tracer."""

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Root of the package logger hierarchy
PACKAGE_LOGGER = "src.pathtracer"


def setup_logging(
    level: str = "INFO",
    name: str = PACKAGE_LOGGER,
) -> logging.Logger:
    """
    Set up console logging for the package.

    Calling this more than once replaces the handler instead of stacking
    duplicates.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        name: Logger name

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in list(logger.handlers):
        if getattr(handler, "_pathtracer_console", False):
            logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, level.upper(), logging.INFO))
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    console_handler._pathtracer_console = True
    logger.addHandler(console_handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger inside the package hierarchy."""
    return logging.getLogger(name or PACKAGE_LOGGER)
