"""Logging configuration for psqlm."""

from __future__ import annotations

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
ROOT_LOGGER = "psqlm"


def setup_logging(level: str = "WARNING", stream: Optional[object] = None) -> None:
    """Configure the package logger.

    Log records go to stderr so they never interleave with query output
    written to stdout.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR)
        stream: Optional stream override (defaults to sys.stderr)
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    # Replace handlers so repeated setup calls don't duplicate output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module.

    Args:
        name: Logger name, usually __name__

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
