"""Structured logging configuration.

This module initializes structlog with a stable JSON format.
Events are emitted through stdlib logging on stderr so stdout stays
reserved for command output.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from core.constants import DEFAULT_LOG_LEVEL
from core.errors import TracklistConfigError


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger with structured output.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    return structlog.get_logger(name)


def configure_logging(level_name: str = DEFAULT_LOG_LEVEL) -> None:
    """Set the process log level and attach a stderr handler.

    Args:
        level_name: Standard level name such as ``WARNING`` or ``DEBUG``.

    Raises:
        TracklistConfigError: If the level name is unknown.
    """
    level = parse_log_level(level_name)
    logging.basicConfig(stream=sys.stderr, format="%(message)s")
    logging.getLogger().setLevel(level)


def parse_log_level(level_name: str) -> int:
    """Map a level name onto its numeric stdlib level.

    Args:
        level_name: Case-insensitive level name.

    Returns:
        Numeric logging level.

    Raises:
        TracklistConfigError: If the level name is unknown.
    """
    level = logging.getLevelName(level_name.strip().upper())
    if not isinstance(level, int):
        raise TracklistConfigError(
            f"Invalid log level '{level_name}'. "
            "Use one of DEBUG, INFO, WARNING, ERROR, CRITICAL."
        )
    return level
