"""Structured logging configuration.

This module configures structlog once with a stable JSON format
and hands out named loggers to the rest of the package.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

from core.constants import DEFAULT_LOG_LEVEL

_CONFIGURED_LEVEL: str | None = None


def configure_logging(level_name: str = DEFAULT_LOG_LEVEL) -> None:
    """Configure structlog processors and level filtering.

    Calling again with a different level reconfigures the pipeline for
    loggers created afterwards. Calling with the current level is a no-op.

    Args:
        level_name: Standard logging level name, e.g. ``INFO``.
    """
    global _CONFIGURED_LEVEL
    normalized_level = level_name.upper()
    if _CONFIGURED_LEVEL == normalized_level:
        return
    level = logging.getLevelName(normalized_level)
    if not isinstance(level, int):
        level = logging.INFO
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
    _CONFIGURED_LEVEL = normalized_level


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog bound logger tagged with the module name.
    """
    if _CONFIGURED_LEVEL is None:
        configure_logging(os.getenv("CHIRP_LOG_LEVEL", DEFAULT_LOG_LEVEL))
    return structlog.get_logger().bind(logger=name)
