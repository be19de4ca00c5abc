"""Structured logging configuration for the Shopvid metrics service."""

from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def resolve_level(level: int | str | None = None) -> int:
    """Numeric logging level from a name or number; $LOG_LEVEL, then INFO."""
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    return level


def setup_logging(
    level: int | str | None = None,
    module_name: str = "shopvid_metrics",
) -> logging.Logger:
    """Configure and return a logger with consistent formatting.

    Records go to stderr; stdout is reserved for command output.

    Args:
        level: Logging level. Defaults to $LOG_LEVEL, then INFO.
               Re-applied when the logger is already configured.
        module_name: Name for the logger instance.

    Returns:
        Configured logger.
    """
    logger = logging.getLogger(module_name)
    logger.setLevel(resolve_level(level))

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stderr)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger
