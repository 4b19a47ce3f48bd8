"""
Logging setup for pagesim.

Modules get a logger with get_logger(__name__). The CLI calls
setup_logging() once; output goes through Rich so log lines match the
terminal tables.

Verbosity:
    0 -> WARNING (skipped records, reported errors)
    1 -> INFO    (allocations, completions, configuration)
    2 -> DEBUG   (every hit, fault and eviction)
"""

from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


PACKAGE_LOGGER = "pagesim"

_LEVELS = {
    0: logging.WARNING,
    1: logging.INFO,
    2: logging.DEBUG,
}


def setup_logging(verbosity: int = 0, console: Optional[Console] = None) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        verbosity: 0, 1 or 2+ (see module docstring).
        console: Rich Console to log to (stderr if None).

    Returns:
        The configured package logger.
    """
    level = _LEVELS.get(min(verbosity, 2), logging.WARNING)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
