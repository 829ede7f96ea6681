"""
Logging setup for the admin panel.

Streamlit re-executes page scripts on every interaction, so handlers are
attached once to the package logger and reused afterwards.
"""

from __future__ import annotations
import logging
import sys
from typing import Optional


LOGGER_NAME = "ledger"

_configured = False


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the package logger or one of its children."""
    if not name or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if not name.startswith(LOGGER_NAME + "."):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure console logging for the package.

    Args:
        level: Level name such as "DEBUG" or "INFO"

    Returns:
        The configured package logger
    """
    global _configured
    logger = get_logger()
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if _configured:
        return logger

    formatter = logging.Formatter(
        '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    _configured = True
    return logger
