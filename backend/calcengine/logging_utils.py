"""Shared logging helpers for the calculator."""

from __future__ import annotations

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_LOGGER_INITIALISED = False


def configure_logging(level: str = "WARNING") -> None:
    """Set up root logging for the command-line entry point."""
    global _LOGGER_INITIALISED
    numeric = getattr(logging, level.upper(), logging.WARNING)
    if not _LOGGER_INITIALISED:
        logging.basicConfig(level=numeric, format=LOG_FORMAT, stream=sys.stderr)
        _LOGGER_INITIALISED = True
    logging.getLogger().setLevel(numeric)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or "calcengine")
