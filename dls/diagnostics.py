"""Logging setup for nandscan diagnostics."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, TextIO, Union


_DEBUG_VALUES = {"1", "true", "yes", "on"}
_LOG_HANDLERS: List[logging.Handler] = []

LOGGER_NAME = "nandscan"
LOG_FORMAT = "[nandscan] %(levelname)s %(message)s"
FILE_LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def debug_enabled() -> bool:
    """Return True when NANDSCAN_DEBUG is set to a truthy value."""
    return os.environ.get("NANDSCAN_DEBUG", "").strip().lower() in _DEBUG_VALUES


def configure_logging(
    level: Union[int, str] = logging.INFO,
    *,
    log_dir: Optional[Path] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Send ``nandscan.*`` records to stderr (and optionally a log file).

    Safe to call more than once: handlers from a previous call are replaced.
    """
    reset_logging()
    logger = logging.getLogger(LOGGER_NAME)

    if debug_enabled():
        level = logging.DEBUG
    elif isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    console = logging.StreamHandler(stream or sys.stderr)
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    _LOG_HANDLERS.append(console)

    file_error: Optional[OSError] = None
    if log_dir is not None:
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_dir / "nandscan.log", encoding="utf-8")
            file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
            _LOG_HANDLERS.append(file_handler)
        except OSError as e:
            file_error = e

    for handler in _LOG_HANDLERS:
        logger.addHandler(handler)
    logger.setLevel(level)
    if file_error is not None:
        logger.warning("Cannot write logs to %s: %s", log_dir, file_error)
    return logger


def reset_logging() -> None:
    """Detach and close every handler added by configure_logging."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in _LOG_HANDLERS:
        logger.removeHandler(handler)
        handler.close()
    _LOG_HANDLERS.clear()
    logger.setLevel(logging.NOTSET)
