"""Logging helpers for PhotoEdit."""

from __future__ import annotations

import logging
from typing import Optional

from ..config import APP_NAME, LOG_LEVEL

_LOGGER: Optional[logging.Logger] = None


def get_logger() -> logging.Logger:
    """Return the package logger, attaching a stream handler on first use."""

    global _LOGGER
    if _LOGGER is None:
        _LOGGER = logging.getLogger(APP_NAME)
        if not _LOGGER.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
            handler.setFormatter(formatter)
            _LOGGER.addHandler(handler)
        _LOGGER.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    return _LOGGER

logger = get_logger()
