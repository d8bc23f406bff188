"""Logging setup shared by every threadline module."""

from __future__ import annotations

import logging
from typing import Optional

from threadline.config import get_settings

ROOT_LOGGER_NAME = "threadline"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def configure_logging(level: Optional[str] = None) -> None:
    """
    Attach a stream handler to the threadline root logger.

    Level comes from LOG_LEVEL unless given explicitly. Safe to call more than
    once; the handler is only added the first time.
    """
    global _configured
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel((level or get_settings().log_level).upper())
    if _configured:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    _configured = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger namespaced under ``threadline``."""
    if not _configured:
        configure_logging()
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
