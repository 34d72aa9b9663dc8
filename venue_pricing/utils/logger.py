"""Structured logging utilities."""

from __future__ import annotations

import logging
import sys
from typing import Any, MutableMapping, Optional

from venue_pricing.utils.config import get_settings


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_LOGGER_INITIALIZED = False


def configure_logging(level: Optional[str] = None) -> None:
    """Configure process-wide logging once."""

    global _LOGGER_INITIALIZED
    if _LOGGER_INITIALIZED:
        return

    resolved_level = (level or get_settings().log_level).upper()
    if not isinstance(logging.getLevelName(resolved_level), int):
        resolved_level = "INFO"

    logging.basicConfig(level=resolved_level, format=LOG_FORMAT, stream=sys.stdout)
    _LOGGER_INITIALIZED = True


def get_logger(name: str) -> logging.Logger:
    """Return a configured logger for the requested module."""
    configure_logging()
    return logging.getLogger(name)


class BookingLogAdapter(logging.LoggerAdapter):
    """Appends the booking id to every message, in the same key=value style."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        return f"{msg} | booking_id={self.extra['booking_id']}", kwargs


def booking_logger(logger: logging.Logger, booking_id: Optional[str]) -> BookingLogAdapter:
    return BookingLogAdapter(logger, {"booking_id": booking_id or "-"})
