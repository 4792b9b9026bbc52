"""Structured logging helpers shared across Snoocore components."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Dict, Optional, TextIO

from .settings import LogFormat

__all__ = ["JSONFormatter", "mask_sensitive_data", "setup_logging"]

LOGGER_NAME = "Snoocore"

_SENSITIVE_KEYS = {
    "authorization",
    "cookie",
    "set-cookie",
    "x-modhash",
    "modhash",
    "uh",
    "passwd",
    "password",
    "access_token",
    "refresh_token",
    "client_secret",
}

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_RESERVED_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def mask_sensitive_data(payload: Dict[str, object]) -> Dict[str, object]:
    """Return a copy of ``payload`` with credential fields masked."""

    def _mask_value(value: object) -> object:
        if isinstance(value, dict):
            return mask_sensitive_data(value)
        if isinstance(value, list):
            return [_mask_value(item) for item in value]
        return value

    masked: Dict[str, object] = {}
    for key, value in payload.items():
        if isinstance(key, str) and key.lower() in _SENSITIVE_KEYS and value:
            masked[key] = "***masked***"
        else:
            masked[key] = _mask_value(value)
    return masked


class JSONFormatter(logging.Formatter):
    """Formatter emitting masked JSON log entries."""

    def format(self, record: logging.LogRecord) -> str:
        """Render ``record`` as a JSON string including ``extra`` fields."""

        now = datetime.now(timezone.utc)
        payload: Dict[str, object] = {
            "timestamp": now.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(mask_sensitive_data(payload), default=str)


def setup_logging(
    *,
    level: str = "WARNING",
    fmt: LogFormat | str = LogFormat.CONSOLE,
    stream: Optional[TextIO] = None,
    propagate: bool = False,
) -> logging.Logger:
    """Configure the ``Snoocore`` logger with a single managed console handler."""

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    for handler in list(logger.handlers):
        if getattr(handler, "_snoocore_managed", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    if LogFormat(fmt) is LogFormat.JSON:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    handler._snoocore_managed = True  # type: ignore[attr-defined]
    logger.addHandler(handler)

    logger.propagate = propagate
    return logger
