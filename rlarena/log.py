"""Process-wide structured logger with key/value fields."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

_LOGGER_NAME = "rlarena"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

_LEVEL_NAMES = {
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warn",
    logging.ERROR: "error",
    logging.CRITICAL: "fatal",
}

_logger: logging.Logger | None = None


def _level_name(record: logging.LogRecord) -> str:
    return _LEVEL_NAMES.get(record.levelno, record.levelname.lower())


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "level": _level_name(record),
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "msg": record.getMessage(),
        }
        entry.update(getattr(record, "fields", {}))
        return json.dumps(entry, default=str)


class _ConsoleFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created).isoformat(timespec="milliseconds")
        line = f"{ts}\t{_level_name(record).upper()}\t{record.getMessage()}"
        fields = getattr(record, "fields", {})
        if fields:
            line += "\t" + json.dumps(fields, default=str)
        return line


def init(level: str) -> None:
    """Configure the logger, writing to standard error.

    ``"production"`` selects JSON output; any other value gives console output.
    ``debug``, ``info``, ``warn`` and ``error`` set the threshold; anything else means info.
    """
    global _logger
    logger = logging.getLogger(_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_JsonFormatter() if level == "production" else _ConsoleFormatter())
    logger.addHandler(handler)
    logger.setLevel(_LEVELS.get(level, logging.INFO))
    logger.propagate = False
    _logger = logger


def _get() -> logging.Logger:
    if _logger is None:
        init("info")
    assert _logger is not None
    return _logger


def sync() -> None:
    """Flush every handler."""
    if _logger is not None:
        for handler in _logger.handlers:
            handler.flush()


def _log(level: int, msg: str, fields: dict[str, Any]) -> None:
    _get().log(level, msg, extra={"fields": fields})


def debug(msg: str, **kwargs: Any) -> None:
    _log(logging.DEBUG, msg, kwargs)


def info(msg: str, **kwargs: Any) -> None:
    _log(logging.INFO, msg, kwargs)


def warn(msg: str, **kwargs: Any) -> None:
    _log(logging.WARNING, msg, kwargs)


def error(msg: str, **kwargs: Any) -> None:
    _log(logging.ERROR, msg, kwargs)


def fatal(msg: str, **kwargs: Any) -> None:
    """Log at fatal level, flush and exit the process."""
    _log(logging.CRITICAL, msg, kwargs)
    sync()
    raise SystemExit(1)