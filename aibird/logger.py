"""Structured logging set up from the bot configuration."""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, TextIO

_FIELDS_ATTR = "aibird_fields"
_logger = logging.getLogger("aibird")
_handler: logging.Handler | None = None


class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}

_FORMATS = ("text", "json")


@dataclass
class LogConfig:
    level: LogLevel | str = LogLevel.INFO
    format: str = "text"

    def validate(self) -> None:
        """Raise ValueError if the level or format is not one of the allowed values."""
        try:
            LogLevel(self.level)
        except ValueError:
            raise ValueError(f"invalid log level {self.level!r}") from None
        if self.format not in _FORMATS:
            raise ValueError(f"invalid log format {self.format!r}")


def _level_name(record: logging.LogRecord) -> str:
    return "WARN" if record.levelno == logging.WARNING else record.levelname


def _timestamp(record: logging.LogRecord) -> str:
    return datetime.fromtimestamp(record.created).astimezone().isoformat(timespec="milliseconds")


def _quote(value: Any) -> str:
    text = str(value)
    if text == "" or not text.isprintable() or any(c.isspace() or c in '"=' for c in text):
        return json.dumps(text, ensure_ascii=False)
    return text


class _TextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        parts = [
            f"time={_timestamp(record)}",
            f"level={_level_name(record)}",
            f"msg={_quote(record.getMessage())}",
        ]
        fields = getattr(record, _FIELDS_ATTR, {})
        parts.extend(f"{key}={_quote(value)}" for key, value in fields.items())
        return " ".join(parts)


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": _timestamp(record),
            "level": _level_name(record),
            "msg": record.getMessage(),
            **getattr(record, _FIELDS_ATTR, {}),
        }
        return json.dumps(payload, default=str, ensure_ascii=False)


def configure(config: LogConfig, stream: TextIO | None = None) -> None:
    """Install the handler, level and format described by config."""
    global _handler
    problem = None
    try:
        config.validate()
    except ValueError as exc:
        problem = str(exc)

    try:
        level = _LEVELS[LogLevel(config.level)]
    except ValueError:
        level = logging.INFO

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(_JsonFormatter() if config.format == "json" else _TextFormatter())

    if _handler is not None:
        _logger.removeHandler(_handler)
    _handler = handler
    _logger.addHandler(handler)
    _logger.setLevel(level)
    _logger.propagate = False

    if problem is not None:
        error("Invalid logger configuration", error=problem)


def _emit(level: int, msg: str, fields: dict[str, Any]) -> None:
    _logger.log(level, msg, extra={_FIELDS_ATTR: fields})


def debug(msg: str, **kwargs: Any) -> None:
    _emit(logging.DEBUG, msg, kwargs)


def info(msg: str, **kwargs: Any) -> None:
    _emit(logging.INFO, msg, kwargs)


def warn(msg: str, **kwargs: Any) -> None:
    _emit(logging.WARNING, msg, kwargs)


def error(msg: str, **kwargs: Any) -> None:
    _emit(logging.ERROR, msg, kwargs)


class _BoundLogger:
    """A logger that adds fixed context fields to every record."""

    def __init__(self, fields: dict[str, Any]):
        self._fields = fields

    def bind(self, **kwargs: Any) -> "_BoundLogger":
        return _BoundLogger({**self._fields, **kwargs})

    def debug(self, msg: str, **kwargs: Any) -> None:
        _emit(logging.DEBUG, msg, {**self._fields, **kwargs})

    def info(self, msg: str, **kwargs: Any) -> None:
        _emit(logging.INFO, msg, {**self._fields, **kwargs})

    def warn(self, msg: str, **kwargs: Any) -> None:
        _emit(logging.WARNING, msg, {**self._fields, **kwargs})

    def error(self, msg: str, **kwargs: Any) -> None:
        _emit(logging.ERROR, msg, {**self._fields, **kwargs})


def bind(**kwargs: Any) -> _BoundLogger:
    """Return a logger carrying the given context fields, e.g. network=..."""
    return _BoundLogger(dict(kwargs))