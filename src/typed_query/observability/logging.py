"""Structured logging setup with JSON-lines or text output for ``typed_query``."""

from __future__ import annotations

import json
import logging
import math
import sys
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Final, TextIO

from typed_query.constants import LOG_FORMATS, ROOT_LOGGER_NAME

JSONScalar = str | int | float | bool | None
JSONValue = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]

_REDACTED_VALUE: Final[str] = "***REDACTED***"
_TEXT_FORMAT: Final[str] = "%(levelname)s %(name)s: %(message)s"

# Query strings routinely carry credentials; raw values of these params are masked.
_SENSITIVE_PARAM_TERMS: Final[tuple[str, ...]] = (
    "secret",
    "token",
    "password",
    "passwd",
    "api_key",
    "apikey",
    "signature",
    "authorization",
    "session",
)

_STANDARD_LOG_RECORD_FIELDS: Final[frozenset[str]] = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "thread",
        "threadName",
        "taskName",
    }
)

_ACTIVE_HANDLE_LOCK = threading.Lock()
_ACTIVE_HANDLE: LoggingHandle | None = None


@dataclass(frozen=True, slots=True)
class LoggingHandle:
    """The handler installed by ``setup_logging`` and the logger it is attached to."""

    logger: logging.Logger
    handler: logging.Handler
    fmt: str


class _JsonLineFormatter(logging.Formatter):
    """Formatter that emits canonical JSON objects per log line."""

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, JSONValue] = {
            "timestamp": _iso8601z_from_epoch(record.created),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extras = _extract_extra_fields(record)
        if extras:
            event["fields"] = extras

        if record.exc_info is not None:
            event["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            event["stack"] = str(record.stack_info)

        return json.dumps(event, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


class _TextFormatter(logging.Formatter):
    """Plain formatter that appends extra fields as sorted ``key=value`` pairs."""

    def __init__(self) -> None:
        super().__init__(_TEXT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = _extract_extra_fields(record)
        if not extras:
            return line
        rendered = " ".join(
            f"{key}={json.dumps(value, ensure_ascii=False)}" for key, value in sorted(extras.items())
        )
        return f"{line} [{rendered}]"


def setup_logging(
    level: int | str = "WARNING",
    fmt: str = "text",
    *,
    stream: TextIO | None = None,
    logger_name: str = ROOT_LOGGER_NAME,
) -> LoggingHandle:
    """Attach one stream handler to the package logger.

    Calling again replaces the previously installed handler. Importing the
    library never calls this; applications and the CLI opt in.
    """

    if fmt not in LOG_FORMATS:
        raise ValueError(f"log format must be one of {', '.join(LOG_FORMATS)}, got {fmt!r}")
    resolved_level = _parse_log_level(level)

    shutdown_logging()

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(resolved_level)
    handler.setFormatter(_JsonLineFormatter() if fmt == "json" else _TextFormatter())

    logger = logging.getLogger(logger_name)
    logger.setLevel(resolved_level)
    logger.propagate = False
    logger.addHandler(handler)

    handle = LoggingHandle(logger=logger, handler=handler, fmt=fmt)
    with _ACTIVE_HANDLE_LOCK:
        global _ACTIVE_HANDLE
        _ACTIVE_HANDLE = handle
    return handle


def shutdown_logging() -> None:
    """Detach the handler installed by ``setup_logging``, if any."""

    global _ACTIVE_HANDLE
    with _ACTIVE_HANDLE_LOCK:
        handle = _ACTIVE_HANDLE
        _ACTIVE_HANDLE = None
    if handle is None:
        return
    handle.logger.removeHandler(handle.handler)
    try:
        handle.handler.flush()
    except (OSError, ValueError):
        # The target stream was closed before the handler.
        pass
    finally:
        handle.handler.close()
    handle.logger.propagate = True
    handle.logger.setLevel(logging.NOTSET)


def get_active_logging_handle() -> LoggingHandle | None:
    with _ACTIVE_HANDLE_LOCK:
        return _ACTIVE_HANDLE


def _parse_log_level(value: int | str) -> int:
    if isinstance(value, bool):
        raise ValueError("log level must be a level name or integer")
    if isinstance(value, int):
        return value
    normalized = value.strip().upper()
    resolved = logging.getLevelName(normalized)
    if not isinstance(resolved, int):
        raise ValueError(f"unknown log level: {value!r}")
    return resolved


def _iso8601z_from_epoch(epoch_seconds: float) -> str:
    timestamp = datetime.fromtimestamp(epoch_seconds, tz=UTC)
    return timestamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _extract_extra_fields(record: logging.LogRecord) -> dict[str, JSONValue]:
    fields: dict[str, JSONValue] = {}
    for key, value in record.__dict__.items():
        if key in _STANDARD_LOG_RECORD_FIELDS or key.startswith("_"):
            continue
        fields[key] = _normalize_json_value(value)

    param = fields.get("param")
    if isinstance(param, str) and "raw_value" in fields and _is_sensitive_param(param):
        fields["raw_value"] = _REDACTED_VALUE
    return fields


def _is_sensitive_param(name: str) -> bool:
    lowered = name.lower()
    return any(term in lowered for term in _SENSITIVE_PARAM_TERMS)


def _normalize_json_value(value: object) -> JSONValue:
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else repr(value)
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, Mapping):
        return {str(key): _normalize_json_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize_json_value(item) for item in value]
    return repr(value)


__all__ = [
    "JSONValue",
    "LoggingHandle",
    "get_active_logging_handle",
    "setup_logging",
    "shutdown_logging",
]
