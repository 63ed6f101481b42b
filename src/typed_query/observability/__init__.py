"""Public observability primitives: structured logging setup for the package logger."""

from typed_query.observability.logging import (
    JSONValue,
    LoggingHandle,
    get_active_logging_handle,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    "JSONValue",
    "LoggingHandle",
    "get_active_logging_handle",
    "setup_logging",
    "shutdown_logging",
]
