"""
PlatformKit - Logging

Structured JSON logging plus helpers to carry a logger through a Context so
that code running on behalf of a request logs with the request's logger.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

from .context import Context, with_value
from .tracing import get_trace_id

_RESERVED_ATTRS = frozenset(
    (
        "args",
        "msg",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "name",
        "message",
    )
)


class _LoggerKey:
    def __repr__(self) -> str:
        return "platformkit.log.logger"


_LOGGER_KEY = _LoggerKey()


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        trace_id = get_trace_id()
        if trace_id:
            log_data["trace_id"] = trace_id

        # Extra fields passed through logger.*(extra={...})
        for key, value in record.__dict__.items():
            if key not in log_data and not key.startswith("_") and key not in _RESERVED_ATTRS:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def configure_logging(level: str = "INFO", json_format: bool = True) -> logging.Logger:
    """
    Install a single stream handler on the ``platformkit`` logger.

    Args:
        level: Log level name
        json_format: Emit JSON lines (default) or plain text

    Returns:
        The configured package logger
    """
    logger = logging.getLogger("platformkit")
    logger.handlers.clear()

    handler = logging.StreamHandler()
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level.upper())

    return logger


def get_logger_for_type(obj: object) -> logging.Logger:
    """Logger named after the class of obj (or obj itself when it is a class)."""
    cls = obj if isinstance(obj, type) else type(obj)
    return logging.getLogger(f"{cls.__module__}.{cls.__qualname__}")


def with_logger(ctx: Context, logger: logging.Logger | logging.LoggerAdapter[Any]) -> Context:
    """Derive a context carrying logger."""
    return with_value(ctx, _LOGGER_KEY, logger)


def logger_from_ctx(
    ctx: Context,
    default: logging.Logger | logging.LoggerAdapter[Any] | None = None,
) -> logging.Logger | logging.LoggerAdapter[Any]:
    """The logger carried by ctx, else default, else the package logger."""
    logger = ctx.value(_LOGGER_KEY)
    if logger is not None:
        return logger  # type: ignore[no-any-return]
    return default if default is not None else logging.getLogger("platformkit")
