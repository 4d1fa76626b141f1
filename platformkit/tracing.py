"""
PlatformKit - Tracing

Lightweight span tracing on top of structured logging.

Provides:
- Trace IDs carried in a context variable (picked up by the JSON log formatter)
- trace(): context manager that logs span start/finish/error with duration
- instrument_client(): botocore event hooks that emit a span per SDK call
"""

import contextvars
import logging
import time
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any
from uuid import uuid4

logger = logging.getLogger(__name__)

# Trace ID context variable for distributed tracing
_trace_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar("trace_id", default=None)

# Keys under which the SDK hooks keep span state in botocore's per-request context
_SPAN_START_KEY = "platformkit_span_start"
_SPAN_NAME_KEY = "platformkit_span_name"


def get_trace_id() -> str | None:
    """Get current trace ID from context."""
    return _trace_id_ctx.get()


def set_trace_id(trace_id: str) -> contextvars.Token[str | None]:
    """Set trace ID in context. Returns a token usable with reset_trace_id."""
    return _trace_id_ctx.set(trace_id)


def reset_trace_id(token: contextvars.Token[str | None]) -> None:
    _trace_id_ctx.reset(token)


def generate_trace_id() -> str:
    """Generate a new trace ID and set it in context."""
    trace_id = str(uuid4())
    set_trace_id(trace_id)
    return trace_id


@contextmanager
def trace(span_name: str, tags: dict[str, str] | None = None) -> Generator[None, None, None]:
    """
    Context manager for tracing a span.

    Args:
        span_name: Name of the span
        tags: Optional span tags

    Example:
        with trace("secrets.get", {"secret_id": secret_id}):
            value = client.get_secret_value(SecretId=secret_id)
    """
    start_time = time.perf_counter()
    trace_id = get_trace_id()
    tags = tags or {}

    logger.debug(
        "Span started: %s",
        span_name,
        extra={"span_name": span_name, "trace_id": trace_id, "tags": tags},
    )

    try:
        yield
    except Exception as e:
        logger.error(
            "Span error: %s",
            span_name,
            extra={"span_name": span_name, "trace_id": trace_id, "error": str(e), "tags": tags},
        )
        raise
    finally:
        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(
            "Span completed: %s",
            span_name,
            extra={
                "span_name": span_name,
                "trace_id": trace_id,
                "duration_ms": round(duration_ms, 2),
                "tags": tags,
            },
        )


def _span_name(model: Any, context: dict[str, Any] | None) -> str:
    if model is not None:
        return f"aws.{model.service_model.service_name}.{model.name}"
    if context and _SPAN_NAME_KEY in context:
        return str(context[_SPAN_NAME_KEY])
    return "aws.unknown"


def _elapsed_ms(context: dict[str, Any] | None) -> float | None:
    if not context or _SPAN_START_KEY not in context:
        return None
    return round((time.perf_counter() - context.pop(_SPAN_START_KEY)) * 1000, 2)


def _before_call(model: Any = None, context: dict[str, Any] | None = None, **kwargs: Any) -> None:
    span_name = _span_name(model, context)
    if context is not None:
        context[_SPAN_START_KEY] = time.perf_counter()
        context[_SPAN_NAME_KEY] = span_name
    logger.debug("Span started: %s", span_name, extra={"span_name": span_name, "trace_id": get_trace_id()})


def _after_call(model: Any = None, context: dict[str, Any] | None = None, **kwargs: Any) -> None:
    span_name = _span_name(model, context)
    logger.debug(
        "Span completed: %s",
        span_name,
        extra={"span_name": span_name, "trace_id": get_trace_id(), "duration_ms": _elapsed_ms(context)},
    )


def _after_call_error(
    context: dict[str, Any] | None = None,
    exception: BaseException | None = None,
    **kwargs: Any,
) -> None:
    span_name = _span_name(kwargs.get("model"), context)
    logger.error(
        "Span error: %s",
        span_name,
        extra={
            "span_name": span_name,
            "trace_id": get_trace_id(),
            "duration_ms": _elapsed_ms(context),
            "error": str(exception),
        },
    )


def instrument_client(client: Any) -> Any:
    """
    Register tracing hooks on a botocore/boto3 client.

    Every API call made through the client emits a span named
    ``aws.<service>.<operation>``. Returns the client for chaining.
    """
    events = client.meta.events
    events.register("before-call.*.*", _before_call, unique_id="platformkit-trace-before")
    events.register("after-call.*.*", _after_call, unique_id="platformkit-trace-after")
    events.register("after-call-error.*.*", _after_call_error, unique_id="platformkit-trace-error")
    return client
