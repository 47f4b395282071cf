"""
Request-scoped logging for USER_API.

Every HTTP request gets a correlation ID (reused from ``X-Correlation-ID``
or generated) and its method and path are remembered for the duration of
the request. Service loggers pick both up automatically, so a store call
logged deep in ``UserService`` can be matched to the request that caused it.
"""

import contextvars
import logging
import time
import uuid
from collections.abc import Callable
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..constants import CORRELATION_ID_HEADER

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)
_request_route: contextvars.ContextVar[tuple[str, str] | None] = contextvars.ContextVar(
    "request_route", default=None
)

logger = logging.getLogger(__name__)


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Set (or generate) the correlation ID for the current request and return it."""
    if not correlation_id:
        correlation_id = uuid.uuid4().hex
    _correlation_id.set(correlation_id)
    return correlation_id


def clear_correlation_id() -> None:
    _correlation_id.set(None)
    _request_route.set(None)


def get_logging_context() -> dict[str, Any]:
    """
    Fields describing the request being served.

    Empty outside a request (e.g. during startup or in a bare service call).
    """
    context: dict[str, Any] = {}
    correlation_id = _correlation_id.get()
    if correlation_id:
        context["correlation_id"] = correlation_id
    route = _request_route.get()
    if route:
        context["http_method"], context["http_path"] = route
    return context


class ContextualLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that merges the request context into ``extra``."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        context = get_logging_context()
        context.update(kwargs.get("extra") or {})
        kwargs["extra"] = context
        return msg, kwargs


def get_logger(name: str) -> ContextualLoggerAdapter:
    return ContextualLoggerAdapter(logging.getLogger(name), {})


def log_operation(
    logger: logging.Logger | logging.LoggerAdapter,
    operation: str,
    duration_ms: float | None = None,
    level: int = logging.DEBUG,
    **fields: Any,
) -> None:
    """
    Log one completed store operation.

    Args:
        logger: Logger to write to
        operation: Service operation name, e.g. "create_user"
        duration_ms: Time spent in the store call
        level: Log level
        **fields: Operation outcome, e.g. user_id=..., updated=False
    """
    extra = get_logging_context()
    extra["operation"] = operation
    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)
    extra.update(fields)

    message = operation
    if fields:
        message += " " + " ".join(f"{k}={v}" for k, v in fields.items())
    if duration_ms is not None:
        message += f" ({duration_ms:.2f}ms)"

    logger.log(level, message, extra=extra)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Binds a correlation ID and the request route to each request.

    The ID is echoed on the response. When the app raises, the context is
    left in place so the server error handler can still read it.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_ID_HEADER))
        _request_route.set((request.method, request.url.path))
        started = time.perf_counter()

        response = await call_next(request)

        logger.debug(
            f"{request.method} {request.url.path} -> {response.status_code}",
            extra={
                **get_logging_context(),
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )
        clear_correlation_id()
        response.headers[CORRELATION_ID_HEADER] = correlation_id
        return response
