"""
Observability components.

Provides structured logging with request correlation IDs.
"""

from .logging import (
    ContextualLoggerAdapter,
    CorrelationIdMiddleware,
    clear_correlation_id,
    get_correlation_id,
    get_logger,
    get_logging_context,
    log_operation,
    set_correlation_id,
)

__all__ = [
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
    "get_logging_context",
    "ContextualLoggerAdapter",
    "CorrelationIdMiddleware",
    "get_logger",
    "log_operation",
]
