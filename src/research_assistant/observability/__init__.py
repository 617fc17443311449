"""Observability layer for the research assistant.

This module provides structured logging, request tracing via correlation IDs,
and sanitization of credentials before they reach the logs.

Usage:
    from research_assistant.observability import get_logger

    logger = get_logger(__name__)
    logger.info("chat.request.started", sources=["web"])
"""

from research_assistant.observability.context import (
    correlation_id_var,
    get_correlation_id,
    set_correlation_id,
)
from research_assistant.observability.logger import configure_logging, get_logger
from research_assistant.observability.middleware import (
    CorrelationIDMiddleware,
    RequestLoggingMiddleware,
)
from research_assistant.observability.sanitizer import sanitize

__all__ = [
    # Context
    "correlation_id_var",
    "get_correlation_id",
    "set_correlation_id",
    # Logger
    "configure_logging",
    "get_logger",
    # Middleware
    "CorrelationIDMiddleware",
    "RequestLoggingMiddleware",
    # Sanitizer
    "sanitize",
]
