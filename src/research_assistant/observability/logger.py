"""Structured logging configuration using structlog.

Provides JSON-formatted logs carrying the service name and the request's
correlation ID, so one research request can be followed from the HTTP
layer through retrieval, generation and the session write.
"""

import logging
import sys

import structlog
from structlog.typing import EventDict, Processor

from research_assistant.observability.constants import SERVICE_NAME
from research_assistant.observability.context import get_correlation_id

# Third-party loggers that log every provider and model request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def add_correlation_id(
    logger: logging.Logger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Structlog processor to add the request's correlation ID to log entries.

    Args:
        logger: The logger instance (unused but required by structlog).
        method_name: The log method name (unused but required by structlog).
        event_dict: The event dictionary being processed.

    Returns:
        The event dictionary, with correlation_id set when a request is in flight.
    """
    correlation_id = get_correlation_id()
    if correlation_id:
        event_dict["correlation_id"] = correlation_id
    return event_dict


def add_service_name(
    logger: logging.Logger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Structlog processor to stamp entries with the service name."""
    event_dict["service"] = SERVICE_NAME
    return event_dict


def configure_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    development_mode: bool = False,
) -> None:
    """Configure structlog and the stdlib root logger for the service.

    Args:
        log_level: The log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            DEBUG also emits the relay's state transitions.
        log_format: "json" for production, "console" for local runs.
        development_mode: If True, uses colored console output regardless of format.
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_service_name,
        add_correlation_id,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "console" or development_mode:
        processors: list[Processor] = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        # Tracebacks from logger.exception (unexpected relay failures) go into the JSON line
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
        force=True,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: The logger name (typically __name__).

    Returns:
        A bound structlog logger.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("adapter.search.completed", source="github", result_count=5)
    """
    return structlog.get_logger(name)
