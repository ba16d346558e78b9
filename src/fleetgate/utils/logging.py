"""Structured logging utilities for fleetgate."""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog


def setup_logging(level: str = "INFO", format: str = "json", output: str = "stdout") -> None:
    """Configure structured logging for fleetgate.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Log format (json or console)
        output: Output destination (stdout or stderr)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    stream = sys.stdout if output == "stdout" else sys.stderr

    logging.basicConfig(format="%(message)s", stream=stream, level=log_level)

    if format == "json":
        processors = [
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structured logger instance
    """
    return structlog.get_logger(name)


@contextmanager
def bound_context(**kwargs: Any) -> Iterator[None]:
    """Bind context fields (check name, node, ...) to every log line in the block.

    Args:
        **kwargs: Context fields to bind
    """
    with structlog.contextvars.bound_contextvars(**kwargs):
        yield


def log_error(
    logger: structlog.BoundLogger,
    error: Exception,
    operation: str,
    **kwargs: Any,
) -> None:
    """Log a failed operation as a ``<operation>_failed`` event with its traceback.

    Args:
        logger: Logger instance
        error: Exception that ended the operation
        operation: Operation name, e.g. ``check`` or ``upgrade_start``
        **kwargs: Additional context fields
    """
    logger.error(
        f"{operation}_failed",
        error_type=type(error).__name__,
        error=str(error),
        **kwargs,
        exc_info=True,
    )
