"""
Structured logging configuration using structlog.

Logs go to stderr so that stdout stays reserved for command output
(the CLI prints classification results there).
"""

import logging
import sys
from typing import Any, TextIO

import structlog


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    stream: TextIO | None = None,
) -> None:
    """
    Configure structured logging for the serving process.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_output: If True, emit one JSON object per event.
        stream: Output stream; defaults to stderr.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    stream = stream or sys.stderr

    logging.basicConfig(format="%(message)s", stream=stream, level=log_level)

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_output:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=stream.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger for a module (pass ``__name__``)."""
    return structlog.get_logger(name)


def log_context(**kwargs: Any) -> structlog.contextvars.bound_contextvars:
    """
    Bind key-value pairs to every log event inside the block.

    The binding is per thread, so concurrent requests on the threaded
    server keep separate contexts.

    Example:
        with log_context(endpoint="/classify"):
            log.info("Rejected request", status=400)
    """
    return structlog.contextvars.bound_contextvars(**kwargs)
