"""
Exporter Logging Setup

Plain-text logging for interactive runs, JSON logging for log shippers.
Stdlib loggers and structlog loggers end up on the same root handler.
"""

import logging
import sys
from typing import Any, Optional

import structlog
from pythonjsonlogger import jsonlogger

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FORMATS = ("text", "json")


# ============================================================================
# LOGGING CONFIGURATION
# ============================================================================

def setup_logging(
    log_level: str = "INFO",
    log_format: str = "text",
    service_name: str = "pingdom-exporter",
    stream: Optional[Any] = None,
) -> None:
    """
    Configure the root logger and structlog.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: "text" or "json"
        service_name: Bound to every structlog event
        stream: Output stream (defaults to stderr)
    """
    level = getattr(logging, log_level.upper())
    json_output = log_format == "json"

    handler = logging.StreamHandler(stream or sys.stderr)
    if json_output:
        handler.setFormatter(jsonlogger.JsonFormatter(
            fmt='%(asctime)s %(levelname)s %(name)s %(message)s',
            timestamp=True
        ))
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # In json mode event fields travel as record extras so the JsonFormatter
    # emits them as top-level keys.
    renderer = (
        structlog.stdlib.render_to_log_kwargs if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(service=service_name)


def get_logger(name: str = __name__) -> structlog.BoundLogger:
    """
    Get a structured logger instance

    Args:
        name: Logger name (typically __name__)

    Returns:
        Bound structlog logger instance
    """
    return structlog.get_logger(name)


def log_error(
    logger: structlog.BoundLogger,
    error: Exception,
    context: str,
    **extra
):
    """
    Log error with type and message

    Args:
        logger: Structlog logger instance
        error: Exception instance
        context: Event name
        **extra: Additional context fields
    """
    logger.error(
        context,
        error_type=type(error).__name__,
        error_message=str(error),
        **extra
    )
