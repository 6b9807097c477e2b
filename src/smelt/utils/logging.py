"""
Structured logging configuration for the smelt service.

Provides JSON-formatted logging with automatic smelt ID correlation.
"""

import json
import logging
import sys
from typing import Any

from smelt.config import Settings
from smelt.utils.request_context import get_smelt_id

# Standard LogRecord attributes, never copied into the JSON payload
_STANDARD_ATTRS = {
    "name",
    "msg",
    "args",
    "created",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "thread",
    "threadName",
    "exc_info",
    "exc_text",
    "stack_info",
    "taskName",
    "getMessage",
}


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """
        Format a log record as JSON with automatic context injection.

        Includes all standard fields plus any extra fields from record.__dict__.
        The smelt_id is read from the context variable set by the processing
        pipeline, so callers never pass it explicitly.

        Args:
            record: The log record to format

        Returns:
            JSON-formatted string with all fields serialized
        """
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        smelt_id = get_smelt_id()
        if smelt_id:
            log_data["smelt_id"] = smelt_id

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                log_data[key] = value

        return json.dumps(log_data, default=str)


def setup_logging(settings: Settings) -> None:
    """
    Configure logging for the application.

    Sets up console logging with appropriate format based on configuration.
    Supports both JSON and standard formats.

    Args:
        settings: Application settings containing logging configuration
    """
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, settings.log_level.upper()))

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, settings.log_level.upper()))

    if settings.log_format == "json":
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    logger.info(
        "Logging configured",
        extra={
            "log_level": settings.log_level,
            "log_format": settings.log_format,
            "environment": settings.environment,
        },
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
