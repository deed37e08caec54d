"""
Structured logging configuration for deferred.

Provides JSON-formatted logs with trace_id support so every record emitted
while a request is in flight can be correlated with that request.

Environment Variables:
    DEFERRED_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR) - default: INFO
    DEFERRED_LOG_FORMAT: Log format (json, text) - default: text

Usage:
    from deferred.logging_config import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__, trace_id="a1b2c3d4")
    logger.info("Request finished", extra={"status": 200})
"""

import logging
import os
import sys
from typing import IO, Optional

from pythonjsonlogger.json import JsonFormatter


def setup_logging(stream: Optional[IO[str]] = None) -> None:
    """
    Configure root logger with structured logging.

    Args:
        stream: Stream for the console handler (default: sys.stdout)

    Reads configuration from environment variables:
    - DEFERRED_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    - DEFERRED_LOG_FORMAT: json, text (default: text)
    """
    log_level = os.getenv("DEFERRED_LOG_LEVEL", "INFO").upper()
    log_format = os.getenv("DEFERRED_LOG_FORMAT", "text").lower()

    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    level = level_map.get(log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(level)

    if log_format == "json":
        formatter = JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s %(trace_id)s",
            rename_fields={
                "asctime": "timestamp",
                "name": "logger",
                "levelname": "level",
            },
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s [trace_id=%(trace_id)s]",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    # Filter on the handler so records from any logger get a trace_id
    handler.addFilter(TraceIDFilter())
    root_logger.addHandler(handler)


def get_logger(name: str, trace_id: Optional[str] = None) -> logging.LoggerAdapter:
    """
    Get a logger with optional trace_id for correlation.

    Args:
        name: Logger name (typically __name__)
        trace_id: Trace ID for correlating logs (typically a request id)

    Returns:
        LoggerAdapter with trace_id in extra fields
    """
    logger = logging.getLogger(name)
    return logging.LoggerAdapter(logger, {"trace_id": trace_id or "N/A"})


class TraceIDFilter(logging.Filter):
    """
    Logging filter that adds trace_id to all log records.

    Ensures all logs have a trace_id field, even if not set via LoggerAdapter.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "trace_id"):
            record.trace_id = "N/A"  # type: ignore
        return True
