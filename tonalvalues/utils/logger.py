"""Structured logging setup with correlation IDs"""

import logging
import sys
import atexit
from typing import Optional
import structlog

_log_handlers = []  # Track handlers for cleanup
_flush_registered = False


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "console",
    log_file: Optional[str] = None
) -> structlog.BoundLogger:
    """Setup structured logging on top of the standard logging root logger"""
    level = getattr(logging, log_level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    _log_handlers.clear()

    # Diagnostics go to stderr so stdout stays free for command output
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setLevel(level)
    root_logger.addHandler(stream_handler)
    _log_handlers.append(stream_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
            file_handler.setLevel(level)
            root_logger.addHandler(file_handler)
            _log_handlers.append(file_handler)
        except OSError as e:
            logging.warning(f"Could not setup file logging: {e}")

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    global _flush_registered
    if not _flush_registered:
        atexit.register(_flush_handlers)
        _flush_registered = True

    return structlog.get_logger()


def _flush_handlers():
    """Flush all handlers on exit"""
    for handler in _log_handlers:
        try:
            handler.flush()
        except (OSError, ValueError):
            pass  # Stream already closed at shutdown


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    """Get a logger instance with optional name"""
    return structlog.get_logger(name or "tonalvalues")


def set_correlation_id(correlation_id: str):
    """Set correlation ID for run tracing"""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)
