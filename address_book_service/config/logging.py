"""Logging configuration for the application."""

import json
import logging
import logging.config
import sys
import uuid
from contextvars import ContextVar
from typing import Dict, Any, Optional

from .settings import Settings, settings

# Context variable for correlation ID
correlation_id: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)

# Attributes every LogRecord carries; anything else was passed through ``extra``
_RESERVED_ATTRS = frozenset({
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename', 'module',
    'lineno', 'funcName', 'created', 'msecs', 'relativeCreated', 'thread', 'threadName',
    'processName', 'process', 'taskName', 'getMessage', 'exc_info', 'exc_text',
    'stack_info', 'correlation_id', 'message', 'asctime',
})


class CorrelationIdFormatter(logging.Formatter):
    """Custom formatter that includes correlation ID in log records."""

    def format(self, record: logging.LogRecord) -> str:
        # Add correlation ID to the record
        record.correlation_id = correlation_id.get() or "N/A"
        return super().format(record)


class StructuredFormatter(CorrelationIdFormatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as a single JSON line."""
        # Get correlation ID
        corr_id = correlation_id.get() or "N/A"

        # Build log entry
        log_entry = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "correlation_id": corr_id,
            "message": record.getMessage(),
        }

        # Add any other extra fields
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith('_'):
                log_entry[key] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def get_logging_config(app_settings: Optional[Settings] = None) -> Dict[str, Any]:
    """Get logging configuration based on settings."""
    app_settings = app_settings or settings

    if app_settings.log_format == "json":
        formatter_config = {
            "()": "address_book_service.config.logging.StructuredFormatter",
            "datefmt": "%Y-%m-%dT%H:%M:%S"
        }
    else:
        formatter_config = {
            "()": "address_book_service.config.logging.CorrelationIdFormatter",
            "format": "%(asctime)s - %(correlation_id)s - %(name)s - %(levelname)s - %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S"
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": formatter_config,
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "stream": sys.stdout,
                "formatter": "default",
                "level": app_settings.log_level,
            },
        },
        "root": {
            "level": app_settings.log_level,
            "handlers": ["console"],
        },
        "loggers": {
            "address_book_service": {
                "level": app_settings.log_level,
                "handlers": ["console"],
                "propagate": False,
            },
            "uvicorn": {
                "level": "INFO",
                "handlers": ["console"],
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "level": "INFO" if app_settings.database_echo else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }


def setup_logging(app_settings: Optional[Settings] = None) -> None:
    """Setup logging configuration."""
    logging.config.dictConfig(get_logging_config(app_settings))


def generate_correlation_id() -> str:
    """Generate a new correlation ID."""
    return str(uuid.uuid4())


def set_correlation_id(corr_id: str) -> None:
    """Set correlation ID in context."""
    correlation_id.set(corr_id)


def get_correlation_id() -> Optional[str]:
    """Get current correlation ID from context."""
    return correlation_id.get()


class LoggingService:
    """Service for consistent logging across the application."""

    def __init__(self, logger_name: str):
        self.logger = logging.getLogger(logger_name)

    def log_operation(self, level: str, message: str, address_id: Optional[int] = None,
                      operation: Optional[str] = None, error: Optional[str] = None, **kwargs) -> None:
        """Log operation with consistent format.

        Args:
            level: Log level (info, warning, error, debug)
            message: Log message
            address_id: Address id involved in the operation
            operation: Operation name
            error: Error message if applicable
            **kwargs: Additional fields to log
        """
        extra = {}
        if address_id is not None:
            extra['address_id'] = address_id
        if operation:
            extra['operation'] = operation
        if error:
            extra['error'] = error

        # Add any additional fields
        extra.update(kwargs)

        log_method = getattr(self.logger, level.lower())
        log_method(message, extra=extra)

    def log_crud_operation(self, operation: str, address_id: Optional[int], success: bool,
                           error: Optional[str] = None, **kwargs) -> None:
        """Log CRUD operation with standard format.

        Args:
            operation: CRUD operation name (list, create, read, delete)
            address_id: Address id, when the operation concerns a single record
            success: Whether operation was successful
            error: Error message if operation failed
            **kwargs: Additional fields
        """
        if success:
            self.log_operation(
                "info",
                f"{operation.capitalize()} operation completed successfully",
                address_id=address_id,
                operation=operation,
                **kwargs
            )
        else:
            self.log_operation(
                "error" if error else "warning",
                f"{operation.capitalize()} operation failed",
                address_id=address_id,
                operation=operation,
                error=error,
                **kwargs
            )

    def log_error(self, message: str, error: Exception, address_id: Optional[int] = None,
                  operation: Optional[str] = None, **kwargs) -> None:
        """Log error with consistent format."""
        self.log_operation(
            "error",
            message,
            address_id=address_id,
            operation=operation,
            error=str(error),
            error_type=type(error).__name__,
            **kwargs
        )
