"""
Logging Configuration

Centralized logging setup with configurable levels, file rotation,
and structured logging for the evaluation engine.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional
import json
from datetime import datetime, timezone


# Evaluation context attributes carried on log records
CONTEXT_FIELDS = ('session_id', 'student', 'question_label')


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        for name in CONTEXT_FIELDS:
            if hasattr(record, name):
                log_entry[name] = getattr(record, name)

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


class ContextFormatter(logging.Formatter):
    """Plain-text formatter that appends evaluation context, e.g. ``[session_id=physics student=Asha (101)]``."""

    def formatMessage(self, record: logging.LogRecord) -> str:
        message = super().formatMessage(record)
        context = " ".join(
            f"{name}={getattr(record, name)}"
            for name in CONTEXT_FIELDS if getattr(record, name, None)
        )
        return f"{message} [{context}]" if context else message


class EvaluationLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds evaluation context to log records."""

    def process(self, msg: str, kwargs: dict) -> tuple:
        """Add extra context to log record."""
        extra = kwargs.get('extra', {})
        extra.update(self.extra)
        kwargs['extra'] = extra
        return msg, kwargs


def setup_logging(config=None, enable_json: bool = False) -> None:
    """
    Set up logging configuration for the application.

    Args:
        config: Optional configuration object (uses default if None)
        enable_json: Enable JSON formatted logging
    """
    if config is None:
        from markwise.core.config import get_config
        config = get_config()

    log_file = Path(config.logging.file)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.logging.level.upper()))

    # Clear any existing handlers
    root_logger.handlers.clear()

    # Console handler - use console_level for reduced terminal output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(getattr(logging, config.logging.console_level.upper()))

    # File handler with rotation - use main level for comprehensive file logging
    file_handler = logging.handlers.RotatingFileHandler(
        filename=log_file,
        maxBytes=_parse_size(config.logging.max_size),
        backupCount=config.logging.backup_count,
        encoding='utf-8'
    )
    file_handler.setLevel(getattr(logging, config.logging.level.upper()))

    if enable_json:
        json_formatter = JSONFormatter()
        console_handler.setFormatter(json_formatter)
        file_handler.setFormatter(json_formatter)
    else:
        console_formatter = ContextFormatter(config.logging.format)
        file_formatter = ContextFormatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s:%(lineno)d - %(message)s'
        )
        console_handler.setFormatter(console_formatter)
        file_handler.setFormatter(file_formatter)

    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    _configure_third_party_loggers()

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured - Console: {config.logging.console_level}, File: {config.logging.level}, Path: {log_file}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


def get_evaluation_logger(student: Optional[str] = None,
                          session_id: Optional[str] = None) -> EvaluationLoggerAdapter:
    """
    Get a logger adapter with evaluation context.

    Args:
        student: Student name or roll number for context
        session_id: Model key / evaluation session identifier

    Returns:
        Logger adapter with evaluation context
    """
    logger = get_logger('markwise.evaluation')
    extra = {}

    if student:
        extra['student'] = student
    if session_id:
        extra['session_id'] = session_id

    return EvaluationLoggerAdapter(logger, extra)


def _parse_size(size_str: str) -> int:
    """
    Parse size string (e.g., '10MB') to bytes.

    Args:
        size_str: Size string like '10MB', '1GB', etc.

    Returns:
        Size in bytes
    """
    size_str = size_str.upper().strip()

    # Longest suffix first so 'MB' is not read as 'B'
    multipliers = {
        'GB': 1024 ** 3,
        'MB': 1024 ** 2,
        'KB': 1024,
        'B': 1,
    }

    for unit, multiplier in multipliers.items():
        if size_str.endswith(unit):
            number_str = size_str[:-len(unit)].strip()
            try:
                number = float(number_str)
                return int(number * multiplier)
            except ValueError:
                break

    # Default to 10MB if parsing fails
    return 10 * 1024 * 1024


def _configure_third_party_loggers() -> None:
    """Configure third-party library loggers."""
    logging.getLogger('aiohttp').setLevel(logging.WARNING)
    logging.getLogger('asyncio').setLevel(logging.WARNING)


class PerformanceTimer:
    """Context manager for timing operations."""

    def __init__(self, operation: str, logger: logging.Logger = None):
        """
        Initialize performance timer.

        Args:
            operation: Description of the operation being timed
            logger: Logger instance to use
        """
        self.operation = operation
        self.logger = logger or get_logger(__name__)
        self.start_time = None
        self.duration: Optional[float] = None

    def __enter__(self):
        """Start timing."""
        self.start_time = datetime.now()
        self.logger.debug(f"Started {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """End timing and log duration."""
        end_time = datetime.now()
        self.duration = (end_time - self.start_time).total_seconds()

        if exc_type is None:
            self.logger.info(f"Completed {self.operation} in {self.duration:.3f}s")
        else:
            self.logger.error(f"Failed {self.operation} after {self.duration:.3f}s: {exc_val}")
