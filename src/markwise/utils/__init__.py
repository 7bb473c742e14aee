"""
Utils Module

Logging configuration and async utility functions.
"""

from .logging import setup_logging, get_logger, get_evaluation_logger, PerformanceTimer
from .async_helpers import retry_async, retry_with_backoff, CancellationToken

__all__ = [
    "setup_logging",
    "get_logger",
    "get_evaluation_logger",
    "PerformanceTimer",
    "retry_async",
    "retry_with_backoff",
    "CancellationToken",
]
