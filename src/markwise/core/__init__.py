"""
Core Module

Foundational components used across the application including configuration
management and custom exceptions.
"""

from .config import get_config, set_config, reload_config, AppConfig
from .exceptions import (
    MarkwiseException,
    ConfigurationError,
    ValidationError,
    ScoringServiceError,
    ScoringTimeoutError,
    InvalidScoringResponseError,
    QuestionProcessingError,
    EvaluationCancelledError,
)

__all__ = [
    "get_config",
    "set_config",
    "reload_config",
    "AppConfig",
    "MarkwiseException",
    "ConfigurationError",
    "ValidationError",
    "ScoringServiceError",
    "ScoringTimeoutError",
    "InvalidScoringResponseError",
    "QuestionProcessingError",
    "EvaluationCancelledError",
]
