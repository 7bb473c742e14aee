"""
Custom Exception Classes

Application-specific exception classes for error handling
throughout the answer evaluation engine.
"""

from typing import Optional, Any, Dict


class MarkwiseException(Exception):
    """Base exception class for all markwise errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(MarkwiseException):
    """Raised when there's an issue with configuration setup or validation."""
    pass


class ValidationError(MarkwiseException):
    """Raised when a model answer key or student submission is malformed."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 invalid_value: Optional[Any] = None, **kwargs):
        super().__init__(message, kwargs)
        self.field_name = field_name
        self.invalid_value = invalid_value


class ScoringServiceError(MarkwiseException):
    """Raised when a call to the remote semantic scorer fails."""

    def __init__(self, message: str, endpoint: Optional[str] = None,
                 status_code: Optional[int] = None,
                 response_body: Optional[str] = None, **kwargs):
        super().__init__(message, kwargs)
        self.endpoint = endpoint
        self.status_code = status_code
        self.response_body = response_body


class ScoringTimeoutError(ScoringServiceError):
    """Raised when the remote scorer does not answer within the timeout."""

    def __init__(self, message: str, timeout_seconds: Optional[float] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.timeout_seconds = timeout_seconds


class InvalidScoringResponseError(ScoringServiceError):
    """Raised when the remote scorer answers with an unusable payload."""
    pass


class QuestionProcessingError(MarkwiseException):
    """Raised when a single question cannot be matched or scored."""

    def __init__(self, message: str, question_label: Optional[str] = None,
                 student: Optional[str] = None, **kwargs):
        super().__init__(message, kwargs)
        self.question_label = question_label
        self.student = student



class EvaluationCancelledError(MarkwiseException):
    """Raised when a caller asks for a cancelled batch to be treated as an error."""

    def __init__(self, message: str, completed_students: int = 0, **kwargs):
        super().__init__(message, kwargs)
        self.completed_students = completed_students
