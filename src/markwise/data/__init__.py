"""
Data Module

Loading of model answer keys and student submissions.
"""

from .loading import (
    parse_model_key,
    load_model_key,
    parse_submission,
    parse_submissions,
    load_submissions,
)

__all__ = [
    "parse_model_key",
    "load_model_key",
    "parse_submission",
    "parse_submissions",
    "load_submissions",
]
