"""
Scoring Module

Clients for the remote semantic scorer that marks answers the
exact-match fast path cannot decide.
"""

from .base import ScorerClient, ScoreResponse
from .http_client import HttpScorerClient

__all__ = [
    "ScorerClient",
    "ScoreResponse",
    "HttpScorerClient",
]
