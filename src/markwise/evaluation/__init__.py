"""
Evaluation Module

Matching, scoring and aggregation of student answers against a model
answer key.
"""

from .normalizer import normalize, canonical_key
from .index import QuestionIndex, build_index
from .matcher import QuestionMatcher, MatchResult, MatchTier
from .scorer import AnswerScorer
from .evaluator import StudentEvaluator
from .batch import BatchEvaluator, evaluate_batch
from .aggregator import BatchAggregator, BatchStatistics, percentage, grade_band
from .types import (
    ModelAnswerEntry,
    StudentAnswerEntry,
    StudentIdentity,
    StudentSubmission,
    EvaluationRecord,
    StudentEvaluation,
    BatchEvaluation,
    ScoreResult,
    ScoreProvenance,
)

__all__ = [
    "normalize",
    "canonical_key",
    "QuestionIndex",
    "build_index",
    "QuestionMatcher",
    "MatchResult",
    "MatchTier",
    "AnswerScorer",
    "StudentEvaluator",
    "BatchEvaluator",
    "evaluate_batch",
    "BatchAggregator",
    "BatchStatistics",
    "percentage",
    "grade_band",
    "ModelAnswerEntry",
    "StudentAnswerEntry",
    "StudentIdentity",
    "StudentSubmission",
    "EvaluationRecord",
    "StudentEvaluation",
    "BatchEvaluation",
    "ScoreResult",
    "ScoreProvenance",
]
