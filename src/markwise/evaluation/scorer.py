"""
Answer Scoring

Scores one answer: exact match after normalization awards full marks
without a network call; anything else goes to the remote semantic scorer,
and any scorer failure degrades to zero marks.
"""

import asyncio
from typing import Dict, Any

import aiohttp

from .normalizer import normalize_for_comparison
from .types import ScoreResult, ScoreProvenance
from ..core.exceptions import ScoringServiceError, InvalidScoringResponseError
from ..scoring.base import ScorerClient
from ..utils.logging import get_logger

logger = get_logger(__name__)

PERFECT_MATCH_EXPLANATION = "Perfect match with model answer."
SERVER_UNAVAILABLE_EXPLANATION = "Model server unavailable, defaulted to 0 marks."
INVALID_RESPONSE_EXPLANATION = "Invalid response from model server, defaulted to 0 marks."


def clamp_mark(mark: float, max_mark: int) -> float:
    """Clamp ``mark`` into ``[0, max_mark]``."""
    return max(0, min(mark, max_mark))


class AnswerScorer:
    """Scores student answers against model answers."""

    def __init__(self, client: ScorerClient):
        """
        Initialize the scorer.

        Args:
            client: Remote semantic scorer used when texts differ
        """
        self.client = client

        self.scoring_stats = {
            'total_scored': 0,
            'exact_matches': 0,
            'remote_scored': 0,
            'degraded': 0,
        }

    async def score(self, student_answer: str, model_answer: str,
                    max_mark: int) -> ScoreResult:
        """
        Score a single answer.

        Args:
            student_answer: Student's answer text
            model_answer: Model answer text
            max_mark: Maximum mark for the question

        Returns:
            ScoreResult tagged with its provenance
        """
        if normalize_for_comparison(student_answer) == normalize_for_comparison(model_answer):
            result = ScoreResult(
                awarded_marks=max_mark,
                explanation=PERFECT_MATCH_EXPLANATION,
                provenance=ScoreProvenance.EXACT_MATCH,
            )
        else:
            result = await self._score_remote(student_answer, model_answer, max_mark)

        self._update_stats(result)
        return result

    async def _score_remote(self, student_answer: str, model_answer: str,
                            max_mark: int) -> ScoreResult:
        try:
            response = await self.client.compare_answers(student_answer, model_answer, max_mark)
        except InvalidScoringResponseError as e:
            logger.warning(f"Scorer returned an invalid response: {str(e)}")
            return self._degraded(INVALID_RESPONSE_EXPLANATION)
        except (ScoringServiceError, asyncio.TimeoutError, aiohttp.ClientError, OSError) as e:
            logger.warning(f"Scorer unavailable: {str(e)}")
            return self._degraded(SERVER_UNAVAILABLE_EXPLANATION)

        awarded = clamp_mark(response.mark_awarded, max_mark)
        if awarded != response.mark_awarded:
            logger.debug(f"Clamped scorer mark {response.mark_awarded} to {awarded} (max {max_mark})")

        return ScoreResult(
            awarded_marks=awarded,
            explanation=response.explanation or "No explanation provided.",
            provenance=ScoreProvenance.REMOTE_SCORED,
        )

    @staticmethod
    def _degraded(explanation: str) -> ScoreResult:
        return ScoreResult(
            awarded_marks=0,
            explanation=explanation,
            provenance=ScoreProvenance.DEGRADED,
        )

    def _update_stats(self, result: ScoreResult) -> None:
        self.scoring_stats['total_scored'] += 1
        key = {
            ScoreProvenance.EXACT_MATCH: 'exact_matches',
            ScoreProvenance.REMOTE_SCORED: 'remote_scored',
            ScoreProvenance.DEGRADED: 'degraded',
        }[result.provenance]
        self.scoring_stats[key] += 1

    def get_scoring_statistics(self) -> Dict[str, Any]:
        """Counts of answers scored by each path."""
        stats = dict(self.scoring_stats)
        total = stats['total_scored']
        stats['degraded_rate'] = stats['degraded'] / total if total else 0.0
        return stats

    def reset_statistics(self) -> None:
        for key in self.scoring_stats:
            self.scoring_stats[key] = 0
