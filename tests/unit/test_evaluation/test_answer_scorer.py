"""
Tests for Answer Scoring
"""

import asyncio

import aiohttp
import pytest
from unittest.mock import AsyncMock

from markwise.core.exceptions import (
    InvalidScoringResponseError,
    ScoringServiceError,
    ScoringTimeoutError,
)
from markwise.evaluation.scorer import (
    AnswerScorer,
    clamp_mark,
    INVALID_RESPONSE_EXPLANATION,
    PERFECT_MATCH_EXPLANATION,
    SERVER_UNAVAILABLE_EXPLANATION,
)
from markwise.evaluation.types import ScoreProvenance


class TestAnswerScorer:
    """Test cases for AnswerScorer."""

    @pytest.mark.asyncio
    async def test_exact_match_awards_full_marks_without_remote_call(self, fake_scorer):
        scorer = AnswerScorer(fake_scorer)

        result = await scorer.score("Paris is the capital of France",
                                    "Paris is the capital of France", 5)

        assert result.awarded_marks == 5
        assert result.explanation == PERFECT_MATCH_EXPLANATION
        assert result.provenance == ScoreProvenance.EXACT_MATCH
        assert fake_scorer.compare_calls == []

    @pytest.mark.asyncio
    async def test_exact_match_ignores_case_and_spacing(self, fake_scorer):
        scorer = AnswerScorer(fake_scorer)

        result = await scorer.score("  paris IS the   capital of france", "Paris is the capital of France", 5)

        assert result.provenance == ScoreProvenance.EXACT_MATCH
        assert fake_scorer.compare_calls == []

    @pytest.mark.asyncio
    async def test_empty_answers_match(self, fake_scorer):
        """An empty answer against an empty model answer is an exact match."""
        scorer = AnswerScorer(fake_scorer)

        result = await scorer.score("", "", 3)

        assert result.awarded_marks == 3

    @pytest.mark.asyncio
    async def test_remote_score(self, scorer_factory):
        client = scorer_factory(mark=3.5, explanation="Mostly right.")
        scorer = AnswerScorer(client)

        result = await scorer.score("Paris", "Paris is the capital of France", 5)

        assert result.awarded_marks == 3.5
        assert result.explanation == "Mostly right."
        assert result.provenance == ScoreProvenance.REMOTE_SCORED
        assert client.compare_calls == [{
            "student_answer": "Paris",
            "model_answer": "Paris is the capital of France",
            "max_mark": 5,
        }]

    @pytest.mark.asyncio
    async def test_remote_mark_is_clamped(self, scorer_factory):
        scorer = AnswerScorer(scorer_factory(mark=12))

        high = await scorer.score("a", "b", 5)
        scorer.client = scorer_factory(mark=-2)
        low = await scorer.score("a", "b", 5)

        assert high.awarded_marks == 5
        assert low.awarded_marks == 0

    @pytest.mark.asyncio
    async def test_empty_explanation_replaced(self, scorer_factory):
        scorer = AnswerScorer(scorer_factory(mark=1, explanation=""))

        result = await scorer.score("a", "b", 5)

        assert result.explanation == "No explanation provided."

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        ScoringServiceError("HTTP 500", status_code=500),
        ScoringTimeoutError("slow", timeout_seconds=30),
        asyncio.TimeoutError(),
        aiohttp.ClientConnectionError("refused"),
        ConnectionRefusedError(),
    ])
    async def test_unavailable_scorer_degrades_to_zero(self, scorer_factory, error):
        scorer = AnswerScorer(scorer_factory(error=error))

        result = await scorer.score("Berlin", "Paris is the capital of France", 5)

        assert result.awarded_marks == 0
        assert result.explanation == SERVER_UNAVAILABLE_EXPLANATION
        assert "defaulted to 0 marks" in result.explanation
        assert result.provenance == ScoreProvenance.DEGRADED

    @pytest.mark.asyncio
    async def test_invalid_response_degrades_to_zero(self, scorer_factory):
        scorer = AnswerScorer(scorer_factory(error=InvalidScoringResponseError("bad json")))

        result = await scorer.score("a", "b", 5)

        assert result.awarded_marks == 0
        assert result.explanation == INVALID_RESPONSE_EXPLANATION
        assert result.provenance == ScoreProvenance.DEGRADED

    @pytest.mark.asyncio
    async def test_unexpected_errors_propagate(self):
        client = AsyncMock()
        client.compare_answers.side_effect = RuntimeError("bug")
        scorer = AnswerScorer(client)

        with pytest.raises(RuntimeError):
            await scorer.score("a", "b", 5)

    @pytest.mark.asyncio
    async def test_statistics(self, scorer_factory):
        client = scorer_factory(mark=lambda s, m, mx: 1)
        scorer = AnswerScorer(client)

        await scorer.score("same", "same", 2)
        await scorer.score("a", "b", 2)
        client.error = ScoringServiceError("down")
        await scorer.score("c", "d", 2)

        stats = scorer.get_scoring_statistics()
        assert stats['total_scored'] == 3
        assert stats['exact_matches'] == 1
        assert stats['remote_scored'] == 1
        assert stats['degraded'] == 1
        assert stats['degraded_rate'] == pytest.approx(1 / 3)

        scorer.reset_statistics()
        assert scorer.get_scoring_statistics()['total_scored'] == 0


class TestClampMark:
    """Test cases for clamp_mark()."""

    def test_within_range(self):
        assert clamp_mark(2.5, 5) == 2.5

    def test_bounds(self):
        assert clamp_mark(-1, 5) == 0
        assert clamp_mark(7, 5) == 5
