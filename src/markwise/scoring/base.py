"""
Scorer Client Interface

Abstract base class for semantic scorer clients. The evaluation engine only
talks to this interface so tests can substitute an in-memory fake.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any
from dataclasses import dataclass, field

from markwise.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ScoreResponse:
    """Validated payload returned by ``POST /compare``."""
    mark_awarded: float
    explanation: str
    latency_ms: float = 0.0
    raw: Dict[str, Any] = field(default_factory=dict)


class ScorerClient(ABC):
    """Abstract base class for remote semantic scorers."""

    @abstractmethod
    async def compare_answers(self, student_answer: str, model_answer: str,
                              max_mark: int) -> ScoreResponse:
        """
        Ask the scorer to mark a student answer against the model answer.

        Args:
            student_answer: Cleaned student answer text
            model_answer: Cleaned model answer text
            max_mark: Maximum mark available for the question

        Returns:
            ScoreResponse with the raw (unclamped) mark and explanation

        Raises:
            ScoringServiceError: If the call fails or the response is malformed
        """
        pass

    @abstractmethod
    async def compare_questions(self, student_question: str,
                                model_question: str) -> bool:
        """
        Ask the scorer whether two question texts refer to the same question.

        Raises:
            ScoringServiceError: If the call fails or the response is malformed
        """
        pass

    async def check_health(self) -> Dict[str, Any]:
        """Return the scorer's health payload. Optional for implementations."""
        return {"status": "unknown"}

    async def health_check(self) -> bool:
        """Return True when the scorer reports itself healthy."""
        try:
            payload = await self.check_health()
        except Exception as e:
            logger.warning(f"Scorer health check failed: {str(e)}")
            return False
        return str(payload.get("status", "")).lower() in ("ok", "healthy", "up", "running")

    async def close(self) -> None:
        """Release any held resources."""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
