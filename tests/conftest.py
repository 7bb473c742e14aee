"""
Pytest Configuration

Global test configuration and fixtures for the markwise test suite.
"""

import pytest
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

# Add src to Python path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from markwise.core.config import AppConfig, LoggingConfig
from markwise.evaluation.types import (
    ModelAnswerEntry,
    StudentAnswerEntry,
    StudentIdentity,
    StudentSubmission,
)
from markwise.scoring.base import ScorerClient, ScoreResponse


class FakeScorerClient(ScorerClient):
    """In-memory scorer that records every call it receives."""

    def __init__(self, mark: Union[float, Callable[[str, str, int], float]] = 0.0,
                 explanation: str = "Scored by fake scorer.",
                 error: Optional[Exception] = None,
                 same_questions: Optional[Dict[str, str]] = None):
        self.mark = mark
        self.explanation = explanation
        self.error = error
        self.same_questions = same_questions or {}
        self.compare_calls: List[Dict[str, Any]] = []
        self.question_calls: List[Dict[str, str]] = []
        self.closed = False

    async def compare_answers(self, student_answer, model_answer, max_mark):
        self.compare_calls.append({
            "student_answer": student_answer,
            "model_answer": model_answer,
            "max_mark": max_mark,
        })
        if self.error is not None:
            raise self.error
        mark = self.mark(student_answer, model_answer, max_mark) if callable(self.mark) else self.mark
        return ScoreResponse(mark_awarded=mark, explanation=self.explanation)

    async def compare_questions(self, student_question, model_question):
        self.question_calls.append({
            "student_question": student_question,
            "model_question": model_question,
        })
        if self.error is not None:
            raise self.error
        return self.same_questions.get(student_question) == model_question

    async def check_health(self):
        if self.error is not None:
            raise self.error
        return {"status": "ok"}

    async def close(self):
        self.closed = True


@pytest.fixture
def temp_dir():
    """Provide a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def test_config(temp_dir):
    """Provide test configuration."""
    return AppConfig(
        name="markwise-test",
        version="test",
        debug=True,
        logging=LoggingConfig(
            level="DEBUG",
            file=str(temp_dir / "test.log")
        ),
    )


@pytest.fixture
def scorer_factory():
    """Build FakeScorerClient instances with custom behaviour."""
    return FakeScorerClient


@pytest.fixture
def fake_scorer():
    """Scorer that awards nothing unless a test configures it."""
    return FakeScorerClient()


@pytest.fixture
def model_key_data():
    """Model answer key in its on-disk document shape."""
    return {
        "data": [
            {"question": "Q1", "answer": "Paris is the capital of France", "mark": 5},
            {"question": "Q2", "answer": "Water boils at 100 degrees Celsius", "mark": "10"},
            {"question": "Q3", "answer": "Photosynthesis converts light into chemical energy", "mark": 5},
        ]
    }


@pytest.fixture
def model_entries():
    """Parsed model answer key."""
    return [
        ModelAnswerEntry(question="Q1", answer="Paris is the capital of France", max_mark=5),
        ModelAnswerEntry(question="Q2", answer="Water boils at 100 degrees Celsius", max_mark=10),
        ModelAnswerEntry(question="Q3", answer="Photosynthesis converts light into chemical energy", max_mark=5),
    ]


@pytest.fixture
def submissions_data():
    """Student submissions in their on-disk shape."""
    return [
        {
            "student": {"name": "Asha", "roll": "101", "email": "asha@example.com"},
            "qa_dict": {
                "Q.01": "Paris is the capital of France",
                "Q 2": "It boils at 90 degrees",
                "q3)": "Plants make food",
            },
        },
        {
            "student": {"name": "Ben", "roll": "102"},
            "qa_dict": {
                "Q1": "paris is the capital of france",
                "Q9": "An answer to a question that is not in the key",
            },
        },
    ]


@pytest.fixture
def students():
    """Parsed submissions for two students."""
    return [
        StudentSubmission(
            student=StudentIdentity(name="Asha", roll="101", email="asha@example.com"),
            answers=(
                StudentAnswerEntry("Q.01", "Paris is the capital of France"),
                StudentAnswerEntry("Q 2", "It boils at 90 degrees"),
                StudentAnswerEntry("q3)", "Plants make food"),
            ),
        ),
        StudentSubmission(
            student=StudentIdentity(name="Ben", roll="102"),
            answers=(
                StudentAnswerEntry("Q1", "paris is the capital of france"),
                StudentAnswerEntry("Q9", "An answer to a question that is not in the key"),
            ),
        ),
    ]
