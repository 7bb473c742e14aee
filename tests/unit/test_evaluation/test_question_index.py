"""
Tests for the Question Index
"""

import pytest

from markwise.evaluation.index import QuestionIndex, build_index
from markwise.evaluation.types import ModelAnswerEntry


class TestQuestionIndex:
    """Test cases for QuestionIndex."""

    def test_build_index_keys(self, model_entries):
        """Each entry is stored under its canonical key."""
        index = build_index(model_entries)

        assert isinstance(index, QuestionIndex)
        assert set(index) == {"q1", "q2", "q3"}
        assert len(index) == 3
        assert index["q2"].answer == "Water boils at 100 degrees Celsius"

    def test_lookup_uses_canonical_key(self, model_entries):
        index = build_index(model_entries)

        assert index.lookup("Q.02") is model_entries[1]
        assert index.lookup("q 3") is model_entries[2]
        assert index.lookup("Q7") is None

    def test_first_duplicate_wins(self):
        """Later entries with the same key are ignored and reported."""
        first = ModelAnswerEntry(question="Q1", answer="first", max_mark=2)
        second = ModelAnswerEntry(question="Q.01", answer="second", max_mark=3)

        index = build_index([first, second])

        assert len(index) == 1
        assert index["q1"] is first
        assert index.duplicate_keys == ("q1",)

    def test_read_only(self, model_entries):
        index = build_index(model_entries)

        with pytest.raises(TypeError):
            index["q9"] = model_entries[0]

    def test_textual_questions(self):
        entry = ModelAnswerEntry(question="Define Osmosis", answer="...", max_mark=4)
        index = build_index([entry])

        assert index.lookup("define   osmosis") is entry

    def test_empty_key(self):
        index = build_index([])

        assert len(index) == 0
        assert index.lookup("Q1") is None
