"""
Tests for Text Normalization
"""

import pytest

from markwise.evaluation.normalizer import normalize, normalize_for_comparison, canonical_key


class TestNormalize:
    """Test cases for normalize()."""

    def test_none_and_empty(self):
        """None and empty strings normalize to an empty string."""
        assert normalize(None) == ""
        assert normalize("") == ""

    def test_newlines_become_spaces(self):
        """Every newline style is replaced by a space."""
        assert normalize("line one\nline two\r\nline three\rfour") == "line one line two line three four"

    def test_whitespace_collapses(self):
        """Runs of whitespace collapse to one space."""
        assert normalize("too    many \t spaces") == "too many spaces"

    def test_leading_non_word_run_removed(self):
        """A leading run of punctuation is stripped."""
        assert normalize("--> Answer here") == "Answer here"
        assert normalize(":) ok") == "ok"

    def test_inner_punctuation_kept(self):
        """Only the leading run of non-word characters is removed."""
        assert normalize("a, b; c.") == "a, b; c."

    def test_trims(self):
        assert normalize("   padded   ") == "padded"

    def test_non_string_input(self):
        """Numbers are stringified before cleaning."""
        assert normalize(42) == "42"

    @pytest.mark.parametrize("text", [
        "  -- Q.1) What is\nphotosynthesis?  ",
        "\n\n***bold***",
        "plain",
        "\t\t",
        "!!!",
    ])
    def test_idempotent(self, text):
        """Normalizing twice equals normalizing once."""
        once = normalize(text)
        assert normalize(once) == once

    def test_comparison_form_is_lower_case(self):
        assert normalize_for_comparison("  Paris IS the Capital ") == "paris is the capital"


class TestCanonicalKey:
    """Test cases for canonical_key()."""

    @pytest.mark.parametrize("label", ["Q.08", "Q 8", "q8", "Q8)", "q. 8", "Q.8"])
    def test_question_number_variants(self, label):
        """Common question number spellings share one key."""
        assert canonical_key(label) == "q8"

    def test_leading_zeros_dropped(self):
        assert canonical_key("Q.01") == canonical_key("Q1") == "q1"

    def test_multi_digit(self):
        assert canonical_key("Q12") == "q12"

    def test_number_inside_longer_label(self):
        """A question number later in the label is still found."""
        assert canonical_key("Ans to Q3") == "q3"

    def test_falls_back_to_normalized_text(self):
        """Labels without a question number use the lower-cased text."""
        assert canonical_key("  What is  Photosynthesis? ") == "what is photosynthesis?"

    def test_word_starting_with_q_is_not_a_number(self):
        assert canonical_key("Question") == "question"

    def test_none(self):
        assert canonical_key(None) == ""
