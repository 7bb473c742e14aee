"""
Text Normalization

Single text-cleaning routine shared by display cleanup, question-key
extraction, and answer comparison.
"""

import re
from typing import Any, Optional

_NEWLINES = re.compile(r'\r\n|\r|\n')
_WHITESPACE = re.compile(r'\s+')
_LEADING_NON_WORD = re.compile(r'^[^\w]+')
_QUESTION_NUMBER = re.compile(r'\bq\s*\.?\s*(\d+)\b')


def normalize(text: Optional[Any]) -> str:
    """
    Clean extracted text.

    Newlines become spaces, whitespace runs collapse to one space, a single
    leading run of non-word characters is removed, and the result is trimmed.
    ``None`` and empty input give ``""``. Idempotent.
    """
    if text is None:
        return ""

    text = str(text)
    if not text:
        return ""

    text = _NEWLINES.sub(' ', text)
    text = _WHITESPACE.sub(' ', text)
    text = _LEADING_NON_WORD.sub('', text)
    return text.strip()


def normalize_for_comparison(text: Optional[Any]) -> str:
    """Case-folded form of :func:`normalize` used for equality checks."""
    return normalize(text).lower()


def canonical_key(label: Optional[Any]) -> str:
    """
    Reduce a question label to a lookup key.

    A question number such as ``"Q.08"``, ``"Q 8"`` or ``"q8)"`` becomes
    ``"q8"``; anything else falls back to the normalized, lower-cased text.
    """
    text = normalize_for_comparison(label)

    match = _QUESTION_NUMBER.search(text)
    if match:
        return f"q{int(match.group(1))}"

    return text
