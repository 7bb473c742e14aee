"""
Question Matching

Resolves a student's question label to a model answer entry. Tiers are
tried in order and the first hit wins:

1. canonical-key lookup in the pre-built index
2. case-insensitive scan over normalized question text
3. (legacy mode, no index) remote semantic comparison, one entry at a time
"""

from typing import Optional, Sequence
from dataclasses import dataclass
from enum import Enum

from .index import QuestionIndex
from .normalizer import normalize_for_comparison
from .types import ModelAnswerEntry
from ..core.exceptions import ScoringServiceError
from ..scoring.base import ScorerClient
from ..utils.logging import get_logger

logger = get_logger(__name__)


class MatchTier(str, Enum):
    """How a question label was resolved."""
    CANONICAL_KEY = "canonical_key"
    TEXT_SCAN = "text_scan"
    REMOTE_COMPARISON = "remote_comparison"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class MatchResult:
    """Result of question matching."""
    entry: Optional[ModelAnswerEntry]
    tier: MatchTier

    @property
    def found(self) -> bool:
        return self.entry is not None


NOT_FOUND = MatchResult(entry=None, tier=MatchTier.NOT_FOUND)


class QuestionMatcher:
    """Matches student question labels against the model answer key."""

    def __init__(self, comparator: Optional[ScorerClient] = None):
        """
        Initialize the matcher.

        Args:
            comparator: Scorer used for the legacy remote-comparison tier.
                Without one the legacy tier is skipped.
        """
        self.comparator = comparator

    async def match(self, student_label: str,
                    index: Optional[QuestionIndex],
                    model_entries: Sequence[ModelAnswerEntry]) -> MatchResult:
        """
        Resolve ``student_label`` to a model entry.

        Args:
            student_label: Raw question label from the student's script
            index: Pre-built index, or None to run in legacy mode
            model_entries: Model answer key in its original order

        Returns:
            MatchResult; ``NOT_FOUND`` when no tier succeeds
        """
        result = self.match_local(student_label, index, model_entries)
        if result.found:
            return result

        if index is None and self.comparator is not None:
            return await self._match_remote(student_label, model_entries)

        logger.debug(f"No model entry found for question label '{student_label}'")
        return NOT_FOUND

    def match_local(self, student_label: str,
                    index: Optional[QuestionIndex],
                    model_entries: Sequence[ModelAnswerEntry]) -> MatchResult:
        """Run the tiers that need no network access."""
        if index is not None:
            entry = index.lookup(student_label)
            if entry is not None:
                return MatchResult(entry=entry, tier=MatchTier.CANONICAL_KEY)

        wanted = normalize_for_comparison(student_label)
        for entry in model_entries:
            if normalize_for_comparison(entry.question) == wanted:
                return MatchResult(entry=entry, tier=MatchTier.TEXT_SCAN)

        return NOT_FOUND

    async def _match_remote(self, student_label: str,
                            model_entries: Sequence[ModelAnswerEntry]) -> MatchResult:
        for entry in model_entries:
            try:
                is_same = await self.comparator.compare_questions(student_label, entry.question)
            except ScoringServiceError as e:
                logger.warning(
                    f"Question comparison failed for '{student_label}' vs '{entry.question}': {str(e)}"
                )
                continue

            if is_same:
                logger.debug(f"Remote comparison matched '{student_label}' to '{entry.question}'")
                return MatchResult(entry=entry, tier=MatchTier.REMOTE_COMPARISON)

        return NOT_FOUND
