"""
Question Index

Lookup structure from canonical question key to model answer entry,
built once per model answer key and read-only afterwards.
"""

from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional

from .normalizer import canonical_key
from .types import ModelAnswerEntry
from ..utils.logging import get_logger

logger = get_logger(__name__)


class QuestionIndex(Mapping):
    """Read-only mapping of canonical key to ModelAnswerEntry; first entry per key wins."""

    def __init__(self, entries: Iterable[ModelAnswerEntry]):
        index: Dict[str, ModelAnswerEntry] = {}
        duplicates: List[str] = []

        for entry in entries:
            key = canonical_key(entry.question)
            if key in index:
                duplicates.append(key)
                logger.warning(
                    f"Duplicate question key '{key}' for '{entry.question}' ignored; "
                    f"keeping '{index[key].question}'"
                )
                continue
            index[key] = entry

        self._index = MappingProxyType(index)
        self.duplicate_keys = tuple(duplicates)
        logger.debug(f"Built question index with {len(index)} keys ({len(duplicates)} duplicates)")

    def __getitem__(self, key: str) -> ModelAnswerEntry:
        return self._index[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def lookup(self, label: str) -> Optional[ModelAnswerEntry]:
        """Find the entry whose canonical key matches ``label``'s."""
        return self._index.get(canonical_key(label))


def build_index(model_entries: Iterable[ModelAnswerEntry]) -> QuestionIndex:
    """Build a QuestionIndex from the model answer key."""
    return QuestionIndex(model_entries)
