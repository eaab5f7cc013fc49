"""Name similarity scoring for listings that already share size and brand.

The score is the maximum of three signals:
- Jaccard similarity of the significant word sets
- Enhanced word overlap (exact 1.0, near-spelling 0.8, containment 0.6),
  normalized by the shorter word list
- Whole-string Levenshtein similarity, down-weighted (x0.7 by default)

Word-level typo tolerance is the single knob ``word_similarity_threshold``.
"""

from __future__ import annotations

import re

from rapidfuzz.distance import Levenshtein

from src.common.config import GroupingSettings
from src.common.models import Listing

# Size tokens embedded in names ("Coca Cola 2L", "Eggs x12")
_SIZE_TOKEN_RE = re.compile(r"\d+\s*(?:g|gm|kg|ml|l|pcs|x\d+)", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")

EXACT_WORD_SCORE = 1.0
SIMILAR_WORD_SCORE = 0.8
CONTAINED_WORD_SCORE = 0.6


def clean_name(name: str) -> str:
    """Lower-case, strip embedded size tokens and collapse whitespace."""
    cleaned = name.lower().strip()
    cleaned = _SIZE_TOKEN_RE.sub("", cleaned)
    return _WHITESPACE_RE.sub(" ", cleaned).strip()


def levenshtein_similarity(a: str, b: str) -> float:
    """1 - editDistance / maxLength; two empty strings are identical."""
    max_length = max(len(a), len(b))
    if max_length == 0:
        return 1.0
    return 1.0 - Levenshtein.distance(a, b) / max_length


class NameSimilarityScorer:
    """Scores two product names in [0, 1].

    Usage:
        scorer = NameSimilarityScorer()
        scorer.score("COCA COLA", "COCA-COLA 2L")  # -> ~0.62
    """

    def __init__(self, settings: GroupingSettings | None = None) -> None:
        self.settings = settings or GroupingSettings()

    def are_similar_words(self, word1: str, word2: str) -> bool:
        """Containment, or edit-distance similarity at or above the tolerance."""
        if word1 == word2:
            return True
        if word1 in word2 or word2 in word1:
            return True
        return self._is_near_spelling(word1, word2)

    def score(self, name1: str, name2: str, shared_category: bool = False) -> float:
        """Similarity of two raw listing names.

        Args:
            name1: First name as sold.
            name2: Second name as sold.
            shared_category: Both listings carry a common category tag. Short
                words (<= 2 chars) are then ignored instead of only
                single-character ones.
        """
        if not name1 or not name2:
            return 0.0

        clean1 = clean_name(name1)
        clean2 = clean_name(name2)

        if clean1 == clean2:
            return 1.0

        min_length = 3 if shared_category else 2
        words1 = [w for w in clean1.split(" ") if len(w) >= min_length]
        words2 = [w for w in clean2.split(" ") if len(w) >= min_length]

        if not words1 or not words2:
            return 0.0

        jaccard = self._jaccard(words1, words2)
        overlap = self._word_overlap(words1, words2)
        levenshtein = levenshtein_similarity(clean1, clean2)

        return max(jaccard, overlap, levenshtein * self.settings.levenshtein_weight)

    def score_listings(self, a: Listing, b: Listing) -> float:
        shared = bool(set(a.categories) & set(b.categories))
        return self.score(a.display_name, b.display_name, shared_category=shared)

    def word_score(self, word1: str, word2: str) -> float:
        if word1 == word2:
            return EXACT_WORD_SCORE
        if not self.are_similar_words(word1, word2):
            return 0.0
        if self._is_near_spelling(word1, word2):
            return SIMILAR_WORD_SCORE
        return CONTAINED_WORD_SCORE

    def _is_near_spelling(self, word1: str, word2: str) -> bool:
        return levenshtein_similarity(word1, word2) >= self.settings.word_similarity_threshold

    @staticmethod
    def _jaccard(words1: list[str], words2: list[str]) -> float:
        set1, set2 = set(words1), set(words2)
        return len(set1 & set2) / len(set1 | set2)

    def _word_overlap(self, words1: list[str], words2: list[str]) -> float:
        """Best match per word of the shorter list, normalized by its length."""
        shorter, longer = (words1, words2) if len(words1) <= len(words2) else (words2, words1)
        total = sum(
            max(self.word_score(word, other) for other in longer) for word in shorter
        )
        return min(1.0, total / len(shorter))
