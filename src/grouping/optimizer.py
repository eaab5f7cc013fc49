"""Assembly of store-diverse listing groups inside one (size, brand) bucket.

``GroupingStrategy`` is the seam between the engine and the matching
heuristic: the engine only hands over a bucket and a scorer and gets back
index groups. ``GreedyGroupOptimizer`` is the default strategy.
"""

from __future__ import annotations

import logging
from typing import Protocol

from src.common.config import GroupingSettings
from src.common.models import Listing
from .name_similarity import NameSimilarityScorer

logger = logging.getLogger(__name__)


def store_key(listing: Listing) -> str:
    return listing.store.strip().lower()


def has_store_diversity(listings: list[Listing]) -> bool:
    """True when no two listings come from the same store."""
    stores = {store_key(listing) for listing in listings}
    return len(stores) == len(listings)


class GroupingStrategy(Protocol):
    """Partitions one bucket into groups of listing indices.

    Returned groups hold 2..max_group_size indices, are pairwise disjoint
    and satisfy store diversity. Indices left out become singletons.
    """

    def find_groups(
        self, listings: list[Listing], scorer: NameSimilarityScorer
    ) -> list[list[int]]:
        ...


class GreedyGroupOptimizer:
    """Greedy, single-pass seed-and-candidates grouping.

    For every unmatched seed (input order), candidates are the other
    unmatched listings whose name similarity reaches the threshold, sorted
    by similarity (stable, so ties keep input order). The seed tries a
    triad with its two best candidates, then a pair with the best one.

    Each listing is visited once as a seed. A seed that fails stays
    unmatched even if its candidates are claimed later. Not globally optimal.

    Usage:
        optimizer = GreedyGroupOptimizer()
        groups = optimizer.find_groups(bucket, NameSimilarityScorer())
        # [[0, 2, 1], [3, 4]]
    """

    def __init__(self, settings: GroupingSettings | None = None) -> None:
        self.settings = settings or GroupingSettings()

    def find_groups(
        self, listings: list[Listing], scorer: NameSimilarityScorer
    ) -> list[list[int]]:
        n = len(listings)
        if n < 2:
            return []

        threshold = self.settings.name_match_threshold
        matrix = self._similarity_matrix(listings, scorer)
        used = [False] * n
        groups: list[list[int]] = []

        for i in range(n):
            if used[i]:
                continue

            candidates = [
                j for j in range(n) if j != i and not used[j] and matrix[i][j] >= threshold
            ]
            candidates.sort(key=lambda j: matrix[i][j], reverse=True)

            group = self._try_group(listings, i, candidates)
            if group is None:
                continue

            for index in group:
                used[index] = True
            groups.append(group)

        logger.debug("Bucket of %d listings -> %d groups", n, len(groups))
        return groups

    @staticmethod
    def _similarity_matrix(
        listings: list[Listing], scorer: NameSimilarityScorer
    ) -> list[list[float]]:
        n = len(listings)
        matrix = [[0.0] * n for _ in range(n)]
        for i in range(n):
            for j in range(i + 1, n):
                similarity = scorer.score_listings(listings[i], listings[j])
                matrix[i][j] = similarity
                matrix[j][i] = similarity
        return matrix

    def _try_group(
        self, listings: list[Listing], seed: int, candidates: list[int]
    ) -> list[int] | None:
        """Largest diverse group of the seed with its top candidates, if any."""
        for size in range(self.settings.max_group_size, 1, -1):
            if len(candidates) < size - 1:
                continue
            group = [seed, *candidates[: size - 1]]
            if has_store_diversity([listings[index] for index in group]):
                return group
        return None
