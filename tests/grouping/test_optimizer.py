"""Tests for the greedy group optimizer."""

from __future__ import annotations

import pytest

from src.common.config import GroupingSettings
from src.grouping.name_similarity import NameSimilarityScorer
from src.grouping.optimizer import GreedyGroupOptimizer, has_store_diversity


class TableScorer:
    """Scorer stub returning fixed similarities by listing id pair."""

    def __init__(self, table: dict[tuple[str, str], float]) -> None:
        self.table = table

    def score_listings(self, a, b) -> float:
        return self.table.get((a.id, b.id), self.table.get((b.id, a.id), 0.0))


@pytest.fixture
def optimizer() -> GreedyGroupOptimizer:
    return GreedyGroupOptimizer(GroupingSettings())


@pytest.fixture
def scorer() -> NameSimilarityScorer:
    return NameSimilarityScorer(GroupingSettings())


class TestStoreDiversity:
    def test_distinct_stores(self, make_listing):
        assert has_store_diversity(
            [make_listing("1", "x", "Winners"), make_listing("2", "x", "Super U")]
        )

    def test_same_store_case_insensitive(self, make_listing):
        assert not has_store_diversity(
            [make_listing("1", "x", "Winners"), make_listing("2", "x", " winners ")]
        )


class TestGreedyGroupOptimizer:
    def test_triad_from_best_candidates(self, optimizer, scorer, coke_listings):
        groups = optimizer.find_groups(coke_listings, scorer)
        # seed "a" ranks "c" (1.0) above "b" (~0.62)
        assert groups == [[0, 2, 1]]

    def test_single_listing_bucket(self, optimizer, scorer, make_listing):
        assert optimizer.find_groups([make_listing("1", "Milk", "A")], scorer) == []

    def test_below_threshold_stays_unmatched(self, optimizer, scorer, make_listing):
        listings = [
            make_listing("1", "Basmati Rice", "A"),
            make_listing("2", "Fresh Milk", "B"),
        ]
        assert optimizer.find_groups(listings, scorer) == []

    def test_same_store_duplicates_never_grouped(self, optimizer, scorer, make_listing):
        listings = [
            make_listing("1", "Fresh Milk", "Winners"),
            make_listing("2", "Fresh Milk", "Winners"),
        ]
        assert optimizer.find_groups(listings, scorer) == []

    def test_falls_back_to_pair_when_triad_repeats_store(
        self, optimizer, scorer, make_listing
    ):
        listings = [
            make_listing("1", "Fresh Milk", "A"),
            make_listing("2", "Fresh Milk", "B"),
            make_listing("3", "Fresh Milk", "B"),
        ]
        assert optimizer.find_groups(listings, scorer) == [[0, 1]]

    def test_failed_seed_is_not_revisited(self, optimizer, make_listing):
        # "i" and "j" only fail because their best candidates share their
        # store; claiming those later does not give them a second chance.
        listings = [
            make_listing("i", "i", "A"),
            make_listing("k", "k", "A"),
            make_listing("j", "j", "B"),
            make_listing("j2", "j2", "B"),
            make_listing("m", "m", "C"),
            make_listing("m2", "m2", "D"),
        ]
        scorer = TableScorer(
            {
                ("i", "k"): 0.9,
                ("i", "j"): 0.6,
                ("j", "j2"): 0.9,
                ("k", "m"): 0.9,
                ("j2", "m2"): 0.9,
            }
        )
        groups = optimizer.find_groups(listings, scorer)
        assert groups == [[4, 1], [5, 3]]

    def test_ties_keep_input_order(self, optimizer, scorer, make_listing):
        listings = [
            make_listing("1", "Fresh Milk", "A"),
            make_listing("2", "Fresh Milk", "B"),
            make_listing("3", "Fresh Milk", "C"),
            make_listing("4", "Fresh Milk", "D"),
        ]
        groups = optimizer.find_groups(listings, scorer)
        assert groups == [[0, 1, 2]]

    def test_max_group_size_two(self, scorer, coke_listings):
        optimizer = GreedyGroupOptimizer(GroupingSettings(max_group_size=2))
        assert optimizer.find_groups(coke_listings, scorer) == [[0, 2]]

    def test_groups_are_disjoint_and_diverse(self, optimizer, scorer, make_listing):
        stores = ["A", "B", "C", "A", "B", "C", "A"]
        listings = [
            make_listing(str(i), "Fresh Milk", store) for i, store in enumerate(stores)
        ]
        groups = optimizer.find_groups(listings, scorer)
        seen = [index for group in groups for index in group]
        assert len(seen) == len(set(seen))
        for group in groups:
            assert 2 <= len(group) <= 3
            assert has_store_diversity([listings[i] for i in group])

    def test_deterministic(self, optimizer, scorer, coke_listings):
        assert optimizer.find_groups(coke_listings, scorer) == optimizer.find_groups(
            coke_listings, scorer
        )
