"""Listing matching and grouping engine.

Partitions a snapshot of listings into groups of at most three listings,
one per store, that denote the same product:

    listings -> size buckets -> brand buckets -> name-matched groups
             -> leftover singletons -> price ranking -> combined products

Pure and synchronous: no I/O and no state kept between calls.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from src.common.config import GroupingSettings, settings as default_settings
from src.common.models import Listing
from .brand_bucketer import brand_bucket_key, bucket_by
from .combined_builder import CombinedProductBuilder
from .models import CombinedProduct, ListingGroup
from .name_similarity import NameSimilarityScorer
from .optimizer import GreedyGroupOptimizer, GroupingStrategy
from .price_ranker import PriceRanker
from .size_normalizer import size_bucket_key

logger = logging.getLogger(__name__)


class ListingGroupingEngine:
    """Groups listings across stores and builds combined products.

    Usage:
        engine = ListingGroupingEngine()
        groups = engine.group_listings(listings)
        products = engine.build_combined_products(groups)
    """

    def __init__(
        self,
        settings: GroupingSettings | None = None,
        strategy: GroupingStrategy | None = None,
        scorer: NameSimilarityScorer | None = None,
    ) -> None:
        self.settings = settings or default_settings.grouping
        self.strategy = strategy or GreedyGroupOptimizer(self.settings)
        self.scorer = scorer or NameSimilarityScorer(self.settings)
        self.builder = CombinedProductBuilder(self.settings)

    def group_listings(
        self,
        listings: Sequence[Listing],
        promotions: Sequence[Listing] | None = None,
    ) -> list[ListingGroup]:
        """Partition ``listings`` into ranked groups.

        Args:
            listings: Regular and promotion listings, in source order.
            promotions: Pool searched for active promotions on regular
                listings. Defaults to the promotion listings of the input.

        Returns:
            Matched groups in bucket order, followed by one singleton
            group per listing left unmatched (input order).
        """
        listings = list(listings)
        if promotions is None:
            promotions = [listing for listing in listings if listing.is_promotion]

        logger.info("Grouping %d listings", len(listings))

        used = [False] * len(listings)
        groups: list[ListingGroup] = []

        size_buckets = bucket_by(
            range(len(listings)), lambda index: size_bucket_key(listings[index].size)
        )
        logger.debug("Size buckets: %d", len(size_buckets))

        for size_key, size_indices in size_buckets.items():
            brand_buckets = bucket_by(
                size_indices, lambda index: brand_bucket_key(listings[index].brand)
            )
            for brand_key, brand_indices in brand_buckets.items():
                available = [index for index in brand_indices if not used[index]]
                if len(available) < 2:
                    continue

                matched = self.strategy.find_groups(
                    [listings[index] for index in available], self.scorer
                )
                for local_indices in matched:
                    member_indices = [available[i] for i in local_indices]
                    for index in member_indices:
                        used[index] = True
                    members = [listings[index] for index in member_indices]
                    groups.append(
                        ListingGroup(
                            id=self._group_id(members),
                            listings=members,
                            size_key=size_key,
                            brand_key=brand_key,
                        )
                    )

                logger.debug(
                    "Bucket size=%r brand=%r: %d listings -> %d groups",
                    size_key, brand_key, len(available), len(matched),
                )

        multi_count = len(groups)
        for index, listing in enumerate(listings):
            if used[index]:
                continue
            groups.append(
                ListingGroup(
                    id=f"single_{listing.id}",
                    listings=[listing],
                    size_key=size_bucket_key(listing.size),
                    brand_key=brand_bucket_key(listing.brand),
                )
            )

        ranker = PriceRanker(promotions, self.settings.price_spread_warning)
        for group in groups:
            ranker.rank(group)

        logger.info(
            "Total groups created: %d (%d multi-listing, %d single)",
            len(groups),
            multi_count,
            len(groups) - multi_count,
        )
        return groups

    def build_combined_products(
        self, groups: Sequence[ListingGroup]
    ) -> list[CombinedProduct]:
        """One combined product per group, in group order."""
        return self.builder.build_all(list(groups))

    def combine(
        self,
        listings: Sequence[Listing],
        promotions: Sequence[Listing] | None = None,
    ) -> list[CombinedProduct]:
        return self.build_combined_products(self.group_listings(listings, promotions))

    @staticmethod
    def _group_id(members: list[Listing]) -> str:
        return f"group_{len(members)}_" + "_".join(member.id for member in members)


def group_listings(
    listings: Sequence[Listing], promotions: Sequence[Listing] | None = None
) -> list[ListingGroup]:
    """Group listings with the default engine."""
    return ListingGroupingEngine().group_listings(listings, promotions)


def build_combined_products(groups: Sequence[ListingGroup]) -> list[CombinedProduct]:
    """Combined products for groups with the default engine."""
    return ListingGroupingEngine().build_combined_products(groups)
