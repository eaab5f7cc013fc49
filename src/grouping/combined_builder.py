"""Combined product construction for the comparison card.

The primary listing of a group (the one whose name, brand, size, categories
and image represent the card) is picked by the configured store priority
table. The card lists the members cheapest first.
"""

from __future__ import annotations

import logging

from src.common.config import GroupingSettings
from src.common.models import Listing
from .models import CombinedProduct, EffectivePrice, ListingGroup

logger = logging.getLogger(__name__)


class CombinedProductBuilder:
    """Turns ranked listing groups into display-ready combined products.

    Usage:
        builder = CombinedProductBuilder(settings.grouping)
        products = builder.build_all(groups)
    """

    def __init__(self, settings: GroupingSettings | None = None) -> None:
        self.settings = settings or GroupingSettings()

    def store_priority(self, listing: Listing) -> int:
        return self.settings.store_rank(listing.store)

    def select_primary(self, group: ListingGroup) -> Listing:
        """Highest-priority store wins; ties keep the group's ranked order."""
        return min(group.listings, key=self.store_priority)

    def build(self, group: ListingGroup) -> CombinedProduct:
        primary = self.select_primary(group)

        prices = group.effective_prices or [
            EffectivePrice(listing_id=listing.id, price=listing.price)
            for listing in group.listings
        ]
        ascending = sorted(
            zip(group.listings, prices), key=lambda pair: pair[1].price
        )

        return CombinedProduct(
            id=f"combined_{group.id}",
            name=primary.display_name,
            brand=primary.brand,
            size=primary.size,
            categories=primary.categories,
            primary_listing_id=primary.id,
            listings=[listing for listing, _ in ascending],
            effective_prices=[price for _, price in ascending],
            overpriced_ratio=self.settings.overpriced_ratio,
        )

    def build_all(self, groups: list[ListingGroup]) -> list[CombinedProduct]:
        products = [self.build(group) for group in groups]
        logger.info("Built %d combined products", len(products))
        return products
