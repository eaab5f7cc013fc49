"""Price ranking within a finalized listing group.

Listings are ordered by descending effective price (highest first, the
left-to-right card order) and the lowest/middle/highest positions are
fixed indices into that order.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from src.common.models import Listing
from src.promotions.matcher import resolve_effective_price
from .models import EffectivePrice, ListingGroup, PriceComparison

logger = logging.getLogger(__name__)


def price_comparison_for(prices: Sequence[float]) -> PriceComparison:
    """Comparison for prices already sorted in descending order."""
    if len(prices) == 3:
        return PriceComparison(
            lowest=prices[2],
            middle=prices[1],
            highest=prices[0],
            lowest_index=2,
            middle_index=1,
            highest_index=0,
        )
    if len(prices) == 2:
        return PriceComparison(
            lowest=prices[1], highest=prices[0], lowest_index=1, highest_index=0
        )
    return PriceComparison(
        lowest=prices[0], highest=prices[0], lowest_index=0, highest_index=0
    )


class PriceRanker:
    """Orders a group by effective price and assigns its price comparison.

    Usage:
        ranker = PriceRanker(promotions)
        ranked = ranker.rank(group)
        ranked.price_comparison.lowest_index  # -> 2 for a triad
    """

    def __init__(
        self,
        promotions: Sequence[Listing] = (),
        price_spread_warning: float | None = None,
    ) -> None:
        self.promotions = list(promotions)
        self.price_spread_warning = price_spread_warning

    def effective_price(self, listing: Listing) -> EffectivePrice:
        return resolve_effective_price(listing, self.promotions)

    def rank(self, group: ListingGroup) -> ListingGroup:
        """Sort the group (stable, descending) and compute its comparison.

        Ordering and indices are produced together; the input group is
        returned updated in place.
        """
        priced = [(listing, self.effective_price(listing)) for listing in group.listings]
        priced.sort(key=lambda pair: pair[1].price, reverse=True)

        group.listings = [listing for listing, _ in priced]
        group.effective_prices = [price for _, price in priced]
        group.price_comparison = price_comparison_for(
            [price.price for price in group.effective_prices]
        )

        self._check_spread(group)
        return group

    def _check_spread(self, group: ListingGroup) -> None:
        if self.price_spread_warning is None or group.size < 2:
            return
        comparison = group.price_comparison
        spread = comparison.highest - comparison.lowest
        if spread > self.price_spread_warning:
            logger.warning(
                "Large price difference (%.2f Rs) in group %s - may be mismatched "
                "listings: %s",
                spread,
                group.id,
                ", ".join(f"{listing.display_name} @ {listing.store}" for listing in group.listings),
            )
