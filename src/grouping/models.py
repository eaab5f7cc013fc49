"""Data models produced by the listing grouping engine.

All models use @dataclass with to_dict() for JSON serialization,
matching the pattern used across the project.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from src.common.models import Listing


class SizeType(str, Enum):
    WEIGHT = "weight"
    VOLUME = "volume"
    COUNT = "count"
    UNKNOWN = "unknown"


class PriceLevel(str, Enum):
    """Position of a listing in its group's price ranking."""
    LOWEST = "lowest"
    MIDDLE = "middle"
    HIGHEST = "highest"
    NEUTRAL = "neutral"


class PriceHighlight(str, Enum):
    """Display hint for one price inside a combined product."""
    BEST = "best"
    BEST_PROMOTION = "best_promotion"
    OVERPRICED = "overpriced"
    NORMAL = "normal"


@dataclass(frozen=True)
class NormalizedSize:
    """A parsed size string: numeric value plus canonical unit."""

    value: float
    unit: str  # g | kg | ml | l | x | ""
    type: SizeType
    original: str

    def to_dict(self) -> dict:
        return {
            "value": self.value,
            "unit": self.unit,
            "type": self.type.value,
            "original": self.original,
        }


@dataclass(frozen=True)
class EffectivePrice:
    """Price used for ranking after promotion substitution."""

    listing_id: str
    price: float
    is_promotion: bool = False
    promotion_id: str | None = None  # set when a matched promotion supplied the price

    def to_dict(self) -> dict:
        return {
            "listing_id": self.listing_id,
            "price": self.price,
            "is_promotion": self.is_promotion,
            "promotion_id": self.promotion_id,
        }


@dataclass(frozen=True)
class PriceComparison:
    """Fixed positions of the lowest/middle/highest price in a ranked group."""

    lowest: float
    highest: float
    lowest_index: int
    highest_index: int
    middle: float | None = None
    middle_index: int | None = None

    def to_dict(self) -> dict:
        return {
            "lowest": self.lowest,
            "middle": self.middle,
            "highest": self.highest,
            "lowest_index": self.lowest_index,
            "middle_index": self.middle_index,
            "highest_index": self.highest_index,
        }


@dataclass
class ListingGroup:
    """One to three listings judged to be the same product.

    ``listings`` is ordered by descending effective price once the group
    has been ranked; ``effective_prices`` is parallel to it.
    """

    id: str
    listings: list[Listing]
    size_key: str = ""
    brand_key: str = ""
    effective_prices: list[EffectivePrice] = field(default_factory=list)
    price_comparison: PriceComparison | None = None

    @property
    def size(self) -> int:
        return len(self.listings)

    @property
    def stores(self) -> list[str]:
        return [listing.store for listing in self.listings]

    def effective_price_for(self, listing_id: str) -> EffectivePrice | None:
        for price in self.effective_prices:
            if price.listing_id == listing_id:
                return price
        return None

    def price_level(self, index: int) -> PriceLevel:
        """Price level of the listing at ``index`` in the ranked order."""
        if self.price_comparison is None or len(self.listings) == 1:
            return PriceLevel.NEUTRAL

        comparison = self.price_comparison
        if index == comparison.lowest_index:
            return PriceLevel.LOWEST
        if comparison.middle_index is not None and index == comparison.middle_index:
            return PriceLevel.MIDDLE
        if index == comparison.highest_index:
            return PriceLevel.HIGHEST
        return PriceLevel.NEUTRAL

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "size_key": self.size_key,
            "brand_key": self.brand_key,
            "listings": [listing.to_dict() for listing in self.listings],
            "effective_prices": [p.to_dict() for p in self.effective_prices],
            "price_comparison": (
                self.price_comparison.to_dict() if self.price_comparison else None
            ),
            "price_levels": [
                self.price_level(i).value for i in range(len(self.listings))
            ],
        }


@dataclass
class CombinedProduct:
    """Display-ready record summarizing one listing group across stores.

    Identity fields come from the primary listing; ``listings`` is ordered
    by ascending effective price.
    """

    id: str
    name: str
    primary_listing_id: str
    listings: list[Listing]
    effective_prices: list[EffectivePrice] = field(default_factory=list)
    brand: str | None = None
    size: str | None = None
    categories: tuple[str, ...] = ()
    overpriced_ratio: float = 1.1

    @property
    def primary_listing(self) -> Listing:
        for listing in self.listings:
            if listing.id == self.primary_listing_id:
                return listing
        raise KeyError(self.primary_listing_id)

    @property
    def lowest_price(self) -> float:
        return min(p.price for p in self.effective_prices)

    def highlight_for(self, listing_id: str) -> PriceHighlight:
        """Best-price highlighting for one member's effective price."""
        price = next(
            (p for p in self.effective_prices if p.listing_id == listing_id), None
        )
        if price is None:
            raise KeyError(listing_id)

        lowest = self.lowest_price
        if price.price == lowest and len(self.listings) > 1:
            return PriceHighlight.BEST_PROMOTION if price.is_promotion else PriceHighlight.BEST
        if price.price > lowest * self.overpriced_ratio:
            return PriceHighlight.OVERPRICED
        return PriceHighlight.NORMAL

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "brand": self.brand,
            "size": self.size,
            "categories": list(self.categories),
            "primary_listing_id": self.primary_listing_id,
            "lowest_price": self.lowest_price if self.effective_prices else None,
            "listings": [
                {
                    **listing.to_dict(),
                    "effective_price": price.price,
                    "effective_is_promotion": price.is_promotion,
                    "highlight": self.highlight_for(listing.id).value,
                }
                for listing, price in zip(self.listings, self.effective_prices)
            ],
        }
