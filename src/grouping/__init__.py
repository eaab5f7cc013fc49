"""Listing Matching & Grouping Engine.

Groups listings of the same product across stores (at most one listing
per store, at most three per group), ranks each group by price and builds
one combined product per group. Entry point: ``engine.ListingGroupingEngine``.
"""

from .models import (
    CombinedProduct,
    EffectivePrice,
    ListingGroup,
    NormalizedSize,
    PriceComparison,
    PriceHighlight,
    PriceLevel,
    SizeType,
)

__all__ = [
    "CombinedProduct",
    "EffectivePrice",
    "ListingGroup",
    "NormalizedSize",
    "PriceComparison",
    "PriceHighlight",
    "PriceLevel",
    "SizeType",
]
