"""Lookup of the active promotion that applies to a catalog listing.

A promotion applies to a regular listing when both come from the same
chain, the names contain one another (case-insensitive) and, where both
carry a size, the sizes fall in the same size bucket.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from src.common.models import Listing
from src.grouping.models import EffectivePrice
from src.grouping.size_normalizer import size_bucket_key
from .store_matching import match_store_name

logger = logging.getLogger(__name__)


def normalize_store_name(store: str) -> str:
    """Fold store spellings onto one key per chain.

    Examples:
        "Winners Grand Baie" -> "winners"
        "KING SAVERS" -> "kingsavers"
        "Hyper U" -> "super u"
        "Corner Shop" -> "corner shop"
    """
    result = match_store_name(store)
    if result.matched:
        return result.store_name.lower()

    lower = store.lower().strip()
    if "winner" in lower:
        return "winners"
    if "king" in lower or "saver" in lower:
        return "kingsavers"
    if "super" in lower or " u" in lower:
        return "super u"
    return lower


def product_names_match(name: str, promotion_name: str) -> bool:
    """Case-insensitive containment in either direction."""
    a = name.lower().strip()
    b = promotion_name.lower().strip()
    if not a or not b:
        return False
    return a in b or b in a


def sizes_match(size: str | None, promotion_size: str | None) -> bool:
    """Sizes only block a match when both sides have one."""
    if not size or not size.strip() or not promotion_size or not promotion_size.strip():
        return True
    return size_bucket_key(size) == size_bucket_key(promotion_size)


def find_active_promotion(
    listing: Listing, promotions: Iterable[Listing]
) -> Listing | None:
    """First promotion for the same product, store and size, if any.

    Promotion listings never have a promotion applied to them.
    """
    if listing.is_promotion:
        return None

    store = normalize_store_name(listing.store)
    for promotion in promotions:
        if not promotion.is_promotion or promotion.id == listing.id:
            continue
        if (
            normalize_store_name(promotion.store) == store
            and product_names_match(listing.display_name, promotion.display_name)
            and sizes_match(listing.size, promotion.size)
        ):
            return promotion
    return None


def resolve_effective_price(
    listing: Listing, promotions: Iterable[Listing] = ()
) -> EffectivePrice:
    """Price used for ranking: a matched promotion's price, else the listing's own."""
    if listing.is_promotion:
        return EffectivePrice(listing_id=listing.id, price=listing.price, is_promotion=True)

    promotion = find_active_promotion(listing, promotions)
    if promotion is not None:
        logger.debug(
            "Listing %s (%s @ %s) uses promotion %s: %.2f -> %.2f",
            listing.id,
            listing.display_name,
            listing.store,
            promotion.id,
            listing.price,
            promotion.price,
        )
        return EffectivePrice(
            listing_id=listing.id,
            price=promotion.price,
            is_promotion=True,
            promotion_id=promotion.id,
        )

    return EffectivePrice(listing_id=listing.id, price=listing.price)
