"""Promotion matching: applies active store promotions to catalog listings."""

from .matcher import (
    find_active_promotion,
    normalize_store_name,
    product_names_match,
    resolve_effective_price,
)
from .store_matching import MatchConfidence, StoreMatchResult, match_store_name

__all__ = [
    "find_active_promotion",
    "normalize_store_name",
    "product_names_match",
    "resolve_effective_price",
    "match_store_name",
    "MatchConfidence",
    "StoreMatchResult",
]
