"""Resolution of free-text store names to the known supermarket chains.

Store names arrive in many spellings (receipt headers, branch names,
manual entry). Matching runs in three tiers:
- exact: the chain name itself, case-insensitive
- alias: one of the chain's known aliases
- partial: input contains an alias or an alias contains the input
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

KNOWN_STORES = ["Winners", "Kingsavers", "Super U"]

STORE_ALIASES: dict[str, list[str]] = {
    "Winners": [
        "winners", "winners supermarket", "winners super", "winner",
        "winners pereybere", "winners grand baie", "winners triolet",
        "winners goodlands",
    ],
    "Kingsavers": [
        "kingsavers", "king savers", "king saver", "kingsaver",
        "king savers supermarket", "kingsavers supermarket",
    ],
    "Super U": [
        "super u", "superu", "hyper u", "hyperu", "super u market",
        "super u hypermarket",
    ],
}


class MatchConfidence(str, Enum):
    EXACT = "exact"
    ALIAS = "alias"
    PARTIAL = "partial"
    NONE = "none"


@dataclass(frozen=True)
class StoreMatchResult:
    matched: bool
    store_name: str
    confidence: MatchConfidence

    def to_dict(self) -> dict:
        return {
            "matched": self.matched,
            "store_name": self.store_name,
            "confidence": self.confidence.value,
        }


_NO_MATCH = StoreMatchResult(matched=False, store_name="", confidence=MatchConfidence.NONE)

# Minimum input length for an input-inside-alias partial match
MIN_PARTIAL_LENGTH = 3


def match_store_name(raw_name: str | None) -> StoreMatchResult:
    """Resolve a raw store name to a known chain."""
    if not raw_name or not raw_name.strip():
        return _NO_MATCH

    name = raw_name.strip().lower()

    for store in KNOWN_STORES:
        if name == store.lower():
            return StoreMatchResult(True, store, MatchConfidence.EXACT)

    for store, aliases in STORE_ALIASES.items():
        if name in aliases:
            return StoreMatchResult(True, store, MatchConfidence.ALIAS)

    for store, aliases in STORE_ALIASES.items():
        for alias in aliases:
            if alias in name or (len(name) >= MIN_PARTIAL_LENGTH and name in alias):
                return StoreMatchResult(True, store, MatchConfidence.PARTIAL)

    return _NO_MATCH
