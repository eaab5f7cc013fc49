"""Project configuration and paths.

Loads settings from config/settings.yaml and environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

# === Paths ===
PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"
DATA_DIR = PROJECT_ROOT / "data"

# Load .env from project root
load_dotenv(PROJECT_ROOT / ".env")


class StorePriorityRule(BaseModel):
    """One entry of the ordered store priority table.

    A store matches the rule when any keyword is a substring of its
    lower-cased name. Lower rank wins.
    """
    name: str
    rank: int = Field(ge=0)
    keywords: list[str] = Field(default_factory=list)

    def matches(self, store: str) -> bool:
        normalized = store.lower()
        return any(keyword.lower() in normalized for keyword in self.keywords)


def _default_store_priority() -> list[StorePriorityRule]:
    # Winners > Super U > King Savers
    return [
        StorePriorityRule(name="winners", rank=1, keywords=["winner"]),
        StorePriorityRule(name="super u", rank=2, keywords=["super", " u"]),
        StorePriorityRule(name="kingsavers", rank=3, keywords=["king", "saver"]),
    ]


class GroupingSettings(BaseModel):
    """Tolerances and tables for the listing grouping engine."""
    name_match_threshold: float = Field(default=0.5, ge=0, le=1)
    word_similarity_threshold: float = Field(default=0.75, ge=0, le=1)
    levenshtein_weight: float = Field(default=0.7, ge=0, le=1)
    max_group_size: int = Field(default=3, ge=2, le=3)
    price_spread_warning: float = Field(default=100.0, ge=0)
    overpriced_ratio: float = Field(default=1.1, ge=1)
    unranked_store_priority: int = 99
    store_priority: list[StorePriorityRule] = Field(
        default_factory=_default_store_priority
    )

    def store_rank(self, store: str) -> int:
        """Rank of a store name in the priority table (lower is preferred)."""
        for rule in self.store_priority:
            if rule.matches(store):
                return rule.rank
        return self.unranked_store_priority


class Settings(BaseModel):
    """Top-level application settings."""
    grouping: GroupingSettings = Field(default_factory=GroupingSettings)

    @classmethod
    def load(cls, path: str | Path | None = None) -> Settings:
        """Load settings from config/settings.yaml, falling back to defaults."""
        settings_path = Path(path) if path else CONFIG_DIR / "settings.yaml"
        data: dict = {}
        if settings_path.exists():
            with open(settings_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}

        grouping = data.get("grouping") or {}
        data["grouping"] = grouping
        if threshold := os.getenv("LISTING_NAME_MATCH_THRESHOLD"):
            grouping["name_match_threshold"] = float(threshold)
        if threshold := os.getenv("LISTING_WORD_SIMILARITY_THRESHOLD"):
            grouping["word_similarity_threshold"] = float(threshold)
        if spread := os.getenv("LISTING_PRICE_SPREAD_WARNING"):
            grouping["price_spread_warning"] = float(spread)

        return cls(**data)


# Singleton settings instance
settings = Settings.load()
