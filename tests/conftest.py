"""Shared test fixtures for the listing grouping engine."""

import json
import sys
from pathlib import Path

import pytest

# Ensure src is importable
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.common.config import GroupingSettings
from src.common.models import Listing, ListingKind


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the test fixtures directory."""
    return PROJECT_ROOT / "tests" / "fixtures"


@pytest.fixture
def grouping_settings() -> GroupingSettings:
    """Default grouping settings, independent of config/settings.yaml."""
    return GroupingSettings()


@pytest.fixture
def make_listing():
    """Factory for regular listings with sensible defaults."""

    def _make(
        id: str,
        name: str,
        store: str,
        price: float = 50.0,
        brand: str | None = None,
        size: str | None = None,
        categories: tuple[str, ...] = (),
    ) -> Listing:
        return Listing(
            id=id,
            name=name,
            store=store,
            price=price,
            brand=brand,
            size=size,
            categories=categories,
        )

    return _make


@pytest.fixture
def make_promotion():
    """Factory for promotion listings."""

    def _make(
        id: str,
        name: str,
        store: str,
        price: float,
        previous_price: float | None = None,
        brand: str | None = None,
        size: str | None = None,
    ) -> Listing:
        return Listing(
            id=id,
            name=name,
            store=store,
            price=price,
            previous_price=previous_price,
            brand=brand,
            size=size,
            kind=ListingKind.PROMOTION,
        )

    return _make


@pytest.fixture
def coke_listings(make_listing) -> list[Listing]:
    """Three spellings of the same 2L Coca Cola at three stores."""
    return [
        make_listing("a", "COCA COLA", "A", price=70, brand="COCA COLA", size="2L"),
        make_listing("b", "COCA-COLA 2L", "B", price=65, brand="COCA COLA", size="2 L"),
        make_listing("c", "Coca Cola Original 2L", "C", price=68, brand="Coca Cola", size="2L"),
    ]


@pytest.fixture
def sample_records(fixtures_dir) -> list[dict]:
    """Raw catalog and promotion rows as delivered by the listing source."""
    return json.loads((fixtures_dir / "sample_listings.json").read_text(encoding="utf-8"))


@pytest.fixture
def sample_listings(sample_records) -> list[Listing]:
    return [Listing.from_record(record) for record in sample_records]
