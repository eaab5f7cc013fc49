"""Shared Pydantic data models for the listing grouping engine.

These models define the input contract between the listing source
(regular catalog rows and active promotions) and the grouping engine.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


# === Enums ===

class ListingKind(str, Enum):
    """Discriminator between catalog entries and active promotions."""
    REGULAR = "regular"
    PROMOTION = "promotion"


# === Listings ===

class Listing(BaseModel):
    """One store's price entry for a product.

    Immutable. Regular entries and promotions share one shape; ``kind``
    tells them apart and ``previous_price`` is only set on promotions.
    """
    id: str = Field(min_length=1)
    name: str
    price: float = Field(ge=0, description="Current price (Rs)")
    store: str
    brand: str | None = None
    size: str | None = None
    categories: tuple[str, ...] = ()
    kind: ListingKind = ListingKind.REGULAR
    previous_price: float | None = Field(default=None, ge=0)

    model_config = {"frozen": True}

    @property
    def is_promotion(self) -> bool:
        return self.kind == ListingKind.PROMOTION

    @property
    def display_name(self) -> str:
        return self.name or ""

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Listing:
        """Build a Listing from a raw source row.

        Catalog rows use ``product``/``price``/``store``; promotion rows use
        ``product_name``/``new_price``/``store_name``. Already-normalized rows
        (``name``/``price``/``store``) are accepted too.

        Raises:
            ValueError: The row has no id, name, price or store.
        """
        is_promotion = (
            "new_price" in record
            or "store_name" in record
            or bool(record.get("isPromotion"))
            or record.get("kind") == ListingKind.PROMOTION.value
        )

        listing_id = record.get("id")
        name = _first_present(record, "name", "product", "product_name")
        price = _first_present(record, "new_price", "price")
        store = _first_present(record, "store", "store_name")

        missing = [
            field_name
            for field_name, value in (
                ("id", listing_id), ("name", name), ("price", price), ("store", store)
            )
            if value is None or value == ""
        ]
        if missing:
            raise ValueError(
                f"Listing record {listing_id!r} is missing {', '.join(missing)}"
            )

        return cls(
            id=str(listing_id),
            name=str(name),
            price=float(price),
            store=str(store),
            brand=record.get("brand") or None,
            size=record.get("size") or None,
            categories=_parse_categories(record),
            kind=ListingKind.PROMOTION if is_promotion else ListingKind.REGULAR,
            previous_price=(
                float(record["previous_price"])
                if is_promotion and record.get("previous_price") is not None
                else None
            ),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "store": self.store,
            "brand": self.brand,
            "size": self.size,
            "categories": list(self.categories),
            "kind": self.kind.value,
            "previous_price": self.previous_price,
        }


def _first_present(record: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if record.get(key) is not None:
            return record[key]
    return None


def _parse_categories(record: dict[str, Any]) -> tuple[str, ...]:
    """Categories arrive as a list, a single ``category`` string, or not at all."""
    raw = record.get("categories")
    if raw is None:
        raw = record.get("category")
    if not raw:
        return ()
    if isinstance(raw, str):
        raw = [raw]
    return tuple(str(c).strip() for c in raw if str(c).strip())
