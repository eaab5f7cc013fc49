"""Exact-match bucketing of listings by size and brand."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TypeVar

NO_BRAND = "NO_BRAND"

T = TypeVar("T")


def brand_bucket_key(brand: str | None) -> str:
    """Upper-cased, trimmed brand, or NO_BRAND when absent."""
    if not brand or not brand.strip():
        return NO_BRAND
    return brand.upper().strip()


def bucket_by(items: Iterable[T], key: Callable[[T], str]) -> dict[str, list[T]]:
    """Group items by ``key``, keeping first-seen bucket order and input order."""
    buckets: dict[str, list[T]] = {}
    for item in items:
        buckets.setdefault(key(item), []).append(item)
    return buckets
