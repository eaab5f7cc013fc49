"""Size string parsing and canonical size bucket keys.

Two listings can only be grouped when their bucket keys are identical.
Weights are expressed in grams and volumes in millilitres before the key
is built, so "2L", "2 l" and "2000ml" share the key "2000ml".
"""

from __future__ import annotations

import re

from .models import NormalizedSize, SizeType

NO_SIZE = "NO_SIZE"

_NUMBER = r"(\d+(?:[.,]\d+)?)"

_COUNT_PATTERNS = (
    re.compile(r"^x?(\d+)\s*(?:pcs|pieces|piece|pc|pack|eggs?)?$"),
    re.compile(r"^(\d+)\s*x\s*(\d+)?"),
)
_WEIGHT_PATTERN = re.compile(
    rf"^{_NUMBER}\s*(g|gm|gms|gram|grams|kg|kilogram|kilograms)$"
)
_VOLUME_PATTERN = re.compile(
    rf"^{_NUMBER}\s*(ml|milliliter|milliliters|millilitre|millilitres"
    rf"|l|liter|liters|litre|litres)$"
)

_WEIGHT_UNITS = {
    "g": "g", "gm": "g", "gms": "g", "gram": "g", "grams": "g",
    "kg": "kg", "kilogram": "kg", "kilograms": "kg",
}
_VOLUME_UNITS = {
    "ml": "ml", "milliliter": "ml", "milliliters": "ml",
    "millilitre": "ml", "millilitres": "ml",
    "l": "l", "liter": "l", "liters": "l", "litre": "l", "litres": "l",
}


def normalize_size(size: str) -> NormalizedSize:
    """Parse a free-text size into value, canonical unit and type.

    Examples:
        "x12" -> 12 x (count)
        "1.5 Litres" -> 1.5 l (volume)
        "500 gms" -> 500 g (weight)
        "family pack" -> unknown
    """
    cleaned = size.lower().strip()

    for pattern in _COUNT_PATTERNS:
        match = pattern.match(cleaned)
        if match:
            return NormalizedSize(
                value=float(match.group(1)), unit="x", type=SizeType.COUNT, original=size
            )

    match = _WEIGHT_PATTERN.match(cleaned)
    if match:
        return NormalizedSize(
            value=_parse_number(match.group(1)),
            unit=_WEIGHT_UNITS[match.group(2)],
            type=SizeType.WEIGHT,
            original=size,
        )

    match = _VOLUME_PATTERN.match(cleaned)
    if match:
        return NormalizedSize(
            value=_parse_number(match.group(1)),
            unit=_VOLUME_UNITS[match.group(2)],
            type=SizeType.VOLUME,
            original=size,
        )

    return NormalizedSize(value=0.0, unit="", type=SizeType.UNKNOWN, original=size)


def size_bucket_key(size: str | None) -> str:
    """Canonical bucket key for a listing's size field."""
    if not size or not size.strip():
        return NO_SIZE

    normalized = normalize_size(size)

    if normalized.type == SizeType.UNKNOWN:
        return re.sub(r"\s+", "", size.lower())

    value = normalized.value
    unit = normalized.unit
    if normalized.type == SizeType.WEIGHT:
        if unit == "kg":
            value *= 1000
        unit = "g"
    elif normalized.type == SizeType.VOLUME:
        if unit == "l":
            value *= 1000
        unit = "ml"

    return f"{_format_number(value)}{unit}"


def _parse_number(text: str) -> float:
    return float(text.replace(",", "."))


def _format_number(value: float) -> str:
    """Render 2000.0 as "2000" and 1.5 as "1.5"."""
    value = round(value, 6)
    if value.is_integer():
        return str(int(value))
    return f"{value:f}".rstrip("0").rstrip(".")
