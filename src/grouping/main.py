"""CLI entry point for the listing grouping engine.

Usage:
    python -m src.grouping.main --listings data/listings.json
    python -m src.grouping.main --listings data/products.json \\
        --promotions data/promotions.json --output data/exports/combined.json

    # Inspect raw groups and price ranks instead of combined products:
    python -m src.grouping.main --listings data/listings.json --groups-only -v
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from src.common.config import Settings
from src.common.logging import setup_logging
from src.common.models import Listing
from .engine import ListingGroupingEngine

logger = logging.getLogger(__name__)


def load_listings(path: str | Path) -> list[Listing]:
    """Read a JSON array (or ``{"listings": [...]}``) of raw listing rows."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("listings", [])
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON array of listings")

    return [Listing.from_record(record) for record in data]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Group store listings of the same product into price comparisons"
    )
    parser.add_argument(
        "--listings",
        type=str,
        required=True,
        help="JSON file with regular and/or promotion listing rows",
    )
    parser.add_argument(
        "--promotions",
        type=str,
        help="JSON file with active promotions (default: promotions in --listings)",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Settings YAML (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--output",
        type=str,
        help="Output JSON file path (default: stdout)",
    )
    parser.add_argument(
        "--groups-only",
        action="store_true",
        help="Write ranked groups instead of combined products",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        listings = load_listings(args.listings)
        promotions = load_listings(args.promotions) if args.promotions else None
        settings = Settings.load(args.config) if args.config else Settings.load()
    except (OSError, json.JSONDecodeError, ValidationError, ValueError) as e:
        logger.error("Failed to load input: %s", e)
        return 1

    engine = ListingGroupingEngine(settings.grouping)
    groups = engine.group_listings(listings, promotions)

    if args.groups_only:
        payload = {"groups": [group.to_dict() for group in groups]}
    else:
        products = engine.build_combined_products(groups)
        payload = {"combined_products": [product.to_dict() for product in products]}

    text = json.dumps(payload, ensure_ascii=False, indent=2, default=str)
    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text, encoding="utf-8")
        logger.info("Wrote %d groups -> %s", len(groups), output_path)
    else:
        print(text)

    logger.info(
        "=== %d listings -> %d groups (%d matched across stores) ===",
        len(listings),
        len(groups),
        sum(1 for group in groups if group.size > 1),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
