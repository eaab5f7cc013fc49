"""Tests for shared common modules: models, config and logging."""

import logging

import pytest
import yaml
from pydantic import ValidationError

from src.common.config import GroupingSettings, Settings, StorePriorityRule
from src.common.logging import setup_logging
from src.common.models import Listing, ListingKind


class TestListing:
    def test_create_listing(self):
        listing = Listing(id="1", name="Coca Cola", price=70, store="Winners")
        assert listing.kind == ListingKind.REGULAR
        assert listing.is_promotion is False
        assert listing.brand is None
        assert listing.categories == ()

    def test_listing_is_immutable(self):
        listing = Listing(id="1", name="Coca Cola", price=70, store="Winners")
        with pytest.raises(ValidationError):
            listing.price = 10

    def test_price_must_be_non_negative(self):
        with pytest.raises(ValidationError):
            Listing(id="1", name="Coca Cola", price=-1, store="Winners")

    def test_from_catalog_record(self):
        listing = Listing.from_record(
            {
                "id": 42,
                "product": "Basmati Rice",
                "price": "120.50",
                "store": "Kingsavers",
                "size": "1kg",
                "category": "Riz",
                "created_at": "2025-01-01",
            }
        )
        assert listing.id == "42"
        assert listing.name == "Basmati Rice"
        assert listing.price == 120.5
        assert listing.kind == ListingKind.REGULAR
        assert listing.categories == ("Riz",)
        assert listing.previous_price is None

    def test_from_promotion_record(self):
        listing = Listing.from_record(
            {
                "id": "p1",
                "product_name": "Basmati Rice",
                "new_price": 99,
                "previous_price": 120,
                "store_name": "Kingsavers",
                "isPromotion": True,
            }
        )
        assert listing.is_promotion
        assert listing.price == 99
        assert listing.previous_price == 120
        assert listing.store == "Kingsavers"

    def test_from_record_with_category_list(self):
        listing = Listing.from_record(
            {"id": "1", "name": "Milk", "price": 40, "store": "Winners",
             "categories": ["Lait", " ", "Boisson"]}
        )
        assert listing.categories == ("Lait", "Boisson")

    def test_from_record_missing_fields(self):
        with pytest.raises(ValueError, match="price, store"):
            Listing.from_record({"id": "1", "product": "Milk"})

    def test_to_dict(self):
        listing = Listing(id="1", name="Milk", price=40, store="Winners", categories=["Lait"])
        d = listing.to_dict()
        assert d["kind"] == "regular"
        assert d["categories"] == ["Lait"]


class TestGroupingSettings:
    def test_defaults(self):
        s = GroupingSettings()
        assert s.name_match_threshold == 0.5
        assert s.word_similarity_threshold == 0.75
        assert s.max_group_size == 3
        assert [rule.name for rule in s.store_priority] == ["winners", "super u", "kingsavers"]

    @pytest.mark.parametrize(
        "store, rank",
        [
            ("Winners Grand Baie", 1),
            ("SUPER U", 2),
            ("Hyper U", 2),
            ("King Savers", 3),
            ("Corner Shop", 99),
        ],
    )
    def test_store_rank(self, store, rank):
        assert GroupingSettings().store_rank(store) == rank

    def test_injected_priority_table(self):
        s = GroupingSettings(
            store_priority=[StorePriorityRule(name="b", rank=1, keywords=["beta"])],
            unranked_store_priority=50,
        )
        assert s.store_rank("Beta Market") == 1
        assert s.store_rank("Winners") == 50

    def test_invalid_threshold(self):
        with pytest.raises(ValidationError):
            GroupingSettings(name_match_threshold=1.5)


class TestSettingsLoad:
    def test_load_yaml(self, tmp_path, monkeypatch):
        monkeypatch.delenv("LISTING_NAME_MATCH_THRESHOLD", raising=False)
        path = tmp_path / "settings.yaml"
        path.write_text(
            yaml.dump({"grouping": {"name_match_threshold": 0.6, "max_group_size": 2}}),
            encoding="utf-8",
        )
        s = Settings.load(path)
        assert s.grouping.name_match_threshold == 0.6
        assert s.grouping.max_group_size == 2

    def test_missing_file_uses_defaults(self, tmp_path, monkeypatch):
        monkeypatch.delenv("LISTING_NAME_MATCH_THRESHOLD", raising=False)
        s = Settings.load(tmp_path / "missing.yaml")
        assert s.grouping.name_match_threshold == 0.5

    def test_env_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LISTING_NAME_MATCH_THRESHOLD", "0.65")
        monkeypatch.setenv("LISTING_PRICE_SPREAD_WARNING", "25")
        s = Settings.load(tmp_path / "missing.yaml")
        assert s.grouping.name_match_threshold == 0.65
        assert s.grouping.price_spread_warning == 25.0

    def test_env_override_with_empty_grouping_section(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LISTING_NAME_MATCH_THRESHOLD", "0.7")
        path = tmp_path / "settings.yaml"
        path.write_text("grouping:\n", encoding="utf-8")
        s = Settings.load(path)
        assert s.grouping.name_match_threshold == 0.7
        assert s.grouping.max_group_size == 3

    def test_project_settings_file(self, project_root, monkeypatch):
        monkeypatch.delenv("LISTING_NAME_MATCH_THRESHOLD", raising=False)
        s = Settings.load(project_root / "config" / "settings.yaml")
        assert s.grouping.store_rank("Winners") == 1


class TestLogging:
    def test_setup_logging_is_idempotent(self):
        logger = setup_logging(logging.DEBUG, module_name="test_listing_logger")
        again = setup_logging(logging.INFO, module_name="test_listing_logger")
        assert logger is again
        assert len(again.handlers) == 1
        assert again.level == logging.INFO


class TestPackageImports:
    def test_cross_package_imports_are_absolute(self, project_root):
        offenders = [
            f"{path.relative_to(project_root)}: {line.strip()}"
            for path in sorted((project_root / "src").rglob("*.py"))
            for line in path.read_text(encoding="utf-8").splitlines()
            if line.lstrip().startswith("from ..")
        ]
        assert offenders == []
