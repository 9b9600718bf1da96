"""Tests for the io module (catalog, name and result files)."""

from pathlib import Path
import json

import pytest

from topmatch.io import load_catalog, read_catalog, read_names, read_trader_listings, write_results
from topmatch.linker import TraderListing
from topmatch.matcher import Matcher
from topmatch.records import Item, Quest
from topmatch.types import Category, MatchRow


class TestReadCatalog:
    def test_read_jsonl(self, tmp_path: Path):
        path = tmp_path / "items.jsonl"
        path.write_text(
            '{"id": "rope", "name": "Rope", "rarity": "common"}\n'
            '\n'
            '{"id": 12, "name": "  "}\n'
        )

        records = read_catalog(path, Item)

        assert [r.id for r in records] == ["rope", "12"]
        assert records[0].rarity == "common"
        assert records[1].name is None

    def test_read_csv(self, tmp_path: Path):
        path = tmp_path / "quests.csv"
        path.write_text("id,name\nq1,Clearer Skies\nq2,\n")

        records = read_catalog(path, Quest)

        assert [(r.id, r.name) for r in records] == [("q1", "Clearer Skies"), ("q2", None)]
        assert all(isinstance(r, Quest) for r in records)

    def test_invalid_record_reports_location(self, tmp_path: Path):
        path = tmp_path / "items.jsonl"
        path.write_text('{"id": "rope", "name": "Rope"}\n{"name": "No Id"}\n')

        with pytest.raises(ValueError, match="items.jsonl:2"):
            read_catalog(path, Item)


class TestLoadCatalog:
    def test_load_mixed_formats(self, tmp_path: Path):
        (tmp_path / "items.jsonl").write_text('{"id": "rope", "name": "Rope"}\n')
        (tmp_path / "quests.csv").write_text("id,name\nq1,Rope Trick\n")

        catalog = load_catalog(tmp_path)

        assert catalog.counts() == {"items": 1, "quests": 1, "arcs": 0, "hideoutStations": 0}
        assert isinstance(catalog.items[0], Item)

    def test_jsonl_preferred_over_csv(self, tmp_path: Path):
        (tmp_path / "items.jsonl").write_text('{"id": "a", "name": "From Jsonl"}\n')
        (tmp_path / "items.csv").write_text("id,name\nb,From Csv\n")

        catalog = load_catalog(tmp_path)

        assert [r.id for r in catalog.items] == ["a"]

    def test_loaded_catalog_is_searchable(self, tmp_path: Path):
        (tmp_path / "items.jsonl").write_text(
            '{"id": "module_2", "name": "Module 2"}\n'
            '{"id": "module_3", "name": "Module 3"}\n'
        )

        matcher = Matcher(load_catalog(tmp_path))
        result = matcher.find_across_all("Module II")

        assert result.category is Category.ITEMS
        assert result.item.id == "module_2"


class TestReadNames:
    def test_read_csv_skips_blanks(self, tmp_path: Path):
        path = tmp_path / "names.csv"
        path.write_text("name\nBandage\n\n  \n Rope \n")

        assert read_names(path) == ["Bandage", "Rope"]

    def test_read_jsonl_custom_column(self, tmp_path: Path):
        path = tmp_path / "names.jsonl"
        path.write_text('{"item_name": "Bandage"}\n{"item_name": null}\n')

        assert read_names(path, name_column="item_name") == ["Bandage"]


class TestReadTraderListings:
    def test_read_csv(self, tmp_path: Path):
        path = tmp_path / "celeste.csv"
        path.write_text("item_name,currency,price\nBandage,credits,120\n,credits,5\nRope,nature,\n")

        assert read_trader_listings(path) == [
            TraderListing(item_name="Bandage", currency="credits", price=120.0),
            TraderListing(item_name="Rope", currency="nature", price=None),
        ]

    def test_bad_price_reports_location(self, tmp_path: Path):
        path = tmp_path / "celeste.jsonl"
        path.write_text('{"item_name": "Bandage", "currency": "credits", "price": "cheap"}\n')

        with pytest.raises(ValueError, match="celeste.jsonl:1"):
            read_trader_listings(path)


class TestWriteResults:
    def rows(self):
        return [
            MatchRow(
                name="Bandages", decision="FUZZY", category="items",
                target_id="bandage", target_name="Bandage", distance=1,
            ),
            MatchRow(name="Mystery Box", decision="NO_MATCH"),
        ]

    def test_write_csv(self, tmp_path: Path):
        path = tmp_path / "out" / "results.csv"

        write_results(self.rows(), path)

        lines = path.read_text().strip().split("\n")
        assert lines[0] == "name,decision,category,target_id,target_name,distance"
        assert lines[1] == "Bandages,FUZZY,items,bandage,Bandage,1"
        assert lines[2] == "Mystery Box,NO_MATCH,,,,"

    def test_write_jsonl(self, tmp_path: Path):
        path = tmp_path / "results.jsonl"

        write_results(self.rows(), path)

        records = [json.loads(line) for line in path.read_text().splitlines()]
        assert records[0]["distance"] == 1
        assert records[1] == {
            "name": "Mystery Box", "decision": "NO_MATCH", "category": None,
            "target_id": None, "target_name": None, "distance": None,
        }
