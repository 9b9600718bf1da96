"""Tests for the manual match store."""

from pathlib import Path
import json

import pytest

from topmatch.manual_matches import ManualMatchStore
from topmatch.types import Category


def test_missing_file_loads_empty(tmp_path: Path):
    store = ManualMatchStore(tmp_path / "missing.json")
    store.load()
    assert store.matches == []


def test_add_and_reload(tmp_path: Path):
    path = tmp_path / "data" / "manual_matches.json"
    store = ManualMatchStore(path)
    store.add_match([" ARC Alloy ", "Arc Alloys", ""], "items", "arc_alloy", notes="wiki spelling")

    reloaded = ManualMatchStore(str(path))
    reloaded.load()

    assert len(reloaded.matches) == 1
    match = reloaded.matches[0]
    assert match.names == ["ARC Alloy", "Arc Alloys"]
    assert match.category is Category.ITEMS
    assert match.notes == "wiki spelling"
    assert match.created_at

    saved = json.loads(path.read_text())
    assert saved["matches"][0]["category"] == "items"


class TestOverrides:
    def make_store(self, tmp_path: Path) -> ManualMatchStore:
        store = ManualMatchStore(tmp_path / "m.json")
        store.add_match(["Arc Alloys"], "items", "arc_alloy")
        store.add_match(["Clear Skies"], Category.QUESTS, "clearer_skies")
        return store

    def test_name_map(self, tmp_path: Path):
        assert self.make_store(tmp_path).get_name_map() == {
            "Arc Alloys": (Category.ITEMS, "arc_alloy"),
            "Clear Skies": (Category.QUESTS, "clearer_skies"),
        }

    def test_overrides_for_category(self, tmp_path: Path):
        store = self.make_store(tmp_path)
        assert store.overrides_for("items") == {"Arc Alloys": "arc_alloy"}
        assert store.overrides_for(Category.QUESTS) == {"Clear Skies": "clearer_skies"}
        assert store.overrides_for("arcs") == {}


class TestRemoveName:
    def test_keeps_remaining_names(self, tmp_path: Path):
        store = ManualMatchStore(tmp_path / "m.json")
        store.add_match(["Rope", "Ropes"], "items", "rope")

        assert store.remove_name("Ropes") is True
        assert store.get_name_map() == {"Rope": (Category.ITEMS, "rope")}

    def test_drops_empty_pin(self, tmp_path: Path):
        store = ManualMatchStore(tmp_path / "m.json")
        store.add_match(["A"], "items", "a")
        store.add_match(["B"], "arcs", "b")

        assert store.remove_name("A") is True
        assert [m.target_id for m in store.matches] == ["b"]

        saved = json.loads((tmp_path / "m.json").read_text())
        assert [m["target_id"] for m in saved["matches"]] == ["b"]

    def test_unknown_name(self, tmp_path: Path):
        store = ManualMatchStore(tmp_path / "m.json")
        assert store.remove_name("Nope") is False
        assert not (tmp_path / "m.json").exists()


def test_malformed_file_loads_empty(tmp_path: Path):
    path = tmp_path / "m.json"
    path.write_text("{not json")

    store = ManualMatchStore(path)
    store.load()

    assert store.matches == []


def test_unknown_category_in_file_loads_empty(tmp_path: Path):
    path = tmp_path / "m.json"
    path.write_text(json.dumps({"matches": [{
        "names": ["X"], "category": "weapons", "target_id": "x",
        "created_at": "2025-01-01T00:00:00+00:00",
    }]}))

    store = ManualMatchStore(path)
    store.load()

    assert store.matches == []


def test_numeric_target_id_read_as_string(tmp_path: Path):
    path = tmp_path / "m.json"
    path.write_text(json.dumps({"matches": [{"names": ["Rope"], "category": "items", "target_id": 7}]}))

    store = ManualMatchStore(path)
    store.load()

    assert store.get_name_map() == {"Rope": (Category.ITEMS, "7")}


class TestAddMatchRejects:
    def test_unknown_category(self, tmp_path: Path):
        store = ManualMatchStore(tmp_path / "m.json")
        with pytest.raises(ValueError):
            store.add_match(["X"], "weapons", "x")

    def test_blank_names(self, tmp_path: Path):
        store = ManualMatchStore(tmp_path / "m.json")
        with pytest.raises(ValueError):
            store.add_match(["  "], "items", "x")

    def test_name_already_pinned(self, tmp_path: Path):
        store = ManualMatchStore(tmp_path / "m.json")
        store.add_match(["Rope"], "items", "rope")

        with pytest.raises(ValueError, match="already pinned: Rope"):
            store.add_match(["Rope"], "items", "rope_coil")
        assert len(store.matches) == 1
