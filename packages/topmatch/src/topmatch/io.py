"""CSV/JSONL input and output for catalogs, scraped names and results."""

from __future__ import annotations

import csv
import json
from collections.abc import Sequence
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from topmatch.linker import TraderListing
from topmatch.records import RECORD_MODELS, Catalog, Record
from topmatch.types import Category, MatchRow

log = structlog.get_logger()


def read_catalog(path: str | Path, model: type[Record] = Record) -> list[Record]:
    """Read canonical records from CSV or JSONL.

    Rows keep their file order, which is the order candidates are scanned in.
    Rows with a blank name are kept (as name=None); search skips them.
    """
    path = Path(path)
    rows = _read_rows(path)

    records: list[Record] = []
    for line_no, row in rows:
        try:
            records.append(model.model_validate(row))
        except ValidationError as e:
            raise ValueError(f"{path}:{line_no}: invalid {model.__name__} record: {e}") from e
    return records


def load_catalog(directory: str | Path) -> Catalog:
    """Load ``<category>.jsonl`` or ``<category>.csv`` for every category.

    A category without a file is empty.
    """
    directory = Path(directory)
    loaded: dict[Category, list[Record]] = {}
    for category, model in RECORD_MODELS.items():
        path = _find_category_file(directory, category)
        if path is None:
            log.warning("catalog_file_missing", directory=str(directory), category=category.value)
            loaded[category] = []
            continue
        loaded[category] = read_catalog(path, model)
        log.info("catalog_file_loaded", path=str(path), count=len(loaded[category]))

    return Catalog.from_lists(
        items=loaded[Category.ITEMS],
        quests=loaded[Category.QUESTS],
        arcs=loaded[Category.ARCS],
        hideout_stations=loaded[Category.HIDEOUT_STATIONS],
    )


def _find_category_file(directory: Path, category: Category) -> Path | None:
    for suffix in (".jsonl", ".csv"):
        path = directory / f"{category.value}{suffix}"
        if path.exists():
            return path
    return None


def read_names(path: str | Path, name_column: str = "name") -> list[str]:
    """Read target names from CSV or JSONL, skipping blanks."""
    path = Path(path)
    rows = _read_rows(path)

    names: list[str] = []
    for _, row in rows:
        name = (row.get(name_column) or "").strip()
        if name:
            names.append(name)
    return names


def read_trader_listings(path: str | Path) -> list[TraderListing]:
    """Read scraped trader rows (``item_name``, ``currency``, optional ``price``)."""
    path = Path(path)
    listings: list[TraderListing] = []
    for line_no, row in _read_rows(path):
        item_name = (row.get("item_name") or "").strip()
        if not item_name:
            continue
        price = row.get("price")
        try:
            listings.append(TraderListing(
                item_name=item_name,
                currency=str(row.get("currency") or "").strip(),
                price=float(price) if price not in (None, "") else None,
            ))
        except ValueError as e:
            raise ValueError(f"{path}:{line_no}: invalid price {price!r}") from e
    return listings


def _read_rows(path: Path) -> list[tuple[int, dict]]:
    if path.suffix == ".jsonl":
        return _read_jsonl_rows(path)
    return _read_csv_rows(path)


def _read_csv_rows(path: Path) -> list[tuple[int, dict]]:
    with path.open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        # line 1 is the header
        return [(i + 2, row) for i, row in enumerate(reader)]


def _read_jsonl_rows(path: Path) -> list[tuple[int, dict]]:
    rows: list[tuple[int, dict]] = []
    with path.open(encoding="utf-8") as f:
        for i, line in enumerate(f, start=1):
            if not line.strip():
                continue
            rows.append((i, json.loads(line)))
    return rows


RESULT_FIELDS = ["name", "decision", "category", "target_id", "target_name", "distance"]


def write_results(rows: list[MatchRow], path: str | Path) -> None:
    """Write match rows to CSV or JSONL."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if path.suffix == ".jsonl":
        _write_jsonl(rows, path)
    else:
        _write_csv(rows, path)


def _write_csv(rows: list[MatchRow], path: Path) -> None:
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=RESULT_FIELDS)
        writer.writeheader()
        for r in rows:
            writer.writerow({
                "name": r.name,
                "decision": r.decision,
                "category": r.category or "",
                "target_id": r.target_id or "",
                "target_name": r.target_name or "",
                "distance": r.distance if r.distance is not None else "",
            })


def _write_jsonl(rows: list[MatchRow], path: Path) -> None:
    with path.open("w", encoding="utf-8") as f:
        for r in rows:
            f.write(json.dumps(asdict(r)) + "\n")


def write_relations(relations: Sequence[Any], relation_type: type, path: str | Path) -> None:
    """Write linker relation records (dataclasses) to CSV or JSONL."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if path.suffix == ".jsonl":
        with path.open("w", encoding="utf-8") as f:
            for r in relations:
                f.write(json.dumps(asdict(r)) + "\n")
        return

    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=[fld.name for fld in fields(relation_type)])
        writer.writeheader()
        for r in relations:
            writer.writerow(asdict(r))
