"""Manual name -> record pins for names fuzzy matching gets wrong.

The file is a single JSON document validated with pydantic::

    {"matches": [{"names": ["Arc Alloys"], "category": "items",
                  "target_id": "arc_alloy", "created_at": "...", "notes": ""}]}
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path

import structlog
from pydantic import BaseModel, Field, ValidationError, field_validator

from topmatch.types import Category

log = structlog.get_logger()


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ManualMatch(BaseModel):
    """Scraped spellings pinned to one catalog record."""

    names: list[str]
    category: Category
    target_id: str
    created_at: str = Field(default_factory=_utc_now)
    notes: str = ""

    @field_validator("names")
    @classmethod
    def _strip_names(cls, names: list[str]) -> list[str]:
        stripped = [n.strip() for n in names if n.strip()]
        if not stripped:
            raise ValueError("at least one non-blank name is required")
        return stripped

    @field_validator("target_id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        if isinstance(value, int):
            return str(value)
        return value


class ManualMatchFile(BaseModel):
    matches: list[ManualMatch] = Field(default_factory=list)


class ManualMatchStore:
    """JSON file of pins, consulted before any fuzzy matching."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.matches: list[ManualMatch] = []

    def load(self) -> None:
        """Read the file. A missing or invalid file leaves the store empty."""
        if not self.path.exists():
            log.info("manual_matches_file_not_found", path=str(self.path))
            self.matches = []
            return

        try:
            data = ManualMatchFile.model_validate_json(self.path.read_text(encoding="utf-8"))
        except ValidationError as e:
            log.error("manual_matches_load_error", path=str(self.path), error=str(e))
            self.matches = []
            return

        self.matches = data.matches
        log.info("manual_matches_loaded", path=str(self.path), count=len(self.matches))

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        document = ManualMatchFile(matches=self.matches)
        self.path.write_text(document.model_dump_json(indent=2), encoding="utf-8")
        log.info("manual_matches_saved", path=str(self.path), count=len(self.matches))

    def add_match(
        self,
        names: Iterable[str],
        category: Category | str,
        target_id: str,
        notes: str = "",
    ) -> ManualMatch:
        """Pin ``names`` to a record and save.

        Raises:
            ValueError: if the category is unknown, no name is given, or a
                name is already pinned elsewhere.
        """
        match = ManualMatch(
            names=list(names),
            category=Category.parse(category),
            target_id=target_id,
            notes=notes,
        )
        pinned = self.get_name_map()
        taken = [n for n in match.names if n in pinned]
        if taken:
            raise ValueError(f"already pinned: {', '.join(taken)}")

        self.matches.append(match)
        self.save()
        log.info(
            "manual_match_added",
            names=match.names,
            category=match.category.value,
            target_id=match.target_id,
        )
        return match

    def remove_name(self, name: str) -> bool:
        """Unpin one scraped name; a pin left without names is dropped.

        Returns False when the name was not pinned.
        """
        for match in self.matches:
            if name in match.names:
                match.names.remove(name)
                break
        else:
            return False

        self.matches = [m for m in self.matches if m.names]
        self.save()
        log.info("manual_match_removed", name=name)
        return True

    def get_name_map(self) -> dict[str, tuple[Category, str]]:
        """Map each pinned name to (category, target_id)."""
        return {
            name: (match.category, match.target_id)
            for match in self.matches
            for name in match.names
        }

    def overrides_for(self, category: Category | str) -> dict[str, str]:
        """Pinned name -> record id for one category, as used by ``Linker``."""
        category = Category.parse(category)
        return {
            name: target_id
            for name, (pinned_category, target_id) in self.get_name_map().items()
            if pinned_category is category
        }
