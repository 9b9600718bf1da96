"""Canonical record models and the per-category catalog snapshot."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from topmatch.types import Category


class Record(BaseModel):
    """A canonical record with an optional display name."""

    model_config = ConfigDict(extra="allow", frozen=True)

    id: str
    name: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("name", mode="before")
    @classmethod
    def _blank_name_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class Item(Record):
    pass


class Quest(Record):
    pass


class Arc(Record):
    pass


class HideoutStation(Record):
    pass


RECORD_MODELS: dict[Category, type[Record]] = {
    Category.ITEMS: Item,
    Category.QUESTS: Quest,
    Category.ARCS: Arc,
    Category.HIDEOUT_STATIONS: HideoutStation,
}


def get_name(entity: Any) -> str | None:
    """Default name accessor: ``entity.name`` or ``entity["name"]``."""
    if isinstance(entity, Mapping):
        return entity.get("name")
    return getattr(entity, "name", None)


@dataclass(frozen=True)
class Catalog:
    """Read-only snapshot of the candidates for each category."""

    items: tuple[Any, ...] = ()
    quests: tuple[Any, ...] = ()
    arcs: tuple[Any, ...] = ()
    hideout_stations: tuple[Any, ...] = ()

    @classmethod
    def from_lists(
        cls,
        items: Iterable[Any] = (),
        quests: Iterable[Any] = (),
        arcs: Iterable[Any] = (),
        hideout_stations: Iterable[Any] = (),
    ) -> Catalog:
        return cls(
            items=tuple(items),
            quests=tuple(quests),
            arcs=tuple(arcs),
            hideout_stations=tuple(hideout_stations),
        )

    def candidates(self, category: Category | str) -> tuple[Any, ...]:
        category = Category.parse(category)
        if category is Category.ITEMS:
            return self.items
        if category is Category.QUESTS:
            return self.quests
        if category is Category.ARCS:
            return self.arcs
        return self.hideout_stations

    def counts(self) -> dict[str, int]:
        return {c.value: len(self.candidates(c)) for c in Category}
