"""Core types for the topmatch entity matching engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Literal, TypeVar

T = TypeVar("T")


class Category(str, Enum):
    """Record categories, declared in cross-category scan order."""

    ITEMS = "items"
    QUESTS = "quests"
    ARCS = "arcs"
    HIDEOUT_STATIONS = "hideoutStations"

    @classmethod
    def parse(cls, value: str | Category) -> Category:
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(c.value for c in cls)
            raise ValueError(f"unknown category {value!r} (expected one of: {valid})") from None


@dataclass(frozen=True)
class MatchResult(Generic[T]):
    item: T
    name: str
    distance: int

    @property
    def exact(self) -> bool:
        return self.distance == 0


@dataclass(frozen=True)
class TypedMatchResult(MatchResult[T]):
    category: Category


Decision = Literal["MANUAL_MATCH", "EXACT", "FUZZY", "NO_MATCH"]


@dataclass
class MatchRow:
    """One line of CLI / batch output."""

    name: str
    decision: Decision
    category: str | None = None
    target_id: str | None = None
    target_name: str | None = None
    distance: int | None = None
