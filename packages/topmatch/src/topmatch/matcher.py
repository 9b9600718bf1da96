"""Cross-category matching over a catalog snapshot."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, Protocol

import structlog

from topmatch.config import MatchConfig
from topmatch.records import Catalog, get_name
from topmatch.search import find_all_matches, find_closest_match
from topmatch.types import Category, MatchResult, TypedMatchResult

log = structlog.get_logger()


class CatalogProvider(Protocol):
    """Source of the current candidates, e.g. an ingestion context."""

    def snapshot(self) -> Catalog: ...


def _selected(categories: Iterable[Category | str] | Category | str | None) -> list[Category]:
    """Resolve a category selection into the fixed declared order."""
    if categories is None:
        return list(Category)
    # Category is a str subclass; a single name is one selection, not characters
    if isinstance(categories, str):
        categories = [categories]
    wanted = {Category.parse(c) for c in categories}
    return [c for c in Category if c in wanted]


def find_across_all(
    target: str,
    catalog: Catalog,
    *,
    max_distance: int | None = None,
    categories: Iterable[Category | str] | Category | str | None = None,
    get_name: Callable[[Any], str | None] = get_name,
) -> TypedMatchResult[Any] | None:
    """Find the single closest match across several categories.

    Categories are always scanned as items, quests, arcs, hideoutStations,
    regardless of the order given. A later category only wins with a
    strictly smaller distance.
    """
    best: TypedMatchResult[Any] | None = None
    for category in _selected(categories):
        match = find_closest_match(
            target,
            catalog.candidates(category),
            get_name,
            max_distance=max_distance,
        )
        if match is None:
            continue
        if best is None or match.distance < best.distance:
            best = TypedMatchResult(
                item=match.item,
                name=match.name,
                distance=match.distance,
                category=category,
            )
    return best


@dataclass
class MatcherStats:
    """Lookup counters for one matcher."""

    lookups: int = 0
    exact: int = 0
    fuzzy: int = 0
    misses: int = 0

    def record(self, match: MatchResult[Any] | None) -> None:
        self.lookups += 1
        if match is None:
            self.misses += 1
        elif match.distance == 0:
            self.exact += 1
        else:
            self.fuzzy += 1


class Matcher:
    """Entity matcher bound to one catalog snapshot."""

    def __init__(self, catalog: Catalog, config: MatchConfig | None = None) -> None:
        self.catalog = catalog
        self.config = config or MatchConfig()
        self.stats = MatcherStats()

    @classmethod
    def from_provider(
        cls, provider: CatalogProvider, config: MatchConfig | None = None
    ) -> Matcher:
        return cls(provider.snapshot(), config)

    def _max_distance(self, max_distance: int | None) -> int | None:
        if max_distance is None:
            return self.config.search.max_distance
        return max_distance

    def find(
        self,
        target: str,
        category: Category | str,
        *,
        max_distance: int | None = None,
    ) -> MatchResult[Any] | None:
        """Closest match for ``target`` within a single category."""
        category = Category.parse(category)
        match = find_closest_match(
            target,
            self.catalog.candidates(category),
            get_name,
            max_distance=self._max_distance(max_distance),
        )
        self.stats.record(match)
        log.debug(
            "find_done",
            target=target,
            category=category.value,
            matched=match.name if match else None,
            distance=match.distance if match else None,
        )
        return match

    def find_item(self, target: str, *, max_distance: int | None = None) -> MatchResult[Any] | None:
        return self.find(target, Category.ITEMS, max_distance=max_distance)

    def find_quest(self, target: str, *, max_distance: int | None = None) -> MatchResult[Any] | None:
        return self.find(target, Category.QUESTS, max_distance=max_distance)

    def find_arc(self, target: str, *, max_distance: int | None = None) -> MatchResult[Any] | None:
        return self.find(target, Category.ARCS, max_distance=max_distance)

    def find_hideout_station(
        self, target: str, *, max_distance: int | None = None
    ) -> MatchResult[Any] | None:
        return self.find(target, Category.HIDEOUT_STATIONS, max_distance=max_distance)

    def find_across_all(
        self,
        target: str,
        *,
        max_distance: int | None = None,
        categories: Iterable[Category | str] | Category | str | None = None,
    ) -> TypedMatchResult[Any] | None:
        """Globally closest match across the selected categories."""
        if categories is None:
            categories = self.config.search.categories
        match = find_across_all(
            target,
            self.catalog,
            max_distance=self._max_distance(max_distance),
            categories=categories,
        )
        self.stats.record(match)
        log.debug(
            "find_across_all_done",
            target=target,
            category=match.category.value if match else None,
            matched=match.name if match else None,
            distance=match.distance if match else None,
        )
        return match

    def find_all(
        self,
        target: str,
        category: Category | str,
        *,
        max_distance: int | None = None,
    ) -> list[MatchResult[Any]]:
        """Every match in ``category`` within range, closest first."""
        return find_all_matches(
            target,
            self.catalog.candidates(category),
            get_name,
            max_distance=self._max_distance(max_distance),
        )
