"""Turn scraped trader listings and arc loot names into relation records.

The matcher only finds the closest item; whether that match is close enough
to record is decided here, using ``LinkConfig.max_distance``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

import structlog

from topmatch.config import LinkConfig
from topmatch.matcher import Matcher
from topmatch.types import MatchResult

log = structlog.get_logger()

R = TypeVar("R")


@dataclass(frozen=True)
class TraderListing:
    """An item as listed on a trader's wiki page."""

    item_name: str
    currency: str
    price: float | None = None


@dataclass(frozen=True)
class TraderItemForSale:
    trader_id: str
    item_id: str
    currency: str


@dataclass(frozen=True)
class ArcLootItem:
    arc_id: str
    item_id: str


@dataclass
class LinkReport(Generic[R]):
    relations: list[R] = field(default_factory=list)
    unresolved: list[str] = field(default_factory=list)
    matches: list[MatchResult[Any]] = field(default_factory=list)

    @property
    def accepted(self) -> int:
        return len(self.relations)


class Linker:
    """Resolves scraped names against the item catalog."""

    def __init__(
        self,
        matcher: Matcher,
        config: LinkConfig | None = None,
        overrides: Mapping[str, str] | None = None,
    ) -> None:
        self.matcher = matcher
        self.config = config or matcher.config.link
        # scraped name -> item id, consulted before fuzzy matching
        self.overrides = dict(overrides or {})

    def resolve_item_id(self, name: str) -> tuple[str | None, MatchResult[Any] | None]:
        """Return (item_id, match) for a scraped item name.

        ``item_id`` is None when neither an override nor a match within
        ``max_distance`` exists.
        """
        if name in self.overrides:
            return self.overrides[name], None

        match = self.matcher.find_item(name, max_distance=self.config.max_distance)
        if match is None:
            return None, None
        return _record_id(match.item), match

    def currency(self, raw: str) -> str:
        try:
            return self.config.currency_aliases[raw.lower()]
        except KeyError:
            raise ValueError(f"unknown currency {raw!r}") from None

    def link_trader(
        self, trader_id: str, listings: Iterable[TraderListing]
    ) -> LinkReport[TraderItemForSale]:
        report: LinkReport[TraderItemForSale] = LinkReport()
        for listing in listings:
            item_id, match = self.resolve_item_id(listing.item_name)
            if item_id is None:
                log.info(
                    "no_closest_item",
                    source="trader",
                    trader_id=trader_id,
                    name=listing.item_name,
                )
                report.unresolved.append(listing.item_name)
                continue
            try:
                currency = self.currency(listing.currency)
            except ValueError:
                log.warning(
                    "unknown_currency",
                    trader_id=trader_id,
                    name=listing.item_name,
                    currency=listing.currency,
                )
                report.unresolved.append(listing.item_name)
                continue
            if match is not None:
                report.matches.append(match)
            report.relations.append(
                TraderItemForSale(trader_id=trader_id, item_id=item_id, currency=currency)
            )

        log.info(
            "trader_linked",
            trader_id=trader_id,
            accepted=report.accepted,
            unresolved=len(report.unresolved),
        )
        return report

    def link_arc_loot(
        self, arc_id: str, loot_names: Iterable[str]
    ) -> LinkReport[ArcLootItem]:
        report: LinkReport[ArcLootItem] = LinkReport()
        for name in loot_names:
            item_id, match = self.resolve_item_id(name)
            if item_id is None:
                log.info("no_closest_item", source="arc_loot", arc_id=arc_id, name=name)
                report.unresolved.append(name)
                continue
            if match is not None:
                report.matches.append(match)
            report.relations.append(ArcLootItem(arc_id=arc_id, item_id=item_id))

        log.info(
            "arc_loot_linked",
            arc_id=arc_id,
            accepted=report.accepted,
            unresolved=len(report.unresolved),
        )
        return report


def _record_id(record: Any) -> str:
    if isinstance(record, Mapping):
        return str(record["id"])
    return str(record.id)
