"""Configuration for the topmatch entity matching engine."""

from __future__ import annotations

from dataclasses import dataclass, field

from topmatch.types import Category


@dataclass
class SearchConfig:
    # None means unbounded: every named candidate is eligible
    max_distance: int | None = None
    categories: list[Category] = field(default_factory=lambda: list(Category))


@dataclass
class LinkConfig:
    """Acceptance policy used when recording scraped relations."""

    max_distance: int = 2
    currency_aliases: dict[str, str] = field(default_factory=lambda: {
        "credits": "credits",
        "nature": "seeds",
        "seeds": "seeds",
        "augment": "augment",
    })


@dataclass
class MatchConfig:
    search: SearchConfig = field(default_factory=SearchConfig)
    link: LinkConfig = field(default_factory=LinkConfig)
