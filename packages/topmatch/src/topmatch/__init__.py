"""topmatch - Fuzzy entity matching for scraped game-wiki names."""

from topmatch.config import MatchConfig
from topmatch.distance import levenshtein_distance
from topmatch.linker import Linker
from topmatch.matcher import Matcher, MatcherStats, find_across_all
from topmatch.normalize import normalize, normalize_roman_numerals
from topmatch.records import Catalog
from topmatch.search import find_all_matches, find_closest_match
from topmatch.types import Category, MatchResult, TypedMatchResult

__all__ = [
    "Catalog",
    "Category",
    "Linker",
    "MatchConfig",
    "Matcher",
    "MatcherStats",
    "MatchResult",
    "TypedMatchResult",
    "find_across_all",
    "find_all_matches",
    "find_closest_match",
    "levenshtein_distance",
    "normalize",
    "normalize_roman_numerals",
]
