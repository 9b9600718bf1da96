"""Closest-match and ranked-match search over named candidates."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
import math

from topmatch.distance import levenshtein_distance
from topmatch.normalize import normalize
from topmatch.types import MatchResult, T

NameGetter = Callable[[T], str | None]


def _resolve_max_distance(max_distance: float | None) -> float | None:
    """Validate a distance bound; None and ``math.inf`` both mean unbounded."""
    if max_distance is None:
        return None
    if max_distance < 0:
        raise ValueError(f"max_distance must be >= 0, got {max_distance}")
    if not math.isfinite(max_distance):
        return None
    return max_distance


def _named(
    candidates: Iterable[T], get_name: NameGetter[T]
) -> Iterator[tuple[T, str, str]]:
    """Yield (candidate, name, normalized name), skipping unnamed candidates."""
    for candidate in candidates:
        name = get_name(candidate)
        if not name:
            continue
        yield candidate, name, normalize(name)


def find_closest_match(
    target: str,
    candidates: Iterable[T],
    get_name: NameGetter[T],
    *,
    max_distance: float | None = None,
) -> MatchResult[T] | None:
    """Find the candidate whose name is closest to ``target``.

    Candidates are scanned in order. The first exact match after
    normalization is returned immediately with distance 0. Otherwise the
    lowest distance wins, and on ties the earliest candidate is kept.
    Candidates farther than ``max_distance`` are never considered.

    Returns None when no candidate qualifies.
    """
    max_distance = _resolve_max_distance(max_distance)
    normalized_target = normalize(target)

    best: MatchResult[T] | None = None
    for candidate, name, normalized_name in _named(candidates, get_name):
        if normalized_name == normalized_target:
            return MatchResult(item=candidate, name=name, distance=0)

        # Only a strictly better distance can replace the current best
        cutoff = max_distance
        if best is not None:
            cutoff = best.distance if cutoff is None else min(cutoff, best.distance)

        distance = levenshtein_distance(
            normalized_target, normalized_name, score_cutoff=cutoff
        )
        if max_distance is not None and distance > max_distance:
            continue
        if best is None or distance < best.distance:
            best = MatchResult(item=candidate, name=name, distance=distance)

    return best


def find_all_matches(
    target: str,
    candidates: Iterable[T],
    get_name: NameGetter[T],
    *,
    max_distance: float | None = None,
) -> list[MatchResult[T]]:
    """Collect every candidate within ``max_distance`` of ``target``.

    Results are ordered by ascending distance; candidates at the same
    distance keep their input order.
    """
    max_distance = _resolve_max_distance(max_distance)
    normalized_target = normalize(target)

    matches: list[MatchResult[T]] = []
    for candidate, name, normalized_name in _named(candidates, get_name):
        if normalized_name == normalized_target:
            distance = 0
        else:
            distance = levenshtein_distance(
                normalized_target, normalized_name, score_cutoff=max_distance
            )
        if max_distance is not None and distance > max_distance:
            continue
        matches.append(MatchResult(item=candidate, name=name, distance=distance))

    matches.sort(key=lambda m: m.distance)
    return matches
