"""Edit-distance scoring between normalized names."""

from __future__ import annotations

from rapidfuzz.distance import Levenshtein


def levenshtein_distance(a: str, b: str, *, score_cutoff: float | None = None) -> int:
    """Levenshtein distance with unit insert/delete/substitute costs.

    Characters are compared as-is; callers normalize first.

    Args:
        a: First string.
        b: Second string.
        score_cutoff: Largest distance the caller cares about. When the real
            distance is larger, ``score_cutoff + 1`` is returned instead,
            which lets the computation stop early.
    """
    return Levenshtein.distance(a, b, score_cutoff=score_cutoff)
