"""Display-name normalization for comparison."""

from __future__ import annotations

import re

ROMAN_TO_ARABIC: dict[str, str] = {
    "i": "1",
    "ii": "2",
    "iii": "3",
    "iv": "4",
    "v": "5",
    "vi": "6",
    "vii": "7",
    "viii": "8",
    "ix": "9",
    "x": "10",
}

# Longest alternatives first; the leading space and trailing \b keep
# numerals inside words ("Vault", "Vivid") and XI+ untouched.
_ROMAN_PATTERN = re.compile(
    r" (" + "|".join(sorted(ROMAN_TO_ARABIC, key=len, reverse=True)) + r")\b",
    re.IGNORECASE,
)


def normalize_roman_numerals(text: str) -> str:
    """Rewrite space-prefixed Roman numerals I-X to Arabic digits.

    "Module II" -> "Module 2". A single left-to-right pass; substituted
    digits are never rescanned.
    """
    return _ROMAN_PATTERN.sub(
        lambda m: " " + ROMAN_TO_ARABIC[m.group(1).lower()],
        text,
    )


def normalize(text: str) -> str:
    """Canonicalize a display name: lowercase, trim, then unify numerals.

    Lowercasing happens before numeral substitution. The substitution is
    case-insensitive, so the order does not change the result.
    """
    return normalize_roman_numerals(text.lower().strip())
