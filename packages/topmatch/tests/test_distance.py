"""Tests for Levenshtein edit distance."""

import itertools

import pytest

from topmatch.distance import levenshtein_distance

WORDS = ["", "a", "rope", "robe", "ropes", "medkit", "med kit", "kitten", "sitting"]


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ("kitten", "sitting", 3),
        ("flaw", "lawn", 2),
        ("chemical", "chemicals", 1),
        ("chemical", "chemical x", 2),
        ("medkit", "med kit", 1),
        ("é", "e", 1),
    ],
)
def test_known_distances(a, b, expected):
    assert levenshtein_distance(a, b) == expected


@pytest.mark.parametrize("s", WORDS)
def test_identity(s):
    assert levenshtein_distance(s, s) == 0


@pytest.mark.parametrize("s", WORDS)
def test_empty_string(s):
    assert levenshtein_distance("", s) == len(s)
    assert levenshtein_distance(s, "") == len(s)


@pytest.mark.parametrize("a, b", list(itertools.combinations(WORDS, 2)))
def test_symmetry(a, b):
    assert levenshtein_distance(a, b) == levenshtein_distance(b, a)


@pytest.mark.parametrize("a, b, c", list(itertools.permutations(WORDS[:6], 3)))
def test_triangle_inequality(a, b, c):
    assert levenshtein_distance(a, c) <= levenshtein_distance(a, b) + levenshtein_distance(b, c)


def test_case_is_significant():
    assert levenshtein_distance("Rope", "rope") == 1


def test_score_cutoff_caps_result():
    assert levenshtein_distance("kitten", "sitting", score_cutoff=1) == 2
    assert levenshtein_distance("kitten", "sitting", score_cutoff=3) == 3
