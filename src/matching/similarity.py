# src/matching/similarity.py

"""Set-overlap and edit-distance similarity primitives."""

import math
from collections.abc import Iterable


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 always going up."""
    return int(math.floor(value + 0.5))


def token_overlap(a: Iterable[str], b: Iterable[str]) -> float:
    """Jaccard similarity ``|A ∩ B| / |A ∪ B|`` of two collections.

    Duplicates are ignored.  Returns ``0.0`` when either side is empty.
    """
    set_a = set(a)
    set_b = set(b)
    if not set_a or not set_b:
        return 0.0
    return len(set_a & set_b) / len(set_a | set_b)


def levenshtein_distance(s1: str, s2: str) -> int:
    """Minimum insert/delete/substitute edits turning *s1* into *s2*.

    Classic dynamic programme over an ``(m+1) x (n+1)`` table.
    """
    m, n = len(s1), len(s2)
    table = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(m + 1):
        table[i][0] = i
    for j in range(n + 1):
        table[0][j] = j

    for i in range(1, m + 1):
        for j in range(1, n + 1):
            if s1[i - 1] == s2[j - 1]:
                table[i][j] = table[i - 1][j - 1]
            else:
                table[i][j] = 1 + min(
                    table[i - 1][j - 1],  # substitute
                    table[i][j - 1],      # insert
                    table[i - 1][j],      # delete
                )
    return table[m][n]


def string_similarity(s1: str, s2: str) -> float:
    """Edit-distance ratio in ``[0, 1]``; 1.0 for identical strings."""
    if s1 == s2:
        return 1.0 if s1 else 0.0
    if not s1 or not s2:
        return 0.0
    longest = max(len(s1), len(s2))
    return (longest - levenshtein_distance(s1, s2)) / longest
