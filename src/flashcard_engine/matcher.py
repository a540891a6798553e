"""
Fuzzy answer matching. Pure functions, no store access.
"""

import re
import unicodedata
from fractions import Fraction

MATCH_THRESHOLD = Fraction(4, 5)

_WHITESPACE = re.compile(r"\s+")


def normalize(text: str | None) -> str:
    """Trim, collapse whitespace, case-fold and strip diacritics."""
    if not text:
        return ""
    collapsed = _WHITESPACE.sub(" ", text).strip().casefold()
    decomposed = unicodedata.normalize("NFD", collapsed)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return unicodedata.normalize("NFC", stripped)


def damerau_levenshtein(a: str, b: str) -> int:
    """Edit distance with insertions, deletions, substitutions and adjacent
    transpositions, allowing further edits between transposed characters.
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    max_dist = len(a) + len(b)
    last_row_of: dict[str, int] = {}
    # d is offset by one so that row/column 0 can hold max_dist
    d = [[0] * (len(b) + 2) for _ in range(len(a) + 2)]
    d[0][0] = max_dist
    for i in range(len(a) + 1):
        d[i + 1][0] = max_dist
        d[i + 1][1] = i
    for j in range(len(b) + 1):
        d[0][j + 1] = max_dist
        d[1][j + 1] = j

    for i in range(1, len(a) + 1):
        last_match_col = 0
        for j in range(1, len(b) + 1):
            k = last_row_of.get(b[j - 1], 0)
            m = last_match_col
            if a[i - 1] == b[j - 1]:
                cost = 0
                last_match_col = j
            else:
                cost = 1
            d[i + 1][j + 1] = min(
                d[i][j] + cost,
                d[i + 1][j] + 1,
                d[i][j + 1] + 1,
                d[k][m] + (i - k - 1) + 1 + (j - m - 1),
            )
        last_row_of[a[i - 1]] = i

    return d[len(a) + 1][len(b) + 1]


def _ratio(candidate: str, expected: str) -> Fraction:
    left = normalize(candidate)
    right = normalize(expected)
    longest = max(len(left), len(right))
    if longest == 0:
        return Fraction(1)
    if not left or not right:
        return Fraction(0)
    return 1 - Fraction(damerau_levenshtein(left, right), longest)


def similarity(candidate: str, expected: str) -> float:
    return float(_ratio(candidate, expected))


def is_match(candidate: str, expected: str, threshold: Fraction = MATCH_THRESHOLD) -> bool:
    # compared as fractions so 4/5 sits exactly on the threshold
    return _ratio(candidate, expected) >= threshold


def best_match(candidate: str, options: list[str]) -> str | None:
    """Return the first option the candidate matches, or None."""
    for option in options:
        if is_match(candidate, option):
            return option
    return None
