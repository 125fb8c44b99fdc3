"""Nearest-keyword suggestions for misspelled block names."""
from __future__ import annotations

from collections.abc import Iterable
from typing import Final

from whiskers.grammar.forms import statement_words
from whiskers.grammar.tokens import TOP_LEVEL_KEYWORDS

MAX_DISTANCE: Final[int] = 2

KNOWN_BLOCK_WORDS: Final[frozenset[str]] = statement_words() | TOP_LEVEL_KEYWORDS


def levenshtein(a: str, b: str) -> int:
    """Return the edit distance between *a* and *b*."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,  # deletion
                    current[j - 1] + 1,  # insertion
                    previous[j - 1] + (ca != cb),  # substitution
                )
            )
        previous = current
    return previous[-1]


def closest_word(
    typo: str,
    candidates: Iterable[str] = KNOWN_BLOCK_WORDS,
    max_distance: int = MAX_DISTANCE,
) -> str | None:
    """Return the candidate nearest to *typo*, or ``None`` if none is close.

    Comparison is case-insensitive; ties keep the alphabetically first
    candidate so results are deterministic.
    """
    best: str | None = None
    best_distance = max_distance + 1
    lowered = typo.lower()
    for candidate in sorted(candidates):
        distance = levenshtein(lowered, candidate.lower())
        if distance < best_distance:
            best, best_distance = candidate, distance
    return best
