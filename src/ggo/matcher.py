"""Branch-name matching strategies.

Two interchangeable strategies filter candidates against a pattern:

- ``SubstringMatcher``: candidate contains the pattern.
- ``FuzzyMatcher``: pattern characters appear in order in the candidate;
  each match gets an integer quality score.

Both fold case when ``ignore_case`` is set, and an empty pattern
matches every candidate.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

SCORE_MATCH = 16
BONUS_CONSECUTIVE = 8
BONUS_BOUNDARY = 8
BONUS_PREFIX = 12
PENALTY_GAP_START = 3
PENALTY_GAP_EXTENSION = 1

_BOUNDARY_CHARS = frozenset("/-_. ")


@dataclass(frozen=True)
class MatchResult:
    """A candidate that matched, with its match quality (0 for substring mode)."""

    name: str
    score: int = 0


class Matcher(Protocol):
    """Filters and scores candidates against a pattern."""

    fuzzy: bool

    def match(
        self, candidates: Sequence[str], pattern: str, ignore_case: bool = False
    ) -> list[MatchResult]:
        ...


def matches_substring(candidate: str, pattern: str, ignore_case: bool = False) -> bool:
    if ignore_case:
        return pattern.lower() in candidate.lower()
    return pattern in candidate


def _is_boundary(text: str, index: int) -> bool:
    if index == 0:
        return True
    prev = text[index - 1]
    if prev in _BOUNDARY_CHARS:
        return True
    # camelCase hump
    return prev.islower() and text[index].isupper()


def _align(shape: str, text: str, needle: str, start: int) -> int | None:
    """Greedy left-to-right alignment of *needle* in *text* from *start*.

    *text* is what characters are compared on; *shape* (same length) is
    what word boundaries are read from. None if the needle does not fit.
    """
    total = 0
    streak = 0
    last = -1
    p = 0
    for i in range(start, len(text)):
        if p == len(needle):
            break
        if text[i] != needle[p]:
            continue

        total += SCORE_MATCH
        if last >= 0 and i == last + 1:
            streak += 1
            total += BONUS_CONSECUTIVE * streak
        else:
            streak = 0
            if last >= 0:
                gap = i - last - 1
                total -= PENALTY_GAP_START + PENALTY_GAP_EXTENSION * (gap - 1)
        if _is_boundary(shape, i):
            total += BONUS_BOUNDARY
        if i == 0:
            total += BONUS_PREFIX
        last = i
        p += 1

    if p < len(needle):
        return None
    return total


def fuzzy_score(candidate: str, pattern: str, ignore_case: bool = False) -> int | None:
    """Score how well *pattern* aligns as a subsequence of *candidate*.

    Higher is better: contiguous runs, word-boundary hits and a match at
    the very start all earn bonuses; gaps between matched characters cost
    points. Every alignment start is tried and the best one kept.

    Returns:
        The score (always >= 1 for a match, 0 for an empty pattern),
        or None when the pattern is not a subsequence.
    """
    if not pattern:
        return 0

    text, needle = candidate, pattern
    if ignore_case:
        text, needle = candidate.lower(), pattern.lower()
    # Case folding can change length for a few code points; fall back to
    # reading boundaries from the folded text then.
    shape = candidate if len(candidate) == len(text) else text

    if len(needle) > len(text):
        return None

    best: int | None = None
    for start, char in enumerate(text):
        if char != needle[0]:
            continue
        aligned = _align(shape, text, needle, start)
        if aligned is not None and (best is None or aligned > best):
            best = aligned
    if best is None:
        return None
    return max(best, 1)


class SubstringMatcher:
    """Exact substring filter. Every match scores 0; order is preserved."""

    fuzzy = False

    def match(
        self, candidates: Sequence[str], pattern: str, ignore_case: bool = False
    ) -> list[MatchResult]:
        return [
            MatchResult(name=c)
            for c in candidates
            if matches_substring(c, pattern, ignore_case)
        ]


class FuzzyMatcher:
    """Subsequence filter with quality scores, best first (stable on ties)."""

    fuzzy = True

    def match(
        self, candidates: Sequence[str], pattern: str, ignore_case: bool = False
    ) -> list[MatchResult]:
        results = []
        for c in candidates:
            value = fuzzy_score(c, pattern, ignore_case)
            if value is not None:
                results.append(MatchResult(name=c, score=value))
        results.sort(key=lambda m: m.score, reverse=True)
        return results


def get_matcher(fuzzy: bool) -> Matcher:
    return FuzzyMatcher() if fuzzy else SubstringMatcher()
