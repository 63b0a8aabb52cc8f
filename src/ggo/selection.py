"""Score fusion and the auto-select decision.

Fuzzy mode fuses match quality with usage history::

    combined = fuzzy_score + frecency * FRECENCY_MULTIPLIER

Substring mode has no match quality, so frecency alone ranks.

``select_branch`` is a pure decision over a ranked list: it either picks
a branch or asks the caller to let the user choose.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Union

from ggo.constants import (
    DEFAULT_AUTO_SELECT_THRESHOLD,
    DEFAULT_HALF_LIFE_SECONDS,
    FRECENCY_MULTIPLIER,
)
from ggo.exceptions import NoMatchingBranchesError
from ggo.frecency import frecency_map, sort_by_frecency
from ggo.matcher import MatchResult
from ggo.models.records import ScoredBranch, UsageRecord


@dataclass(frozen=True)
class Resolved:
    """A single branch was chosen without asking the user."""

    branch: str
    via_alias: bool = False


@dataclass(frozen=True)
class NeedsInteractiveChoice:
    """Candidates are too close to call; the user must pick (best first)."""

    candidates: tuple[ScoredBranch, ...]


Selection = Union[Resolved, NeedsInteractiveChoice]


def combined_score(
    fuzzy: float, frecency: float, multiplier: float = FRECENCY_MULTIPLIER
) -> float:
    return fuzzy + frecency * multiplier


def fuse_scores(
    matches: Sequence[MatchResult],
    records: Iterable[UsageRecord],
    *,
    fuzzy: bool,
    now: int | float | None = None,
    half_life_seconds: float = DEFAULT_HALF_LIFE_SECONDS,
    multiplier: float = FRECENCY_MULTIPLIER,
) -> list[ScoredBranch]:
    """Rank matched branches, best first.

    Ties keep the order of *matches*.
    """
    records = list(records)
    if not fuzzy:
        return sort_by_frecency(
            [m.name for m in matches],
            records,
            now=now,
            half_life_seconds=half_life_seconds,
        )

    by_name = {r.branch_name: r for r in reversed(records)}
    frecency = frecency_map(records, now=now, half_life_seconds=half_life_seconds)
    ranked = []
    for m in matches:
        record = by_name.get(m.name)
        ranked.append(
            ScoredBranch(
                name=m.name,
                score=combined_score(m.score, frecency.get(m.name, 0.0), multiplier),
                switch_count=record.switch_count if record else None,
                last_used=record.last_used if record else None,
            )
        )
    ranked.sort(key=lambda s: s.score, reverse=True)
    return ranked


def select_branch(
    ranked: Sequence[ScoredBranch],
    *,
    pattern: str = "",
    fuzzy: bool = True,
    force_interactive: bool = False,
    threshold: float = DEFAULT_AUTO_SELECT_THRESHOLD,
) -> Selection:
    """Decide between auto-selecting the top candidate and asking the user.

    Auto-selects when there is exactly one candidate, when the runner-up
    scores zero, or when top / second >= *threshold*.

    Raises:
        NoMatchingBranchesError: If *ranked* is empty.
    """
    if not ranked:
        raise NoMatchingBranchesError(pattern, fuzzy=fuzzy)
    if len(ranked) == 1:
        return Resolved(ranked[0].name)
    if force_interactive:
        return NeedsInteractiveChoice(tuple(ranked))

    top, second = ranked[0].score, ranked[1].score
    if second == 0 or top / second >= threshold:
        return Resolved(ranked[0].name)
    return NeedsInteractiveChoice(tuple(ranked))
