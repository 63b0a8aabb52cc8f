"""Frecency scoring: usage frequency weighted by exponential recency decay.

    score = switch_count * 2 ** (-(now - last_used) / half_life)

A record's weight is 1.0 when just used, 0.5 one half-life later,
0.25 two half-lives later, and so on.
"""

from __future__ import annotations

import time
from typing import Iterable, Sequence

from ggo.constants import (
    DAY_SECONDS,
    DEFAULT_HALF_LIFE_SECONDS,
    HOUR_SECONDS,
    MONTH_SECONDS,
    WEEK_SECONDS,
)
from ggo.models.records import ScoredBranch, UsageRecord


def score(
    switch_count: int,
    last_used: int | float,
    now: int | float,
    half_life_seconds: float = DEFAULT_HALF_LIFE_SECONDS,
) -> float:
    """Time-decayed frecency score.

    Ages in the future (clock skew) are clamped to zero.
    """
    if half_life_seconds <= 0:
        raise ValueError("half_life_seconds must be > 0")
    if switch_count <= 0:
        return 0.0
    age = max(0.0, float(now) - float(last_used))
    return switch_count * 2.0 ** (-age / half_life_seconds)


def score_record(
    record: UsageRecord,
    now: int | float | None = None,
    half_life_seconds: float = DEFAULT_HALF_LIFE_SECONDS,
) -> float:
    if now is None:
        now = time.time()
    return score(record.switch_count, record.last_used, now, half_life_seconds)


def rank_branches(
    records: Iterable[UsageRecord],
    *,
    now: int | float | None = None,
    half_life_seconds: float = DEFAULT_HALF_LIFE_SECONDS,
) -> list[ScoredBranch]:
    """Score records and sort them best first. Ties keep input order."""
    if now is None:
        now = time.time()
    scored = [
        ScoredBranch(
            name=r.branch_name,
            score=score(r.switch_count, r.last_used, now, half_life_seconds),
            switch_count=r.switch_count,
            last_used=r.last_used,
        )
        for r in records
    ]
    scored.sort(key=lambda s: s.score, reverse=True)
    return scored


def frecency_map(
    records: Iterable[UsageRecord],
    *,
    now: int | float | None = None,
    half_life_seconds: float = DEFAULT_HALF_LIFE_SECONDS,
) -> dict[str, float]:
    """Branch name -> frecency score. The first record for a name wins."""
    if now is None:
        now = time.time()
    scores: dict[str, float] = {}
    for r in records:
        scores.setdefault(r.branch_name, score(r.switch_count, r.last_used, now, half_life_seconds))
    return scores


def sort_by_frecency(
    names: Sequence[str],
    records: Iterable[UsageRecord],
    *,
    now: int | float | None = None,
    half_life_seconds: float = DEFAULT_HALF_LIFE_SECONDS,
) -> list[ScoredBranch]:
    """Score every name (0 when never used) and sort best first.

    Never-used names keep their input order at the end.
    """
    records = list(records)
    by_name = {r.branch_name: r for r in reversed(records)}
    scores = frecency_map(records, now=now, half_life_seconds=half_life_seconds)
    result = []
    for name in names:
        record = by_name.get(name)
        result.append(
            ScoredBranch(
                name=name,
                score=scores.get(name, 0.0),
                switch_count=record.switch_count if record else None,
                last_used=record.last_used if record else None,
            )
        )
    result.sort(key=lambda s: s.score, reverse=True)
    return result


def format_relative_time(timestamp: int, now: int | None = None) -> str:
    """Render an epoch timestamp as '5m ago', '3h ago', '2w ago', ..."""
    if now is None:
        now = int(time.time())
    age = now - timestamp

    if age < 60:
        return "just now"
    if age < HOUR_SECONDS:
        return f"{age // 60}m ago"
    if age < DAY_SECONDS:
        return f"{age // HOUR_SECONDS}h ago"
    if age < WEEK_SECONDS:
        return f"{age // DAY_SECONDS}d ago"
    if age < MONTH_SECONDS:
        return f"{age // WEEK_SECONDS}w ago"
    return f"{age // MONTH_SECONDS}mo ago"
