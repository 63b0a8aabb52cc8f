"""Domain value types for ggo.

These are the SDK-facing shapes returned by the usage store and the
ranking engine. No SQLAlchemy imports here.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class UsageRecord:
    """How often and how recently a branch was checked out in a repository."""

    repo_path: str
    branch_name: str
    switch_count: int
    last_used: int  # epoch seconds


@dataclass(frozen=True)
class AliasInfo:
    """A repository-scoped nickname for a branch."""

    repo_path: str
    alias: str
    branch_name: str
    created_at: int  # epoch seconds


@dataclass(frozen=True)
class ScoredBranch:
    """A branch name paired with its ranking score.

    ``switch_count`` and ``last_used`` are None for branches that have
    never been checked out through ggo.
    """

    name: str
    score: float
    switch_count: Optional[int] = None
    last_used: Optional[int] = None


@dataclass(frozen=True)
class DatabaseStats:
    """Global usage statistics across every repository."""

    total_switches: int
    unique_branches: int
    unique_repos: int
    db_path: Optional[Path]
