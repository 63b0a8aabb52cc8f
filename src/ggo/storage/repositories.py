"""Abstract repository interfaces for ggo storage.

Defines ABC interfaces for all database operations. No SQLAlchemy
imports here -- pure abstract contracts.

Concrete implementations are in sqlite.py.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from ggo.storage.schema import AliasRow, BranchUsageRow, PreviousBranchRow


class UsageRepository(ABC):
    """Abstract interface for branch usage counters."""

    @abstractmethod
    def record_checkout(self, repo_path: str, branch_name: str, now: int) -> None:
        """Insert with switch_count=1, or increment switch_count and set last_used."""
        ...

    @abstractmethod
    def get(self, repo_path: str, branch_name: str) -> BranchUsageRow | None:
        """Get a single usage row. Returns None if the branch was never recorded."""
        ...

    @abstractmethod
    def get_for_repo(self, repo_path: str) -> Sequence[BranchUsageRow]:
        """Get all usage rows for a repository, most recently used first."""
        ...

    @abstractmethod
    def get_all(self) -> Sequence[BranchUsageRow]:
        """Get usage rows across every repository, most recently used first."""
        ...

    @abstractmethod
    def delete(self, repo_path: str, branch_name: str) -> int:
        """Delete one usage row. Returns the number of rows removed."""
        ...

    @abstractmethod
    def delete_repo(self, repo_path: str) -> int:
        """Delete every usage row of a repository. Returns rows removed."""
        ...

    @abstractmethod
    def delete_older_than(self, cutoff: int) -> int:
        """Delete rows whose last_used is strictly before *cutoff*."""
        ...

    @abstractmethod
    def totals(self) -> tuple[int, int, int]:
        """Return (total switches, unique branch rows, unique repositories)."""
        ...


class PreviousBranchRepository(ABC):
    """Abstract interface for the per-repository previous-branch pointer."""

    @abstractmethod
    def save(self, repo_path: str, branch_name: str, now: int) -> None:
        """Replace the pointer for *repo_path*."""
        ...

    @abstractmethod
    def get(self, repo_path: str) -> PreviousBranchRow | None:
        """Get the pointer, or None if nothing was saved yet."""
        ...

    @abstractmethod
    def delete_repo(self, repo_path: str) -> int:
        """Remove the pointer of a repository. Returns rows removed."""
        ...


class AliasRepository(ABC):
    """Abstract interface for repository-scoped aliases.

    Every lookup is keyed by (repo_path, alias); no method resolves
    across repositories.
    """

    @abstractmethod
    def upsert(self, repo_path: str, alias: str, branch_name: str, now: int) -> None:
        """Create the alias or repoint an existing one."""
        ...

    @abstractmethod
    def get(self, repo_path: str, alias: str) -> AliasRow | None:
        """Get an alias in this repository, or None."""
        ...

    @abstractmethod
    def delete(self, repo_path: str, alias: str) -> bool:
        """Delete an alias. Returns True if a row was removed."""
        ...

    @abstractmethod
    def list_for_repo(self, repo_path: str) -> Sequence[AliasRow]:
        """All aliases of a repository, sorted by alias name."""
        ...

    @abstractmethod
    def aliases_for_branch(self, repo_path: str, branch_name: str) -> Sequence[str]:
        """Alias names pointing at *branch_name*, sorted."""
        ...

    @abstractmethod
    def delete_for_branch(self, repo_path: str, branch_name: str) -> int:
        """Delete every alias pointing at *branch_name*. Returns rows removed."""
        ...

    @abstractmethod
    def delete_repo(self, repo_path: str) -> int:
        """Delete every alias of a repository. Returns rows removed."""
        ...
