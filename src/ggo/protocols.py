"""Protocol definitions for ggo.

Defines the pluggable interfaces the ranking engine consumes:
the git collaborator and the interactive picker.

No SQLAlchemy imports allowed in this module -- pure domain protocols.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from ggo.models.records import ScoredBranch, UsageRecord


@runtime_checkable
class GitBackend(Protocol):
    """The version-control operations ggo relies on.

    Implementations raise NotARepositoryError outside a repository and
    CheckoutFailedError when a checkout is refused.
    """

    def list_local_branches(self) -> list[str]:
        """Names of all local branches of the current repository."""
        ...

    def current_branch(self) -> str:
        """Name of the checked-out branch. Raises GgoError when HEAD is detached."""
        ...

    def checkout(self, branch_name: str) -> None:
        """Check out *branch_name*."""
        ...

    def repository_root(self) -> str:
        """Absolute path of the current repository root."""
        ...

    def repository_exists(self, repo_path: str) -> bool:
        """Whether *repo_path* is still a git repository."""
        ...

    def branch_exists(self, repo_path: str, branch_name: str) -> bool:
        """Whether *branch_name* exists in the repository at *repo_path*."""
        ...


class BranchPicker(Protocol):
    """Lets the user choose among close candidates.

    Receives the full ranked list (best first) and the repository's usage
    records for display. Returns the chosen branch name or raises
    UserCancelledError.
    """

    def __call__(
        self,
        candidates: Sequence[ScoredBranch],
        records: Sequence[UsageRecord],
    ) -> str:
        ...
