"""Navigator -- the operations the CLI drives.

Ties together the usage store, the git collaborator, matching, fusion
and selection. Reads never mutate; the switch flow writes telemetry
only after deciding, and a telemetry failure never fails a checkout
that already happened.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from ggo.aliases import AliasResolver
from ggo.exceptions import (
    AliasNotFoundError,
    BranchNotFoundError,
    GgoError,
    NoPreviousBranchError,
    StorageError,
)
from ggo.frecency import score_record
from ggo.matcher import get_matcher
from ggo.models.config import GgoConfig
from ggo.models.records import AliasInfo, DatabaseStats, ScoredBranch, UsageRecord
from ggo.selection import NeedsInteractiveChoice, Resolved, Selection, fuse_scores, select_branch
from ggo.validation import (
    validate_alias_name,
    validate_branch_name,
    validate_pattern,
    validate_repo_path,
)

if TYPE_CHECKING:
    from ggo.protocols import BranchPicker, GitBackend
    from ggo.store import UsageStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SwitchResult:
    """Outcome of a completed checkout."""

    branch: str
    previous: str | None
    via_alias: bool = False

    @property
    def changed(self) -> bool:
        return self.previous != self.branch


@dataclass(frozen=True)
class StatsReport:
    stats: DatabaseStats
    top: list[tuple[UsageRecord, float]]


class Navigator:
    """Resolves patterns to branches and performs checkouts.

    Args:
        store: Open usage store.
        git: Git collaborator for the current repository.
        config: Ranking configuration. Defaults to ``GgoConfig()``.
        picker: Called when candidates are too close to auto-select.
    """

    def __init__(
        self,
        store: UsageStore,
        git: GitBackend,
        config: GgoConfig | None = None,
        picker: BranchPicker | None = None,
    ) -> None:
        self._store = store
        self._git = git
        self._config = config or GgoConfig()
        self._picker = picker
        self._aliases = AliasResolver(store, git)

    @property
    def config(self) -> GgoConfig:
        return self._config

    @property
    def store(self) -> UsageStore:
        return self._store

    @property
    def git(self) -> GitBackend:
        return self._git

    # ------------------------------------------------------------------
    # Read-only
    # ------------------------------------------------------------------

    def _repo_root(self) -> str:
        repo_path = self._git.repository_root()
        validate_repo_path(repo_path)
        return repo_path

    def _records(self, repo_path: str) -> list[UsageRecord]:
        try:
            return self._store.get_records(repo_path)
        except StorageError as exc:
            logger.warning("Could not load usage history, ranking without it: %s", exc)
            return []

    def _defaults(
        self, ignore_case: bool | None, use_fuzzy: bool | None
    ) -> tuple[bool, bool]:
        behavior = self._config.behavior
        if ignore_case is None:
            ignore_case = behavior.default_ignore_case
        if use_fuzzy is None:
            use_fuzzy = behavior.default_fuzzy
        return ignore_case, use_fuzzy

    def list_matches(
        self,
        pattern: str,
        *,
        ignore_case: bool | None = None,
        use_fuzzy: bool | None = None,
    ) -> list[ScoredBranch]:
        """Ranked candidates for *pattern*, best first. No side effects."""
        validate_pattern(pattern)
        ignore_case, use_fuzzy = self._defaults(ignore_case, use_fuzzy)
        repo_path = self._repo_root()
        return self._rank(repo_path, pattern, ignore_case, use_fuzzy)

    def _rank(
        self, repo_path: str, pattern: str, ignore_case: bool, use_fuzzy: bool
    ) -> list[ScoredBranch]:
        branches = self._git.list_local_branches()
        matches = get_matcher(use_fuzzy).match(branches, pattern, ignore_case)
        return fuse_scores(
            matches,
            self._records(repo_path),
            fuzzy=use_fuzzy,
            now=self._store.now(),
            half_life_seconds=self._config.frecency.half_life_seconds,
        )

    def resolve(
        self,
        pattern: str,
        *,
        ignore_case: bool | None = None,
        use_fuzzy: bool | None = None,
        force_interactive: bool = False,
    ) -> Selection:
        """Resolve *pattern* to a branch or to a set of candidates to choose from.

        An alias defined in this repository wins over pattern matching.

        Raises:
            InvalidNameError: If the pattern is invalid.
            NoMatchingBranchesError: If nothing matches.
        """
        validate_pattern(pattern)
        ignore_case, use_fuzzy = self._defaults(ignore_case, use_fuzzy)
        repo_path = self._repo_root()

        target = self._aliases.resolve(repo_path, pattern)
        if target is not None:
            return Resolved(target, via_alias=True)

        ranked = self._rank(repo_path, pattern, ignore_case, use_fuzzy)
        return select_branch(
            ranked,
            pattern=pattern,
            fuzzy=use_fuzzy,
            force_interactive=force_interactive,
            threshold=self._config.behavior.auto_select_threshold,
        )

    def stats(self, limit: int = 10) -> StatsReport:
        """Global totals plus the top *limit* branches by frecency across repos."""
        now = self._store.now()
        half_life = self._config.frecency.half_life_seconds
        scored = [
            (record, score_record(record, now, half_life))
            for record in self._store.get_all_records()
        ]
        scored.sort(key=lambda pair: pair[1], reverse=True)
        return StatsReport(stats=self._store.get_stats(), top=scored[:limit])

    # ------------------------------------------------------------------
    # Telemetry
    # ------------------------------------------------------------------

    def _telemetry(self, what: str, write: Callable[[], None]) -> bool:
        try:
            write()
        except StorageError as exc:
            logger.warning("Failed to %s: %s", what, exc)
            return False
        return True

    def record_checkout_outcome(self, repo_path: str, branch_name: str) -> bool:
        """Count a successful checkout. Failures are logged, never raised."""
        return self._telemetry(
            "record branch usage",
            lambda: self._store.record_checkout(repo_path, branch_name),
        )

    # ------------------------------------------------------------------
    # Checkout
    # ------------------------------------------------------------------

    def _current_branch(self) -> str | None:
        try:
            return self._git.current_branch()
        except GgoError as exc:
            logger.debug("No current branch: %s", exc)
            return None

    def _checkout(self, repo_path: str, branch_name: str, *, via_alias: bool = False) -> SwitchResult:
        if not self._git.branch_exists(repo_path, branch_name):
            raise BranchNotFoundError(branch_name)

        current = self._current_branch()
        self._git.checkout(branch_name)

        self.record_checkout_outcome(repo_path, branch_name)
        if current is not None and current != branch_name:
            self._telemetry(
                "save previous branch",
                lambda: self._store.save_previous_branch(repo_path, current),
            )
        logger.info("Switched to %s", branch_name)
        return SwitchResult(branch=branch_name, previous=current, via_alias=via_alias)

    def switch(
        self,
        pattern: str,
        *,
        ignore_case: bool | None = None,
        use_fuzzy: bool | None = None,
        force_interactive: bool = False,
    ) -> SwitchResult:
        """Resolve *pattern* and check out the chosen branch.

        Raises:
            NoMatchingBranchesError: If nothing matches.
            UserCancelledError: If the picker was cancelled.
            BranchNotFoundError: If the branch vanished before checkout.
            CheckoutFailedError: If git refused the checkout.
        """
        selection = self.resolve(
            pattern,
            ignore_case=ignore_case,
            use_fuzzy=use_fuzzy,
            force_interactive=force_interactive,
        )
        repo_path = self._repo_root()

        if isinstance(selection, NeedsInteractiveChoice):
            branch = self.choose(repo_path, selection)
            return self._checkout(repo_path, branch)
        return self._checkout(repo_path, selection.branch, via_alias=selection.via_alias)

    def choose(self, repo_path: str, selection: NeedsInteractiveChoice) -> str:
        """Hand close candidates to the picker. Without one, take the top."""
        if self._picker is None:
            logger.debug("No picker configured, taking top candidate")
            return selection.candidates[0].name
        return self._picker(selection.candidates, self._records(repo_path))

    def checkout_previous(self) -> SwitchResult:
        """Go back to the branch checked out before the last switch.

        Raises:
            NoPreviousBranchError: If no switch has been recorded here.
            BranchNotFoundError: If that branch no longer exists.
        """
        repo_path = self._repo_root()
        previous = self._store.get_previous_branch(repo_path)
        if previous is None:
            raise NoPreviousBranchError()
        return self._checkout(repo_path, previous)

    # ------------------------------------------------------------------
    # Aliases
    # ------------------------------------------------------------------

    def create_alias(self, alias: str, branch_name: str) -> None:
        """Create or repoint *alias* to an existing local branch."""
        validate_alias_name(alias)
        validate_branch_name(branch_name)
        repo_path = self._repo_root()
        if branch_name not in self._git.list_local_branches():
            raise BranchNotFoundError(branch_name)
        self._store.create_alias(repo_path, alias, branch_name)
        logger.info("Alias %s -> %s", alias, branch_name)

    def show_alias(self, alias: str) -> str:
        target = self._store.get_alias(self._repo_root(), alias)
        if target is None:
            raise AliasNotFoundError(alias)
        return target

    def remove_alias(self, alias: str) -> None:
        if not self._store.delete_alias(self._repo_root(), alias):
            raise AliasNotFoundError(alias)

    def list_aliases(self) -> list[AliasInfo]:
        return self._store.list_aliases(self._repo_root())

    def aliases_for_branch(self, branch_name: str) -> list[str]:
        return self._store.get_aliases_for_branch(self._repo_root(), branch_name)
