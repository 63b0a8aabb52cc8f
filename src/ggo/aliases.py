"""Repository-scoped alias resolution.

An alias only exists inside the repository it was created in. When an
alias points at a branch that has since disappeared, resolution warns
and reports a miss so the caller falls back to pattern matching.
"""

from __future__ import annotations

import logging
import warnings
from typing import TYPE_CHECKING

from ggo.exceptions import AliasStaleWarning

if TYPE_CHECKING:
    from ggo.protocols import GitBackend
    from ggo.store import UsageStore

logger = logging.getLogger(__name__)


class AliasResolver:
    def __init__(self, store: UsageStore, git: GitBackend) -> None:
        self._store = store
        self._git = git

    def resolve(self, repo_path: str, pattern: str) -> str | None:
        """Branch the alias *pattern* names in *repo_path*, or None.

        The live branch list is fetched on every call.
        """
        if not pattern:
            return None
        target = self._store.get_alias(repo_path, pattern)
        if target is None:
            return None

        if target in self._git.list_local_branches():
            logger.debug("Alias %s -> %s in %s", pattern, target, repo_path)
            return target

        logger.info("Alias %s points to missing branch %s", pattern, target)
        warnings.warn(AliasStaleWarning(pattern, target), stacklevel=2)
        return None
