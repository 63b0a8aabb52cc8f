"""Maintenance operations layered on the usage store.

Age-based pruning, existence-based pruning against git, compaction
(VACUUM + ANALYZE) and on-disk size reporting.
"""

from __future__ import annotations

import logging
import os
from collections import defaultdict
from typing import TYPE_CHECKING

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ggo.constants import DAY_SECONDS
from ggo.exceptions import StorageError

if TYPE_CHECKING:
    from ggo.protocols import GitBackend
    from ggo.store import UsageStore

logger = logging.getLogger(__name__)


def cleanup_old_records(store: UsageStore, max_age_days: int) -> int:
    """Delete usage records not used within *max_age_days*.

    Returns:
        Number of records removed.
    """
    if max_age_days < 0:
        raise ValueError("max_age_days must be >= 0")
    cutoff = store.now() - max_age_days * DAY_SECONDS
    with store.transaction() as (usage, _aliases, _previous):
        removed = usage.delete_older_than(cutoff)
    logger.info("Removed %d records unused for %d days", removed, max_age_days)
    return removed


def cleanup_deleted_branches(store: UsageStore, git: GitBackend) -> int:
    """Delete records (and aliases) of branches that no longer exist.

    A repository *git* no longer recognises has all of its records,
    aliases and its previous-branch pointer removed at once. Otherwise
    each branch is checked individually.

    Returns:
        Number of usage records removed.
    """
    by_repo: dict[str, list[str]] = defaultdict(list)
    for record in store.get_all_records():
        by_repo[record.repo_path].append(record.branch_name)

    removed = 0
    with store.transaction() as (usage, aliases, previous):
        for repo_path, branches in by_repo.items():
            if not git.repository_exists(repo_path):
                count = usage.delete_repo(repo_path)
                alias_count = aliases.delete_repo(repo_path)
                previous.delete_repo(repo_path)
                logger.info(
                    "Repository %s is gone: removed %d records and %d aliases",
                    repo_path, count, alias_count,
                )
                removed += count
                continue

            for branch_name in branches:
                if git.branch_exists(repo_path, branch_name):
                    continue
                removed += usage.delete(repo_path, branch_name)
                aliases.delete_for_branch(repo_path, branch_name)
                logger.debug("Removed stale branch %s in %s", branch_name, repo_path)

    return removed


def optimize_database(store: UsageStore) -> None:
    """Reclaim free pages and refresh query-planner statistics."""
    try:
        with store.engine.connect() as conn:
            conn = conn.execution_options(isolation_level="AUTOCOMMIT")
            conn.execute(text("VACUUM"))
            conn.execute(text("ANALYZE"))
    except SQLAlchemyError as exc:
        raise StorageError(exc) from exc


def database_size(store: UsageStore) -> int:
    """Size in bytes of the database file (plus its WAL, when present).

    In-memory stores report page_count * page_size.
    """
    if store.db_path is None:
        try:
            with store.engine.connect() as conn:
                pages = conn.execute(text("PRAGMA page_count")).scalar() or 0
                page_size = conn.execute(text("PRAGMA page_size")).scalar() or 0
        except SQLAlchemyError as exc:
            raise StorageError(exc) from exc
        return int(pages) * int(page_size)

    size = 0
    for suffix in ("", "-wal"):
        candidate = f"{store.db_path}{suffix}"
        try:
            size += os.path.getsize(candidate)
        except FileNotFoundError:
            continue
        except OSError as exc:
            raise StorageError(exc) from exc
    return size
