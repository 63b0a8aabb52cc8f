"""UsageStore -- the explicit handle to ggo's usage database.

One store is opened per invocation and passed by reference to every
component that needs history, aliases or the previous-branch pointer.
Nothing else touches the tables.

Every SQLAlchemy failure is surfaced as ``StorageError`` carrying the
underlying exception; migration failures surface as ``MigrationError``
from ``UsageStore.open``.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Iterator, TypeVar

from sqlalchemy import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ggo.exceptions import StorageError
from ggo.models.records import AliasInfo, DatabaseStats, UsageRecord
from ggo.storage.engine import create_ggo_engine, create_session_factory, init_db
from ggo.storage.sqlite import (
    SqliteAliasRepository,
    SqlitePreviousBranchRepository,
    SqliteUsageRepository,
)

if TYPE_CHECKING:
    from ggo.protocols import GitBackend
    from ggo.storage.schema import AliasRow, BranchUsageRow

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _to_record(row: BranchUsageRow) -> UsageRecord:
    return UsageRecord(
        repo_path=row.repo_path,
        branch_name=row.branch_name,
        switch_count=row.switch_count,
        last_used=row.last_used,
    )


def _to_alias(row: AliasRow) -> AliasInfo:
    return AliasInfo(
        repo_path=row.repo_path,
        alias=row.alias,
        branch_name=row.branch_name,
        created_at=row.created_at,
    )


class UsageStore:
    """Durable, versioned store of usage counters, aliases and the back pointer.

    Use :meth:`open` rather than constructing directly.
    """

    def __init__(
        self,
        *,
        engine: Engine,
        session: Session,
        db_path: Path | None,
        clock: Callable[[], int],
        schema_version: int,
    ) -> None:
        self._engine = engine
        self._session = session
        self._db_path = db_path
        self._clock = clock
        self._schema_version = schema_version
        self._closed = False

        self._usage = SqliteUsageRepository(session)
        self._previous = SqlitePreviousBranchRepository(session)
        self._aliases = SqliteAliasRepository(session)

    @classmethod
    def open(
        cls,
        path: str | Path = ":memory:",
        *,
        clock: Callable[[], int] | None = None,
    ) -> UsageStore:
        """Open (or create) the usage database and migrate it to the latest schema.

        Args:
            path: SQLite file path, or ``":memory:"``.
            clock: Returns "now" as epoch seconds. Defaults to wall-clock time.

        Raises:
            MigrationError: If the schema cannot be brought up to date.
            StorageError: If the database cannot be opened.
        """
        now = clock or (lambda: int(time.time()))
        db_path: Path | None = None
        if str(path) != ":memory:":
            db_path = Path(path)
            try:
                db_path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise StorageError(exc) from exc

        engine = create_ggo_engine(str(db_path) if db_path else ":memory:")
        try:
            version = init_db(engine, clock=now)
        except SQLAlchemyError as exc:
            engine.dispose()
            raise StorageError(exc) from exc
        except Exception:
            engine.dispose()
            raise

        session = create_session_factory(engine)()
        logger.debug("Opened usage store at %s (schema v%d)", db_path or ":memory:", version)
        return cls(
            engine=engine,
            session=session,
            db_path=db_path,
            clock=now,
            schema_version=version,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def db_path(self) -> Path | None:
        return self._db_path

    @property
    def schema_version(self) -> int:
        return self._schema_version

    def now(self) -> int:
        return self._clock()

    def _read(self, fn: Callable[[], T]) -> T:
        """Run a query and end its transaction so no lock outlives the call."""
        try:
            result = fn()
            self._session.commit()
            return result
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise StorageError(exc) from exc

    @contextmanager
    def _write(self) -> Iterator[None]:
        """Run a mutation and commit it; roll back and wrap on failure."""
        try:
            yield
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise StorageError(exc) from exc
        except BaseException:
            self._session.rollback()
            raise

    # ------------------------------------------------------------------
    # Usage records
    # ------------------------------------------------------------------

    def record_checkout(self, repo_path: str, branch_name: str) -> None:
        """Insert a usage record with count 1, or bump count and last-used time."""
        with self._write():
            self._usage.record_checkout(repo_path, branch_name, self._clock())
        logger.debug("Recorded checkout of %s in %s", branch_name, repo_path)

    def get_record(self, repo_path: str, branch_name: str) -> UsageRecord | None:
        row = self._read(lambda: self._usage.get(repo_path, branch_name))
        return _to_record(row) if row is not None else None

    def get_records(self, repo_path: str) -> list[UsageRecord]:
        """Usage records of one repository, most recently used first."""
        rows = self._read(lambda: self._usage.get_for_repo(repo_path))
        return [_to_record(r) for r in rows]

    def get_all_records(self) -> list[UsageRecord]:
        """Usage records of every repository, most recently used first."""
        rows = self._read(self._usage.get_all)
        return [_to_record(r) for r in rows]

    def get_stats(self) -> DatabaseStats:
        total, branches, repos = self._read(self._usage.totals)
        return DatabaseStats(
            total_switches=total,
            unique_branches=branches,
            unique_repos=repos,
            db_path=self._db_path,
        )

    # ------------------------------------------------------------------
    # Previous-branch pointer
    # ------------------------------------------------------------------

    def save_previous_branch(self, repo_path: str, branch_name: str) -> None:
        with self._write():
            self._previous.save(repo_path, branch_name, self._clock())

    def get_previous_branch(self, repo_path: str) -> str | None:
        row = self._read(lambda: self._previous.get(repo_path))
        return row.branch_name if row is not None else None

    # ------------------------------------------------------------------
    # Aliases
    # ------------------------------------------------------------------

    def create_alias(self, repo_path: str, alias: str, branch_name: str) -> None:
        """Create *alias* in this repository, or repoint it if it already exists."""
        with self._write():
            self._aliases.upsert(repo_path, alias, branch_name, self._clock())

    def get_alias(self, repo_path: str, alias: str) -> str | None:
        row = self._read(lambda: self._aliases.get(repo_path, alias))
        return row.branch_name if row is not None else None

    def delete_alias(self, repo_path: str, alias: str) -> bool:
        with self._write():
            removed = self._aliases.delete(repo_path, alias)
        return removed

    def list_aliases(self, repo_path: str) -> list[AliasInfo]:
        rows = self._read(lambda: self._aliases.list_for_repo(repo_path))
        return [_to_alias(r) for r in rows]

    def get_aliases_for_branch(self, repo_path: str, branch_name: str) -> list[str]:
        return list(self._read(lambda: self._aliases.aliases_for_branch(repo_path, branch_name)))

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def cleanup_old_records(self, max_age_days: int) -> int:
        from ggo.maintenance import cleanup_old_records

        return cleanup_old_records(self, max_age_days)

    def cleanup_deleted_branches(self, git: GitBackend) -> int:
        from ggo.maintenance import cleanup_deleted_branches

        return cleanup_deleted_branches(self, git)

    def optimize_database(self) -> None:
        from ggo.maintenance import optimize_database

        optimize_database(self)

    def get_database_size(self) -> int:
        from ggo.maintenance import database_size

        return database_size(self)

    @contextmanager
    def transaction(
        self,
    ) -> Iterator[
        tuple[SqliteUsageRepository, SqliteAliasRepository, SqlitePreviousBranchRepository]
    ]:
        """Yield the repositories inside one committed unit of work.

        Used by maintenance for multi-table deletions.
        """
        with self._write():
            yield self._usage, self._aliases, self._previous

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the session and dispose the engine."""
        if self._closed:
            return
        self._closed = True
        self._session.close()
        self._engine.dispose()

    def __enter__(self) -> UsageStore:
        return self

    def __exit__(self, exc_type: type | None, exc_val: BaseException | None, exc_tb: object) -> None:
        self.close()

    def __repr__(self) -> str:
        location = self._db_path or ":memory:"
        if self._closed:
            return f"UsageStore(path='{location}', closed=True)"
        return f"UsageStore(path='{location}', schema_version={self._schema_version})"
