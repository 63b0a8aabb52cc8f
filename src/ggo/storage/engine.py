"""Engine, session factory and schema migrations for ggo storage.

Provides SQLite engine creation with pragmas, session factory creation,
and the forward-only migration runner.

Migrations are an ordered tuple of ``Migration`` descriptors. On open,
the highest version recorded in the ``schema_version`` ledger is read
(0 for an empty ledger) and every step above it is applied in ascending
order. Each step commits its own ledger row, so an interrupted run
resumes from exactly the steps that landed.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from sqlalchemy import Connection, Engine, create_engine, event, text
from sqlalchemy.orm import Session, sessionmaker

from ggo.exceptions import MigrationError

logger = logging.getLogger(__name__)


def create_ggo_engine(db_path: str = ":memory:") -> Engine:
    """Create a SQLAlchemy engine for the usage database.

    Args:
        db_path: Path to the SQLite database file, or ``":memory:"``.

    Returns:
        Configured SQLAlchemy Engine.
    """
    if db_path == ":memory:":
        engine = create_engine("sqlite://", echo=False)
    else:
        engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):  # type: ignore[no-untyped-def]
        cursor = dbapi_conn.cursor()
        if db_path != ":memory:":
            cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA busy_timeout=5000")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.close()

    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a session factory bound to the given engine.

    Uses expire_on_commit=False so rows stay readable after commit.
    """
    return sessionmaker(bind=engine, expire_on_commit=False)


# ---------------------------------------------------------------------------
# Migrations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Migration:
    """One forward-only schema step."""

    version: int
    description: str
    apply: Callable[[Connection], None]


def _v1_branches(conn: Connection) -> None:
    conn.execute(text("""
        CREATE TABLE IF NOT EXISTS branches (
            id INTEGER PRIMARY KEY,
            repo_path TEXT NOT NULL,
            branch_name VARCHAR(255) NOT NULL,
            switch_count INTEGER NOT NULL DEFAULT 1,
            last_used INTEGER NOT NULL,
            CONSTRAINT uq_branches_repo_branch UNIQUE (repo_path, branch_name)
        )
    """))


def _v2_aliases(conn: Connection) -> None:
    conn.execute(text("""
        CREATE TABLE IF NOT EXISTS aliases (
            repo_path TEXT NOT NULL,
            alias VARCHAR(50) NOT NULL,
            branch_name VARCHAR(255) NOT NULL,
            created_at INTEGER NOT NULL,
            PRIMARY KEY (repo_path, alias)
        )
    """))


def _v3_previous_branch(conn: Connection) -> None:
    conn.execute(text("""
        CREATE TABLE IF NOT EXISTS previous_branch (
            repo_path TEXT PRIMARY KEY,
            branch_name VARCHAR(255) NOT NULL,
            updated_at INTEGER NOT NULL
        )
    """))


def _v4_lookup_indices(conn: Connection) -> None:
    conn.execute(text(
        "CREATE INDEX IF NOT EXISTS ix_branches_repo_last_used "
        "ON branches (repo_path, last_used)"
    ))
    conn.execute(text(
        "CREATE INDEX IF NOT EXISTS ix_aliases_repo_branch "
        "ON aliases (repo_path, branch_name)"
    ))


MIGRATIONS: tuple[Migration, ...] = (
    Migration(1, "create branches table", _v1_branches),
    Migration(2, "create aliases table", _v2_aliases),
    Migration(3, "create previous_branch table", _v3_previous_branch),
    Migration(4, "add repo lookup indices", _v4_lookup_indices),
)

CURRENT_SCHEMA_VERSION: int = MIGRATIONS[-1].version


def _ensure_ledger(conn: Connection) -> None:
    conn.execute(text("""
        CREATE TABLE IF NOT EXISTS schema_version (
            version INTEGER PRIMARY KEY,
            applied_at INTEGER NOT NULL
        )
    """))


def get_schema_version(engine: Engine) -> int:
    """Return the highest applied migration version (0 for a fresh database)."""
    with engine.begin() as conn:
        _ensure_ledger(conn)
        current = conn.execute(text("SELECT MAX(version) FROM schema_version")).scalar()
    return int(current or 0)


def applied_versions(engine: Engine) -> list[int]:
    """Return every version recorded in the ledger, ascending."""
    with engine.connect() as conn:
        rows = conn.execute(
            text("SELECT version FROM schema_version ORDER BY version")
        ).fetchall()
    return [int(r[0]) for r in rows]


def init_db(
    engine: Engine,
    *,
    migrations: tuple[Migration, ...] = MIGRATIONS,
    clock: Callable[[], int] | None = None,
) -> int:
    """Bring the database up to the latest schema version.

    Reads the ledger, then applies every migration with a version greater
    than the recorded maximum, ascending. Each step runs in its own
    transaction together with its ledger row.

    Databases written before the ledger existed (tables present, ledger
    empty) are adopted: every step uses ``IF NOT EXISTS`` DDL.

    Returns:
        The schema version after migration.

    Raises:
        MigrationError: If any step fails. The database must not be used.
    """
    now = clock or (lambda: int(time.time()))
    current = get_schema_version(engine)

    for migration in sorted(migrations, key=lambda m: m.version):
        if migration.version <= current:
            continue
        if migration.version != current + 1:
            raise MigrationError(
                migration.version,
                f"missing migration for version {current + 1}",
            )
        logger.info(
            "Applying schema migration v%d: %s", migration.version, migration.description
        )
        try:
            with engine.begin() as conn:
                migration.apply(conn)
                conn.execute(
                    text(
                        "INSERT INTO schema_version (version, applied_at) "
                        "VALUES (:version, :applied_at)"
                    ),
                    {"version": migration.version, "applied_at": now()},
                )
        except Exception as exc:
            raise MigrationError(migration.version, exc) from exc
        current = migration.version

    return current
