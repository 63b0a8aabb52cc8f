"""SQLite implementations of repository interfaces.

All repositories use SQLAlchemy 2.0-style queries (select() + session.execute()).
Upserts go through Core INSERT ... ON CONFLICT, so reads refresh any
identity-mapped rows with populate_existing.
Each repository takes a Session in its constructor; committing is the
caller's job.
"""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from ggo.storage.repositories import (
    AliasRepository,
    PreviousBranchRepository,
    UsageRepository,
)
from ggo.storage.schema import AliasRow, BranchUsageRow, PreviousBranchRow


class SqliteUsageRepository(UsageRepository):
    """SQLite implementation of the usage repository.

    record_checkout is a single INSERT ... ON CONFLICT DO UPDATE so the
    increment is atomic even with another process writing.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def record_checkout(self, repo_path: str, branch_name: str, now: int) -> None:
        stmt = sqlite_insert(BranchUsageRow).values(
            repo_path=repo_path,
            branch_name=branch_name,
            switch_count=1,
            last_used=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[BranchUsageRow.repo_path, BranchUsageRow.branch_name],
            set_={
                "switch_count": BranchUsageRow.switch_count + 1,
                "last_used": stmt.excluded.last_used,
            },
        )
        self._session.execute(stmt)
        self._session.flush()

    def get(self, repo_path: str, branch_name: str) -> BranchUsageRow | None:
        stmt = select(BranchUsageRow).where(
            BranchUsageRow.repo_path == repo_path,
            BranchUsageRow.branch_name == branch_name,
        )
        return self._session.execute(
            stmt.execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def get_for_repo(self, repo_path: str) -> Sequence[BranchUsageRow]:
        stmt = (
            select(BranchUsageRow)
            .where(BranchUsageRow.repo_path == repo_path)
            .order_by(BranchUsageRow.last_used.desc(), BranchUsageRow.id)
        )
        return list(
            self._session.execute(stmt.execution_options(populate_existing=True))
            .scalars()
            .all()
        )

    def get_all(self) -> Sequence[BranchUsageRow]:
        stmt = select(BranchUsageRow).order_by(
            BranchUsageRow.last_used.desc(), BranchUsageRow.id
        )
        return list(
            self._session.execute(stmt.execution_options(populate_existing=True))
            .scalars()
            .all()
        )

    def delete(self, repo_path: str, branch_name: str) -> int:
        stmt = delete(BranchUsageRow).where(
            BranchUsageRow.repo_path == repo_path,
            BranchUsageRow.branch_name == branch_name,
        )
        return self._session.execute(stmt).rowcount or 0

    def delete_repo(self, repo_path: str) -> int:
        stmt = delete(BranchUsageRow).where(BranchUsageRow.repo_path == repo_path)
        return self._session.execute(stmt).rowcount or 0

    def delete_older_than(self, cutoff: int) -> int:
        stmt = delete(BranchUsageRow).where(BranchUsageRow.last_used < cutoff)
        return self._session.execute(stmt).rowcount or 0

    def totals(self) -> tuple[int, int, int]:
        stmt = select(
            func.coalesce(func.sum(BranchUsageRow.switch_count), 0),
            func.count(BranchUsageRow.id),
            func.count(func.distinct(BranchUsageRow.repo_path)),
        )
        total, branches, repos = self._session.execute(stmt).one()
        return int(total), int(branches), int(repos)


class SqlitePreviousBranchRepository(PreviousBranchRepository):
    """SQLite implementation of the previous-branch pointer (replace on write)."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def save(self, repo_path: str, branch_name: str, now: int) -> None:
        stmt = sqlite_insert(PreviousBranchRow).values(
            repo_path=repo_path, branch_name=branch_name, updated_at=now
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[PreviousBranchRow.repo_path],
            set_={
                "branch_name": stmt.excluded.branch_name,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        self._session.execute(stmt)
        self._session.flush()

    def get(self, repo_path: str) -> PreviousBranchRow | None:
        stmt = select(PreviousBranchRow).where(PreviousBranchRow.repo_path == repo_path)
        return self._session.execute(
            stmt.execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def delete_repo(self, repo_path: str) -> int:
        stmt = delete(PreviousBranchRow).where(PreviousBranchRow.repo_path == repo_path)
        return self._session.execute(stmt).rowcount or 0


class SqliteAliasRepository(AliasRepository):
    """SQLite implementation of the alias repository."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def upsert(self, repo_path: str, alias: str, branch_name: str, now: int) -> None:
        stmt = sqlite_insert(AliasRow).values(
            repo_path=repo_path, alias=alias, branch_name=branch_name, created_at=now
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[AliasRow.repo_path, AliasRow.alias],
            set_={
                "branch_name": stmt.excluded.branch_name,
                "created_at": stmt.excluded.created_at,
            },
        )
        self._session.execute(stmt)
        self._session.flush()

    def get(self, repo_path: str, alias: str) -> AliasRow | None:
        stmt = select(AliasRow).where(
            AliasRow.repo_path == repo_path, AliasRow.alias == alias
        )
        return self._session.execute(
            stmt.execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def delete(self, repo_path: str, alias: str) -> bool:
        stmt = delete(AliasRow).where(
            AliasRow.repo_path == repo_path, AliasRow.alias == alias
        )
        return (self._session.execute(stmt).rowcount or 0) > 0

    def list_for_repo(self, repo_path: str) -> Sequence[AliasRow]:
        stmt = (
            select(AliasRow)
            .where(AliasRow.repo_path == repo_path)
            .order_by(AliasRow.alias)
        )
        return list(
            self._session.execute(stmt.execution_options(populate_existing=True))
            .scalars()
            .all()
        )

    def aliases_for_branch(self, repo_path: str, branch_name: str) -> Sequence[str]:
        stmt = (
            select(AliasRow.alias)
            .where(AliasRow.repo_path == repo_path, AliasRow.branch_name == branch_name)
            .order_by(AliasRow.alias)
        )
        return list(
            self._session.execute(stmt.execution_options(populate_existing=True))
            .scalars()
            .all()
        )

    def delete_for_branch(self, repo_path: str, branch_name: str) -> int:
        stmt = delete(AliasRow).where(
            AliasRow.repo_path == repo_path, AliasRow.branch_name == branch_name
        )
        return self._session.execute(stmt).rowcount or 0

    def delete_repo(self, repo_path: str) -> int:
        stmt = delete(AliasRow).where(AliasRow.repo_path == repo_path)
        return self._session.execute(stmt).rowcount or 0
