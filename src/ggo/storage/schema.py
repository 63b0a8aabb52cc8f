"""SQLAlchemy ORM schema for ggo.

Defines the four logical tables of the usage database:
schema_version, branches, previous_branch, aliases.

Every row is partitioned by ``repo_path``, the absolute path of the
repository root. Timestamps are integer epoch seconds.
"""

from __future__ import annotations

from sqlalchemy import Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ggo ORM models."""

    pass


class SchemaVersionRow(Base):
    """Migration ledger. One row per applied migration step."""

    __tablename__ = "schema_version"

    version: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    applied_at: Mapped[int] = mapped_column(Integer, nullable=False)


class BranchUsageRow(Base):
    """Checkout counter and last-use time for a branch in a repository."""

    __tablename__ = "branches"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    repo_path: Mapped[str] = mapped_column(Text, nullable=False)
    branch_name: Mapped[str] = mapped_column(String(255), nullable=False)
    switch_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    last_used: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("repo_path", "branch_name", name="uq_branches_repo_branch"),
        Index("ix_branches_repo_last_used", "repo_path", "last_used"),
    )


class PreviousBranchRow(Base):
    """The branch a repository was on before its most recent switch."""

    __tablename__ = "previous_branch"

    repo_path: Mapped[str] = mapped_column(Text, primary_key=True)
    branch_name: Mapped[str] = mapped_column(String(255), nullable=False)
    updated_at: Mapped[int] = mapped_column(Integer, nullable=False)


class AliasRow(Base):
    """Repository-scoped nickname for a branch.

    The composite primary key keeps identical alias strings in different
    repositories distinct.
    """

    __tablename__ = "aliases"

    repo_path: Mapped[str] = mapped_column(Text, primary_key=True)
    alias: Mapped[str] = mapped_column(String(50), primary_key=True)
    branch_name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        Index("ix_aliases_repo_branch", "repo_path", "branch_name"),
    )
