"""Shared test fixtures for ggo.

Provides in-memory SQLite engine, session and repository fixtures, a
controllable clock, usage stores, and an in-memory git backend.
"""

from __future__ import annotations

import pytest
from sqlalchemy.orm import Session, sessionmaker

from ggo.exceptions import CheckoutFailedError, GgoError, NotARepositoryError
from ggo.navigator import Navigator
from ggo.storage.engine import create_ggo_engine, init_db
from ggo.storage.sqlite import (
    SqliteAliasRepository,
    SqlitePreviousBranchRepository,
    SqliteUsageRepository,
)
from ggo.store import UsageStore

T0 = 1_700_000_000


class FakeClock:
    """Settable epoch-seconds clock."""

    def __init__(self, now: int = T0) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


class FakeGit:
    """In-memory GitBackend for one repository.

    ``other_repos`` maps further repository paths to their branch lists
    for ``branch_exists`` lookups. Any other path is a vanished repository.
    """

    def __init__(
        self,
        root: str,
        branches: list[str],
        current: str | None = None,
        other_repos: dict[str, list[str]] | None = None,
    ) -> None:
        self.root = root
        self.branches = list(branches)
        self.current = current if current is not None else (branches[0] if branches else None)
        self.other_repos = dict(other_repos or {})
        self.checkouts: list[str] = []
        self.refuse_checkout: str | None = None
        self.in_repository = True

    def _require_repo(self) -> None:
        if not self.in_repository:
            raise NotARepositoryError("fatal: not a git repository")

    def list_local_branches(self) -> list[str]:
        self._require_repo()
        return list(self.branches)

    def current_branch(self) -> str:
        self._require_repo()
        if self.current is None:
            raise GgoError("Not on a branch (detached HEAD)")
        return self.current

    def checkout(self, branch_name: str) -> None:
        self._require_repo()
        if branch_name == self.refuse_checkout:
            raise CheckoutFailedError(branch_name, "local changes would be overwritten")
        self.checkouts.append(branch_name)
        self.current = branch_name

    def repository_root(self) -> str:
        self._require_repo()
        return self.root

    def repository_exists(self, repo_path: str) -> bool:
        return repo_path == self.root or repo_path in self.other_repos

    def branch_exists(self, repo_path: str, branch_name: str) -> bool:
        if repo_path == self.root:
            return branch_name in self.branches
        return branch_name in self.other_repos.get(repo_path, [])


@pytest.fixture
def engine():
    """In-memory SQLite engine with all migrations applied."""
    eng = create_ggo_engine(":memory:")
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine):
    """Session with automatic rollback after each test."""
    SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)
    sess = SessionLocal()
    yield sess
    sess.rollback()
    sess.close()


@pytest.fixture
def usage_repo(session: Session) -> SqliteUsageRepository:
    return SqliteUsageRepository(session)


@pytest.fixture
def previous_repo(session: Session) -> SqlitePreviousBranchRepository:
    return SqlitePreviousBranchRepository(session)


@pytest.fixture
def alias_repo(session: Session) -> SqliteAliasRepository:
    return SqliteAliasRepository(session)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock):
    """In-memory usage store driven by the fake clock."""
    s = UsageStore.open(":memory:", clock=clock)
    yield s
    s.close()


@pytest.fixture
def file_store(tmp_path, clock):
    """File-backed usage store in a temp directory."""
    s = UsageStore.open(tmp_path / "ggo" / "data.db", clock=clock)
    yield s
    s.close()


@pytest.fixture
def repo_dir(tmp_path) -> str:
    """An existing directory standing in for a repository root."""
    path = tmp_path / "repo"
    path.mkdir()
    return str(path)


@pytest.fixture
def git(repo_dir) -> FakeGit:
    return FakeGit(repo_dir, ["main", "feature/auth", "feature/dashboard"], current="main")


@pytest.fixture
def navigator(store, git) -> Navigator:
    return Navigator(store, git)
