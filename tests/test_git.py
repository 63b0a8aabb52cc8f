"""Tests for SubprocessGit against a real temporary repository."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from ggo.exceptions import CheckoutFailedError, GgoError, NotARepositoryError
from ggo.git import SubprocessGit
from ggo.protocols import GitBackend

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def _git(cwd: Path, *args: str) -> None:
    subprocess.run(
        ["git", "-c", "user.email=t@example.com", "-c", "user.name=t", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
    )


@pytest.fixture
def outside(tmp_path, monkeypatch) -> Path:
    """A directory git must not treat as part of any enclosing repository."""
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
    path = tmp_path / "plain"
    path.mkdir()
    return path


@pytest.fixture
def repo(tmp_path, monkeypatch) -> Path:
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
    path = tmp_path / "work"
    path.mkdir()
    _git(path, "init", "-q")
    _git(path, "symbolic-ref", "HEAD", "refs/heads/main")
    _git(path, "commit", "-q", "--allow-empty", "-m", "init")
    _git(path, "branch", "feature/auth")
    return path


class TestSubprocessGit:
    def test_satisfies_protocol(self, repo):
        assert isinstance(SubprocessGit(repo), GitBackend)

    def test_list_local_branches(self, repo):
        assert sorted(SubprocessGit(repo).list_local_branches()) == ["feature/auth", "main"]

    def test_current_branch(self, repo):
        assert SubprocessGit(repo).current_branch() == "main"

    def test_checkout(self, repo):
        git = SubprocessGit(repo)
        git.checkout("feature/auth")
        assert git.current_branch() == "feature/auth"

    def test_checkout_missing_branch(self, repo):
        with pytest.raises(CheckoutFailedError) as exc_info:
            SubprocessGit(repo).checkout("nope")
        assert exc_info.value.branch_name == "nope"

    def test_repository_root(self, repo):
        sub = repo / "sub"
        sub.mkdir()
        assert SubprocessGit(sub).repository_root() == str(repo.resolve())

    def test_branch_exists(self, repo, tmp_path):
        git = SubprocessGit(repo)
        assert git.branch_exists(str(repo), "feature/auth")
        assert not git.branch_exists(str(repo), "feature/gone")
        assert not git.branch_exists(str(tmp_path / "missing"), "main")

    def test_detached_head(self, repo):
        _git(repo, "checkout", "-q", "--detach")
        git = SubprocessGit(repo)
        with pytest.raises(GgoError, match="detached"):
            git.current_branch()
        assert sorted(git.list_local_branches()) == ["feature/auth", "main"]

    def test_repository_exists(self, repo, outside, tmp_path):
        git = SubprocessGit(repo)
        assert git.repository_exists(str(repo))
        assert not git.repository_exists(str(outside))
        assert not git.repository_exists(str(tmp_path / "missing"))

    def test_outside_repository(self, outside):
        git = SubprocessGit(outside)
        with pytest.raises(NotARepositoryError):
            git.repository_root()
        with pytest.raises(NotARepositoryError):
            git.list_local_branches()

    def test_missing_binary(self, repo):
        with pytest.raises(GgoError, match="Failed to execute"):
            SubprocessGit(repo, git_binary="definitely-not-git-xyz").current_branch()
