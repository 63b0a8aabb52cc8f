"""CLI tests for ggo via Click's CliRunner.

Each test uses a file-backed database in a temp directory, since the
CLI opens its own store. Git is replaced by the in-memory FakeGit.
"""

from __future__ import annotations

import warnings

import pytest
from click.testing import CliRunner

from ggo.cli import cli
from ggo.store import UsageStore
from tests.conftest import FakeGit


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def runner():
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def fake_git(monkeypatch, repo_dir) -> FakeGit:
    fake = FakeGit(repo_dir, ["main", "feature/auth", "feature/dashboard"], current="main")
    monkeypatch.setattr("ggo.git.SubprocessGit", lambda *args, **kwargs: fake)
    return fake


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    monkeypatch.setenv("GGO_CONFIG_DIR", str(tmp_path / "cfg"))
    monkeypatch.delenv("GGO_DB_PATH", raising=False)
    return tmp_path / "data.db"


@pytest.fixture
def ggo(runner, db_path, tmp_path, fake_git):
    """Invoke the CLI against the temp database and fake repository."""

    def invoke(*args: str, input: str | None = None):
        return runner.invoke(
            cli,
            ["--db", str(db_path), "--config", str(tmp_path / "config.toml"), *args],
            input=input,
        )

    return invoke


# ---------------------------------------------------------------------------
# Switching
# ---------------------------------------------------------------------------


class TestSwitch:
    def test_switch_by_pattern(self, ggo, fake_git, db_path, repo_dir):
        result = ggo("auth")
        assert result.exit_code == 0, result.output
        assert "Switched to branch feature/auth" in result.output
        assert fake_git.checkouts == ["feature/auth"]

        with UsageStore.open(db_path) as store:
            assert store.get_record(repo_dir, "feature/auth").switch_count == 1

    def test_already_on_branch(self, ggo):
        result = ggo("main")
        assert result.exit_code == 0, result.output
        assert "Already on main" in result.output

    def test_no_match(self, ggo, fake_git):
        result = ggo("zzz")
        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "No branches match pattern 'zzz'" in result.output
        assert fake_git.checkouts == []

    def test_no_fuzzy(self, ggo):
        result = ggo("--no-fuzzy", "fauth")
        assert result.exit_code == 1
        assert "remove --no-fuzzy" in result.output

    def test_missing_pattern(self, ggo):
        result = ggo("-i")
        assert result.exit_code == 2
        assert "Missing PATTERN" in result.output

    def test_not_a_repository(self, ggo, fake_git):
        fake_git.in_repository = False
        result = ggo("auth")
        assert result.exit_code == 1
        assert "Not in a git repository" in result.output

    def test_back_to_previous(self, ggo, fake_git):
        assert ggo("auth").exit_code == 0
        result = ggo("-")
        assert result.exit_code == 0, result.output
        assert "Switched to branch main" in result.output
        assert fake_git.current == "main"

    def test_no_previous(self, ggo):
        result = ggo("-")
        assert result.exit_code == 1
        assert "No previous branch found" in result.output


class TestInteractive:
    def test_pick_by_number(self, ggo, fake_git):
        result = ggo("--interactive", "a", input="3\n")
        assert result.exit_code == 0, result.output
        assert "Select branch" in result.output
        assert fake_git.checkouts == ["feature/dashboard"]

    def test_cancel(self, ggo, fake_git):
        result = ggo("--interactive", "a", input="q\n")
        assert result.exit_code == 1
        assert "cancelled" in result.output
        assert fake_git.checkouts == []


# ---------------------------------------------------------------------------
# List and stats
# ---------------------------------------------------------------------------


class TestList:
    def test_list_matches(self, ggo, fake_git):
        result = ggo("-l", "feat")
        assert result.exit_code == 0, result.output
        assert "feature/auth" in result.output
        assert "feature/dashboard" in result.output
        assert "main" not in result.output
        assert fake_git.checkouts == []

    def test_list_everything(self, ggo):
        result = ggo("--list", "")
        assert result.exit_code == 0, result.output
        for name in ("main", "feature/auth", "feature/dashboard"):
            assert name in result.output

    def test_list_shows_aliases(self, ggo):
        assert ggo("alias", "fa", "feature/auth").exit_code == 0
        result = ggo("--list", "auth")
        assert "fa" in result.output


class TestStats:
    def test_empty(self, ggo):
        result = ggo("--stats")
        assert result.exit_code == 0, result.output
        assert "Total switches:  0" in result.output
        assert "No branch history yet" in result.output

    def test_after_switches(self, ggo):
        ggo("auth")
        ggo("dash")
        result = ggo("--stats")
        assert result.exit_code == 0, result.output
        assert "Total switches:  2" in result.output
        assert "feature/auth" in result.output
        assert "just now" in result.output


# ---------------------------------------------------------------------------
# Aliases
# ---------------------------------------------------------------------------


class TestAlias:
    def test_create_show_use_remove(self, ggo, fake_git):
        result = ggo("alias", "fa", "feature/auth")
        assert result.exit_code == 0, result.output
        assert "Created alias fa -> feature/auth" in result.output

        assert "fa -> feature/auth" in ggo("alias", "fa").output

        result = ggo("fa")
        assert result.exit_code == 0, result.output
        assert "(alias)" in result.output
        assert fake_git.checkouts == ["feature/auth"]

        assert ggo("alias", "-r", "fa").exit_code == 0
        result = ggo("alias", "fa")
        assert result.exit_code == 1
        assert "Alias 'fa' not found" in result.output

    def test_list(self, ggo):
        ggo("alias", "m", "main")
        ggo("alias", "d", "feature/dashboard")
        result = ggo("alias", "--list")
        assert result.exit_code == 0, result.output
        assert result.output.index("d ->") < result.output.index("m ->")

    def test_list_empty(self, ggo):
        assert "No aliases defined" in ggo("alias", "--list").output

    def test_reserved_name(self, ggo):
        result = ggo("alias", "stats", "main")
        assert result.exit_code == 1
        assert "reserved" in result.output

    def test_missing_branch(self, ggo):
        result = ggo("alias", "x", "feature/missing")
        assert result.exit_code == 1
        assert "Branch 'feature/missing' not found" in result.output

    def test_stale_alias_warns_and_falls_back(self, ggo, fake_git):
        ggo("alias", "dash", "feature/dashboard")
        fake_git.branches.remove("feature/dashboard")
        fake_git.branches.append("dashboard-v2")

        result = ggo("dash")

        assert result.exit_code == 0, result.output
        assert "Warning:" in result.output
        assert "Falling back to pattern matching" in result.output
        assert fake_git.checkouts == ["dashboard-v2"]

    def test_unrelated_warnings_are_not_swallowed(self, ggo, fake_git, monkeypatch):
        list_branches = fake_git.list_local_branches

        def noisy():
            warnings.warn("backend is deprecated", DeprecationWarning)
            return list_branches()

        monkeypatch.setattr(fake_git, "list_local_branches", noisy)
        with pytest.warns(DeprecationWarning, match="backend is deprecated"):
            result = ggo("auth")

        assert result.exit_code == 0, result.output
        assert "Warning:" not in result.output


# ---------------------------------------------------------------------------
# Cleanup
# ---------------------------------------------------------------------------


class TestCleanup:
    def test_no_flags_prints_help(self, ggo):
        result = ggo("cleanup")
        assert result.exit_code == 0
        assert "--deleted" in result.output
        assert "--older-than" in result.output

    def test_size(self, ggo):
        result = ggo("cleanup", "--size")
        assert result.exit_code == 0, result.output
        assert "Database size:" in result.output

    def test_deleted(self, ggo, fake_git):
        ggo("auth")
        fake_git.branches.remove("feature/auth")
        result = ggo("cleanup", "--deleted")
        assert result.exit_code == 0, result.output
        assert "Removed 1 records of deleted branches" in result.output

    def test_older_than(self, ggo):
        ggo("auth")
        result = ggo("cleanup", "--older-than", "30")
        assert result.exit_code == 0, result.output
        assert "Removed 0 records unused for 30 days" in result.output

    def test_optimize(self, ggo):
        ggo("auth")
        result = ggo("cleanup", "--optimize")
        assert result.exit_code == 0, result.output
        assert "unused for 365 days" in result.output
        assert "Optimized database" in result.output


class TestVersion:
    def test_version(self, runner):
        from ggo import __version__

        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output
