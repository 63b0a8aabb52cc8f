"""Tests for maintenance: pruning, compaction and size reporting."""

from __future__ import annotations

import pytest

from ggo.constants import DAY_SECONDS
from tests.conftest import FakeGit


class TestCleanupOldRecords:
    def test_removes_only_stale(self, store, clock):
        store.record_checkout("/repo", "ancient")
        clock.advance(400 * DAY_SECONDS)
        store.record_checkout("/repo", "fresh")

        assert store.cleanup_old_records(365) == 1
        assert [r.branch_name for r in store.get_all_records()] == ["fresh"]

    def test_zero_days_removes_everything_older_than_now(self, store, clock):
        store.record_checkout("/repo", "main")
        clock.advance(1)
        assert store.cleanup_old_records(0) == 1

    def test_negative_days_rejected(self, store):
        with pytest.raises(ValueError):
            store.cleanup_old_records(-1)


class TestCleanupDeletedBranches:
    def test_vanished_repository_takes_records_and_aliases(self, store, tmp_path, repo_dir):
        gone = str(tmp_path / "deleted-repo")
        store.record_checkout(gone, "main")
        store.record_checkout(gone, "dev")
        store.create_alias(gone, "m", "main")
        store.create_alias(gone, "d", "dev")
        store.save_previous_branch(gone, "dev")
        store.record_checkout(repo_dir, "main")

        git = FakeGit(repo_dir, ["main"])
        assert store.cleanup_deleted_branches(git) == 2

        assert store.get_records(gone) == []
        assert store.list_aliases(gone) == []
        assert store.get_previous_branch(gone) is None
        assert store.get_record(repo_dir, "main") is not None

    def test_deleted_branch_in_live_repository(self, store, repo_dir):
        store.record_checkout(repo_dir, "main")
        store.record_checkout(repo_dir, "old-feature")
        store.create_alias(repo_dir, "of", "old-feature")
        store.create_alias(repo_dir, "m", "main")

        git = FakeGit(repo_dir, ["main"])
        assert store.cleanup_deleted_branches(git) == 1

        assert [r.branch_name for r in store.get_records(repo_dir)] == ["main"]
        assert store.get_alias(repo_dir, "of") is None
        assert store.get_alias(repo_dir, "m") == "main"

    def test_repository_judged_by_git_not_disk(self, store, tmp_path, repo_dir):
        no_longer_repo = tmp_path / "was-a-repo"
        no_longer_repo.mkdir()
        store.record_checkout(str(no_longer_repo), "main")

        assert store.cleanup_deleted_branches(FakeGit(repo_dir, ["main"])) == 1
        assert store.get_records(str(no_longer_repo)) == []

    def test_nothing_to_do(self, store, repo_dir):
        store.record_checkout(repo_dir, "main")
        assert store.cleanup_deleted_branches(FakeGit(repo_dir, ["main"])) == 0


class TestOptimizeAndSize:
    def test_memory_size_positive(self, store):
        assert store.get_database_size() > 0

    def test_file_size_matches_disk(self, file_store):
        file_store.record_checkout("/repo", "main")
        assert file_store.get_database_size() >= file_store.db_path.stat().st_size

    def test_optimize_keeps_data(self, file_store, clock):
        for i in range(20):
            file_store.record_checkout("/repo", f"branch-{i}")
        clock.advance(1)
        file_store.cleanup_old_records(0)
        file_store.optimize_database()
        assert file_store.get_stats().total_switches == 0
        file_store.record_checkout("/repo", "main")
        assert file_store.get_record("/repo", "main").switch_count == 1
