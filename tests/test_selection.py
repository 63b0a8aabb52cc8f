"""Tests for score fusion and the auto-select decision."""

from __future__ import annotations

import pytest

from ggo.exceptions import NoMatchingBranchesError
from ggo.matcher import MatchResult
from ggo.models.records import ScoredBranch, UsageRecord
from ggo.selection import (
    NeedsInteractiveChoice,
    Resolved,
    combined_score,
    fuse_scores,
    select_branch,
)

NOW = 1_700_000_000


def _ranked(*scores: float) -> list[ScoredBranch]:
    return [ScoredBranch(f"b{i}", s) for i, s in enumerate(scores)]


class TestCombinedScore:
    def test_fusion_arithmetic(self):
        assert combined_score(80, 10.0) == 180

    def test_custom_multiplier(self):
        assert combined_score(5, 2.0, multiplier=3.0) == 11.0


class TestFuseScores:
    def test_frecency_boost_reorders(self):
        matches = [MatchResult("feature/dashboard", 100), MatchResult("feature/auth", 90)]
        records = [UsageRecord("/repo", "feature/auth", 10, NOW)]
        ranked = fuse_scores(matches, records, fuzzy=True, now=NOW)
        assert [r.name for r in ranked] == ["feature/auth", "feature/dashboard"]
        assert ranked[0].score == pytest.approx(190.0)
        assert ranked[1].score == 100
        assert ranked[0].switch_count == 10

    def test_substring_mode_ranks_by_frecency_only(self):
        matches = [MatchResult("a"), MatchResult("b"), MatchResult("c")]
        records = [UsageRecord("/repo", "c", 3, NOW), UsageRecord("/repo", "b", 1, NOW)]
        ranked = fuse_scores(matches, records, fuzzy=False, now=NOW)
        assert [r.name for r in ranked] == ["c", "b", "a"]
        assert ranked[0].score == pytest.approx(3.0)

    def test_no_history_keeps_match_order(self):
        matches = [MatchResult("x", 50), MatchResult("y", 50)]
        assert [r.name for r in fuse_scores(matches, [], fuzzy=True, now=NOW)] == ["x", "y"]


class TestSelectBranch:
    def test_empty_raises(self):
        with pytest.raises(NoMatchingBranchesError) as exc_info:
            select_branch([], pattern="zzz", fuzzy=False)
        assert exc_info.value.pattern == "zzz"
        assert "--no-fuzzy" in str(exc_info.value)

    def test_single_candidate(self):
        assert select_branch(_ranked(1.0)) == Resolved("b0")

    def test_single_candidate_even_when_interactive(self):
        assert select_branch(_ranked(1.0), force_interactive=True) == Resolved("b0")

    def test_ratio_at_threshold_auto_selects(self):
        assert select_branch(_ranked(200, 100)) == Resolved("b0")

    def test_ratio_below_threshold_defers(self):
        ranked = _ranked(199, 100)
        result = select_branch(ranked)
        assert isinstance(result, NeedsInteractiveChoice)
        assert list(result.candidates) == ranked

    def test_second_zero_auto_selects(self):
        assert select_branch(_ranked(0.5, 0)) == Resolved("b0")

    def test_all_zero_auto_selects_first(self):
        assert select_branch(_ranked(0, 0, 0)) == Resolved("b0")

    def test_forced_interactive_defers(self):
        result = select_branch(_ranked(1000, 1), force_interactive=True)
        assert isinstance(result, NeedsInteractiveChoice)
        assert len(result.candidates) == 2

    def test_custom_threshold(self):
        assert select_branch(_ranked(150, 100), threshold=1.5) == Resolved("b0")
        assert isinstance(select_branch(_ranked(150, 100), threshold=1.6), NeedsInteractiveChoice)

    def test_deterministic(self):
        ranked = _ranked(150, 100, 50)
        assert select_branch(ranked) == select_branch(ranked)
