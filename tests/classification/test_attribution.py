"""Tests for signal classification and aggregation."""

import itertools
import math
import time

import pytest

from commit_attribution.classification.attribution import (
    aggregate,
    build_haystack,
    is_valid_commit_count,
    map_signal,
)
from commit_attribution.classification.models import (
    AggregateInput,
    AttributionMatch,
    AttributionSignal,
    AttributionSummary,
)


def _inputs(records):
    return [AggregateInput.from_dict(r) for r in records]


class TestBuildHaystack:
    def test_order_and_empty_parts_skipped(self):
        signal = AttributionSignal(
            "ai-assisted", login="bot", branch="", body=None, labels=("a", "", "b")
        )
        assert build_haystack(signal) == "bot\na\nb"

    def test_login_branch_body_labels(self):
        signal = AttributionSignal("ai-assisted", login="l", branch="br", body="bo", labels=("x",))
        assert build_haystack(signal) == "l\nbr\nbo\nx"


class TestMapSignal:
    def test_human_has_no_attribution(self):
        assert map_signal(AttributionSignal("human", login="coderabbitai[bot]")) is None

    def test_unknown_classification(self):
        assert map_signal(AttributionSignal("martian")) is None

    def test_fixed_map_ignores_evidence(self):
        signal = AttributionSignal("copilot", login="dependabot[bot]", body="Generated by Sweep")
        assert map_signal(signal) == AttributionMatch("github-copilot", "GitHub Copilot", "ai")

    def test_ai_assisted_by_login(self):
        match = map_signal(AttributionSignal("ai-assisted", login="coderabbitai[bot]"))
        assert match == AttributionMatch("coderabbit", "CodeRabbit", "ai")

    def test_ai_assisted_by_branch(self):
        match = map_signal(AttributionSignal("ai-assisted", login="alice", branch="sweep/fix-123"))
        assert match is not None and match.key == "sweep"

    def test_ai_assisted_by_body(self):
        match = map_signal(AttributionSignal("ai-assisted", body="Built in Windsurf"))
        assert match is not None and match.label == "Windsurf"

    def test_ai_assisted_by_label(self):
        match = map_signal(AttributionSignal("ai-assisted", labels=("needs-review", "tabnine")))
        assert match is not None and match.key == "tabnine"

    def test_ai_assisted_fallback(self):
        match = map_signal(AttributionSignal("ai-assisted", login="helper-app[bot]"))
        assert match == AttributionMatch("ai-unspecified", "Unknown AI Assistant", "ai")

    def test_ai_assisted_without_evidence(self):
        match = map_signal(AttributionSignal("ai-assisted"))
        assert match is not None and match.key == "ai-unspecified"

    def test_other_bot_by_login(self):
        match = map_signal(AttributionSignal("other-bot", login="renovate-approve[bot]"))
        assert match == AttributionMatch("renovate", "Renovate", "automation")

    def test_other_bot_fallback(self):
        match = map_signal(AttributionSignal("other-bot", login="helper-app[bot]"))
        assert match == AttributionMatch("bot-unspecified", "Unknown Automation Bot", "automation")

    def test_lane_of_pattern_follows_classification(self):
        """A review agent seen on an other-bot signal stays in the automation lane."""
        match = map_signal(AttributionSignal("other-bot", login="mergify[bot]"))
        assert match is not None and match.lane == "automation"


class TestIsValidCommitCount:
    @pytest.mark.parametrize("value", [1, 2.5, 10**9])
    def test_valid(self, value):
        assert is_valid_commit_count(value)

    @pytest.mark.parametrize(
        "value", [0, -1, -0.5, math.nan, math.inf, -math.inf, True, False, "3", None]
    )
    def test_invalid(self, value):
        assert not is_valid_commit_count(value)


class TestAggregate:
    def test_end_to_end(self, end_to_end_signals):
        summary = aggregate(_inputs(end_to_end_signals), computed_at=1_700_000_000_000)
        assert summary.to_dict() == {
            "totalCommits": 9,
            "aiCommits": 4,
            "automationCommits": 5,
            "breakdown": [
                {"key": "coderabbit", "label": "CodeRabbit", "lane": "ai", "commits": 4},
                {"key": "dependabot", "label": "Dependabot", "lane": "automation", "commits": 3},
                {"key": "sentry-bot", "label": "Sentry Bot", "lane": "automation", "commits": 2},
            ],
            "computedAt": 1_700_000_000_000,
        }

    def test_permutation_invariant(self, end_to_end_signals):
        records = end_to_end_signals + [
            {"classification": "cursor", "commitCount": 2},
            {"classification": "ai-assisted", "login": "coderabbitai[bot]", "commitCount": 1},
        ]
        expected = aggregate(_inputs(records), computed_at=0).to_dict()
        for perm in itertools.permutations(records):
            assert aggregate(_inputs(perm), computed_at=0).to_dict() == expected

    def test_conservation(self, end_to_end_signals):
        summary = aggregate(_inputs(end_to_end_signals), computed_at=0)
        assert summary.ai_commits + summary.automation_commits == summary.total_commits
        assert sum(item.commits for item in summary.breakdown) == summary.total_commits

    def test_same_key_merges(self):
        summary = aggregate(
            _inputs(
                [
                    {"classification": "ai-assisted", "login": "coderabbitai[bot]", "commitCount": 2},
                    {"classification": "ai-assisted", "body": "Reviewed by CodeRabbit", "commitCount": 3},
                ]
            ),
            computed_at=0,
        )
        assert len(summary.breakdown) == 1
        assert summary.breakdown[0].commits == 5

    @pytest.mark.parametrize("count", [0, -3, math.nan, math.inf, -math.inf, True, "4", None])
    def test_invalid_counts_never_affect_output(self, count):
        base = [{"classification": "dependabot", "commitCount": 3}]
        noisy = base + [{"classification": "copilot", "commitCount": count}]
        assert aggregate(_inputs(noisy), computed_at=0).to_dict() == aggregate(
            _inputs(base), computed_at=0
        ).to_dict()

    def test_human_contributes_nothing(self):
        summary = aggregate(
            _inputs([{"classification": "human", "login": "copilot", "commitCount": 50}]), computed_at=0
        )
        assert summary.total_commits == 0
        assert summary.breakdown == []

    def test_unknown_classification_dropped(self):
        summary = aggregate(_inputs([{"classification": "martian", "commitCount": 5}]), computed_at=0)
        assert summary.total_commits == 0

    def test_ties_sorted_by_label(self):
        summary = aggregate(
            _inputs(
                [
                    {"classification": "renovate", "commitCount": 2},
                    {"classification": "aider", "commitCount": 2},
                    {"classification": "devin", "commitCount": 5},
                ]
            ),
            computed_at=0,
        )
        assert [item.label for item in summary.breakdown] == ["Devin", "Aider", "Renovate"]

    def test_label_tie_break_ignores_case(self):
        summary = aggregate(
            _inputs(
                [
                    {"classification": "ai-assisted", "body": "windsurf", "commitCount": 1},
                    {"classification": "ai-assisted", "body": "made with v0", "commitCount": 1},
                ]
            ),
            computed_at=0,
        )
        assert [item.label for item in summary.breakdown] == ["v0", "Windsurf"]

    def test_empty(self):
        summary = aggregate([], computed_at=5)
        assert summary.to_dict() == {
            "totalCommits": 0,
            "aiCommits": 0,
            "automationCommits": 0,
            "breakdown": [],
            "computedAt": 5,
        }

    def test_computed_at_defaults_to_now(self, monkeypatch):
        monkeypatch.setattr(time, "time", lambda: 1_700_000_000.25)
        assert aggregate([]).computed_at == 1_700_000_000_250

    def test_accepts_generator(self, end_to_end_signals):
        summary = aggregate((AggregateInput.from_dict(r) for r in end_to_end_signals), computed_at=0)
        assert summary.total_commits == 9


class TestSummaryDict:
    def test_from_dict_restores_summary(self, end_to_end_signals):
        summary = aggregate(_inputs(end_to_end_signals), computed_at=42)
        restored = AttributionSummary.from_dict(summary.to_dict())
        assert restored == summary

    def test_aggregate_input_from_dict(self):
        item = AggregateInput.from_dict(
            {"classification": "ai-assisted", "labels": ["ai", 3], "commitCount": 7, "login": "x"}
        )
        assert item.commit_count == 7
        assert item.labels == ("ai", "3")
        assert item.branch is None
