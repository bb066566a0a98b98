"""Tests for the per-commit AI tool and bot breakdowns."""

import pytest

from commit_attribution.classification.breakdown import (
    BreakdownCommit,
    build_detailed_breakdowns,
    normalize_identity,
)


class TestNormalizeIdentity:
    @pytest.mark.parametrize(
        "source,expected",
        [
            ("renovate-approve[bot]", ("renovate-approve", "Renovate Approve")),
            ("@my_helper", ("my-helper", "My Helper")),
            ("Claude <noreply@anthropic.com>", ("claude", "Claude")),
            ("  Deploy Bot  ", ("deploy-bot", "Deploy Bot")),
        ],
    )
    def test_normalizes(self, source, expected):
        assert normalize_identity(source) == expected

    @pytest.mark.parametrize("source", ["", "[bot]", "<x@y.z>", "@", "!!!"])
    def test_nothing_left(self, source):
        assert normalize_identity(source) is None


class TestBuildDetailedBreakdowns:
    def test_fixed_classifications(self):
        result = build_detailed_breakdowns(
            [
                BreakdownCommit("copilot", additions=10),
                BreakdownCommit("copilot", additions=5),
                BreakdownCommit("dependabot", additions=100),
            ]
        )
        assert [s.to_dict() for s in result.tool_breakdown] == [
            {"key": "github-copilot", "label": "GitHub Copilot", "commits": 2, "additions": 15}
        ]
        assert [s.to_dict() for s in result.bot_breakdown] == [
            {"key": "dependabot", "label": "Dependabot", "commits": 1}
        ]

    def test_skips_human_and_unknown(self):
        result = build_detailed_breakdowns([BreakdownCommit("human"), BreakdownCommit("martian")])
        assert result.tool_breakdown == []
        assert result.bot_breakdown == []

    def test_ai_assisted_pattern_from_co_author(self):
        commit = BreakdownCommit(
            "ai-assisted",
            author_login="alice",
            message="Add search",
            co_authors=("Windsurf <windsurf@example.com>",),
        )
        tools = build_detailed_breakdowns([commit]).tool_breakdown
        assert (tools[0].key, tools[0].label) == ("windsurf", "Windsurf")

    def test_ai_identity_never_from_human_author(self):
        commit = BreakdownCommit(
            "ai-assisted",
            author_login="alice",
            author_name="Alice",
            message="Add search",
            co_authors=("Claude <noreply@anthropic.com>",),
        )
        tools = build_detailed_breakdowns([commit]).tool_breakdown
        assert (tools[0].key, tools[0].label) == ("ai-claude", "Claude")

    def test_ai_unspecified(self):
        commit = BreakdownCommit("ai-assisted", author_login="alice", message="Add search (AI-generated)")
        tools = build_detailed_breakdowns([commit]).tool_breakdown
        assert (tools[0].key, tools[0].label) == ("ai-unspecified", "Unspecified AI Assistant")

    def test_other_bot_pattern(self):
        bots = build_detailed_breakdowns(
            [BreakdownCommit("other-bot", author_login="imgbot[bot]")]
        ).bot_breakdown
        assert bots[0].key == "imgbot"

    def test_other_bot_identity_fallback(self):
        bots = build_detailed_breakdowns(
            [BreakdownCommit("other-bot", author_login="weird-helper[bot]")]
        ).bot_breakdown
        assert (bots[0].key, bots[0].label) == ("bot-weird-helper", "Weird Helper")

    def test_other_bot_unspecified(self):
        bots = build_detailed_breakdowns([BreakdownCommit("other-bot")]).bot_breakdown
        assert (bots[0].key, bots[0].label) == ("bot-unspecified", "Unspecified Bot")

    def test_sort_order(self):
        result = build_detailed_breakdowns(
            [
                BreakdownCommit("cursor", additions=1),
                BreakdownCommit("claude", additions=50),
                BreakdownCommit("aider", additions=50),
                BreakdownCommit("devin", additions=5),
                BreakdownCommit("devin", additions=5),
                BreakdownCommit("renovate"),
                BreakdownCommit("github-actions"),
            ]
        )
        # commits desc, additions desc, then label
        assert [s.key for s in result.tool_breakdown] == ["devin", "aider", "claude-code", "cursor"]
        assert [s.key for s in result.bot_breakdown] == ["github-actions", "renovate"]
