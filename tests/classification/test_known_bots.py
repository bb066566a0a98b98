"""Tests for known bot patterns and AI markers."""

import pytest

from commit_attribution.classification.known_bots import (
    classify_ai_co_author,
    classify_ai_message_marker,
    extract_co_authors,
    extract_pr_number,
    has_ai_author_name,
    has_ai_co_author,
    has_ai_message_marker,
    match_bot_pattern,
)
from commit_attribution.classification.taxonomy import Classification


class TestExtractCoAuthors:
    def test_multiple_trailers_any_case(self):
        message = (
            "feat: add login\n\n"
            "Co-authored-by: Claude <noreply@anthropic.com>\n"
            "CO-AUTHORED-BY: Jane Doe <jane@example.com>\n"
        )
        assert extract_co_authors(message) == [
            "Claude <noreply@anthropic.com>",
            "Jane Doe <jane@example.com>",
        ]

    def test_none(self):
        assert extract_co_authors("fix typo") == []


class TestExtractPrNumber:
    @pytest.mark.parametrize(
        "message,expected",
        [
            ("Add dark mode (#123)", 123),
            ("Add dark mode (#123)  ", 123),
            ("Merge pull request #45 from org/feature", 45),
            ("Subject (#7)\n\nSquashed body mentions (#9)", 7),
            ("Fix #12 in parser", None),
            ("Refs (#12) somewhere in the middle", None),
            ("", None),
        ],
    )
    def test_subject_forms(self, message, expected):
        assert extract_pr_number(message) == expected


class TestMatchBotPattern:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("dependabot[bot]", Classification.DEPENDABOT),
            ("renovate-approve[bot]", Classification.RENOVATE),
            ("Copilot", Classification.COPILOT),
            ("copilot-swe-agent[bot]", Classification.COPILOT),
            ("devin-ai-integration[bot]", Classification.DEVIN),
            ("cursoragent", Classification.CURSOR),
            ("chatgpt-codex-connector[bot]", Classification.OPENAI_CODEX),
            ("gemini-code-assist[bot]", Classification.GEMINI),
            ("coderabbitai[bot]", Classification.AI_ASSISTED),
            ("github-actions[bot]", Classification.GITHUB_ACTIONS),
            ("sentry[bot]", Classification.OTHER_BOT),
            ("my-deploy-bot", Classification.OTHER_BOT),
            ("bot-release", Classification.OTHER_BOT),
            ("some-app[bot]", Classification.OTHER_BOT),
        ],
    )
    def test_known(self, value, expected):
        assert match_bot_pattern(value) is expected

    @pytest.mark.parametrize("value", ["alice", "robot-arm", "codexmaster"])
    def test_humans(self, value):
        assert match_bot_pattern(value) is None


class TestCoAuthors:
    def test_specific_tools(self):
        assert classify_ai_co_author(["Claude <noreply@anthropic.com>"]) is Classification.CLAUDE
        assert classify_ai_co_author(["Cursor Agent <cursoragent@cursor.com>"]) is Classification.CURSOR
        assert classify_ai_co_author(["aider (gpt-4) <noreply@aider.chat>"]) is Classification.AIDER

    def test_first_identifiable_co_author_wins(self):
        co_authors = ["Jane <jane@example.com>", "Copilot <copilot@github.com>", "Claude <x>"]
        assert classify_ai_co_author(co_authors) is Classification.COPILOT

    def test_ai_without_specific_tool(self):
        co_authors = ["Windsurf <windsurf@example.com>"]
        assert has_ai_co_author(co_authors)
        assert classify_ai_co_author(co_authors) is None

    def test_human_co_author(self):
        assert not has_ai_co_author(["Jane Doe <jane@example.com>"])


class TestMessageMarkers:
    def test_claude_footer(self):
        message = "Refactor\n\n\U0001f916 Generated with Claude Code"
        assert has_ai_message_marker(message)
        assert classify_ai_message_marker(message) is Classification.CLAUDE

    def test_aider_prefix_on_any_line(self):
        message = "chore\naider: fix failing tests"
        assert classify_ai_message_marker(message) is Classification.AIDER

    def test_generic_marker(self):
        message = "Add helpers (AI-generated)"
        assert has_ai_message_marker(message)
        assert classify_ai_message_marker(message) is None

    def test_plain_message(self):
        assert not has_ai_message_marker("Fix race in scheduler")


class TestAuthorName:
    def test_aider_suffix(self):
        assert has_ai_author_name("Paul Gauthier (aider)")
        assert not has_ai_author_name("aider fan")
