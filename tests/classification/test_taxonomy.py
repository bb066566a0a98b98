"""Tests for the classification taxonomy and the reclassification guard."""

import pytest

from commit_attribution.classification.taxonomy import (
    ADDITIONS_TRACKED,
    AI_CLASSIFICATIONS,
    AUTOMATION_CLASSIFICATIONS,
    CATEGORIES,
    STAT_FIELDS,
    Category,
    Classification,
    additions_field,
    can_reclassify,
    category_of,
    parse_classification,
    stat_field,
)


class TestMappings:
    def test_every_member_has_stat_field_and_category(self):
        assert set(STAT_FIELDS) == set(Classification)
        assert set(CATEGORIES) == set(Classification)

    def test_stat_fields_are_unique(self):
        assert len(set(STAT_FIELDS.values())) == len(Classification)

    def test_camel_case_wire_names(self):
        assert stat_field(Classification.OPENAI_CODEX) == "openaiCodex"
        assert stat_field(Classification.GITHUB_ACTIONS) == "githubActions"
        assert stat_field(Classification.AI_ASSISTED) == "aiAssisted"

    def test_mappings_are_read_only(self):
        with pytest.raises(TypeError):
            STAT_FIELDS[Classification.HUMAN] = "people"  # type: ignore[index]

    def test_lanes_partition_non_human(self):
        assert AI_CLASSIFICATIONS.isdisjoint(AUTOMATION_CLASSIFICATIONS)
        assert AI_CLASSIFICATIONS | AUTOMATION_CLASSIFICATIONS == set(Classification) - {
            Classification.HUMAN
        }

    def test_category_of(self):
        assert category_of(Classification.HUMAN) is Category.HUMAN
        assert category_of(Classification.CURSOR) is Category.AI
        assert category_of(Classification.RENOVATE) is Category.AUTOMATION

    def test_additions_field(self):
        assert additions_field(Classification.CLAUDE) == "claudeAdditions"
        assert additions_field(Classification.DEPENDABOT) is None
        assert Classification.HUMAN in ADDITIONS_TRACKED


class TestParseClassification:
    def test_known_value(self):
        assert parse_classification("copilot") is Classification.COPILOT

    def test_member_passes_through(self):
        assert parse_classification(Classification.DEVIN) is Classification.DEVIN

    @pytest.mark.parametrize("value", ["martian", "", None, 3, ["human"]])
    def test_unrecognised_values(self, value):
        assert parse_classification(value) is None

    def test_str_is_wire_value(self):
        assert str(Classification.OPENAI_CODEX) == "openai-codex"


class TestCanReclassify:
    def test_human_to_tool_allowed(self):
        assert can_reclassify("human", "copilot")
        assert can_reclassify(Classification.HUMAN, Classification.OTHER_BOT)

    def test_human_to_human_rejected(self):
        assert not can_reclassify("human", "human")

    @pytest.mark.parametrize("current", ["copilot", "dependabot", "ai-assisted"])
    def test_never_downgrades_or_moves_sideways(self, current):
        assert not can_reclassify(current, "human")
        assert not can_reclassify(current, "claude")

    def test_unknown_values_rejected(self):
        assert not can_reclassify("human", "martian")
        assert not can_reclassify("martian", "copilot")
