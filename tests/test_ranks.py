"""Tests for human-percentage ranks."""

import pytest

from commit_attribution.ranks import RANKS, format_percentage, get_rank, human_percentage


class TestGetRank:
    @pytest.mark.parametrize(
        "pct, title",
        [
            (100, "Organic Architect"),
            (95, "Organic Architect"),
            (94.9, "Augmented Developer"),
            (80, "Augmented Developer"),
            (50, "Cyborg Coder"),
            (49.99, "AI Pilot"),
            (20, "AI Pilot"),
            (19.9, "Digital Overseer"),
            (0, "Digital Overseer"),
            (-5, "Digital Overseer"),
        ],
    )
    def test_thresholds(self, pct, title):
        assert get_rank(pct).title == title

    def test_tiers_descend(self):
        thresholds = [r.min_human_percentage for r in RANKS]
        assert thresholds == sorted(thresholds, reverse=True)
        assert thresholds[-1] == 0


class TestHumanPercentage:
    def test_share(self):
        assert human_percentage(120, 400) == pytest.approx(30.0)

    def test_no_commits(self):
        assert human_percentage(0, 0) == 0.0


class TestFormatPercentage:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (0, "0"),
            (0.05, "0.05"),
            (0.099, "0.1"),
            (0.1, "0.1"),
            (87.46, "87.5"),
            (100, "100.0"),
        ],
    )
    def test_format(self, value, expected):
        assert format_percentage(value) == expected
