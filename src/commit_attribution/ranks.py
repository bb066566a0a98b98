"""Human-percentage ranks shown on dashboards and badges.

Ranks are derived on read and never stored.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Rank:
    title: str
    description: str
    min_human_percentage: float
    hex: str
    icon: str


# Ordered from most to least human; thresholds are inclusive lower bounds.
RANKS: tuple[Rank, ...] = (
    Rank("Organic Architect", "Pure human thought. 100% natural code.", 95, "#22c55e", "\U0001f33f"),
    Rank("Augmented Developer", "Human intuition enhanced by machine speed.", 80, "#34d399", "✨"),
    Rank("Cyborg Coder", "Perfectly balanced. Half biology, half logic.", 50, "#22d3ee", "\U0001f9be"),
    Rank("AI Pilot", "Guiding the machine to build the future.", 20, "#a78bfa", "\U0001f916"),
    Rank("Digital Overseer", "The code flows from the model. You just approve.", 0, "#d946ef", "\U0001f52e"),
)


def get_rank(human_percentage: float) -> Rank:
    """Tier for a human percentage in [0, 100]. Values below 0 get the last tier."""
    for rank in RANKS[:-1]:
        if human_percentage >= rank.min_human_percentage:
            return rank
    return RANKS[-1]


def human_percentage(human_commits: int, total_commits: int) -> float:
    """Share of human commits in percent; 0 when there are no commits."""
    if total_commits <= 0:
        return 0.0
    return human_commits / total_commits * 100


def format_percentage(value: float) -> str:
    """Render a 0-100 percentage for display.

    ``0`` -> ``"0"``; values under 0.1 keep two decimals unless the second
    is a trailing zero; everything else gets one decimal.
    """
    if value == 0:
        return "0"
    if value < 0.1:
        formatted = f"{value:.2f}"
        return f"{value:.1f}" if formatted.endswith("0") else formatted
    return f"{value:.1f}"
