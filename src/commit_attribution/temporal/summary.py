"""Percentage summaries over stored weekly buckets.

Rows come from ``repo_weekly_stats`` or ``global_weekly_stats`` (or any mix
of repos). Rows sharing a ``weekStart`` are summed first, so a user's repos
can be passed in together. Missing or ``NULL`` counts are zero, which covers
buckets written before a classification or the additions columns existed.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

from ..classification.taxonomy import (
    CATEGORIES,
    STAT_FIELDS,
    Category,
    Classification,
    additions_field,
)
from ..ranks import format_percentage
from .stats import WEEKLY_COUNT_FIELDS
from .weeks import week_label

TREND_WEEKS = 4

# Stat fields in enum order, so ai-assisted is the last tool.
AI_FIELDS: tuple[str, ...] = tuple(
    STAT_FIELDS[c] for c in Classification if CATEGORIES[c] is Category.AI
)
AUTOMATION_FIELDS: tuple[str, ...] = tuple(
    STAT_FIELDS[c] for c in Classification if CATEGORIES[c] is Category.AUTOMATION
)
_AI_ADDITIONS: dict[str, str] = {
    STAT_FIELDS[c]: additions_field(c)  # type: ignore[misc]
    for c in Classification
    if CATEGORIES[c] is Category.AI
}


def _count(row: Mapping[str, Any], name: str) -> int:
    return row.get(name) or 0


def combine_weekly_stats(rows: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """Sum rows per ``weekStart`` into complete buckets, oldest first."""
    weeks: dict[int, dict[str, Any]] = {}
    for row in rows:
        ws = row["weekStart"]
        bucket = weeks.get(ws)
        if bucket is None:
            weeks[ws] = {name: _count(row, name) for name in WEEKLY_COUNT_FIELDS}
            continue
        for name in WEEKLY_COUNT_FIELDS:
            bucket[name] += _count(row, name)
    return [{"weekStart": ws, "weekLabel": week_label(ws), **weeks[ws]} for ws in sorted(weeks)]


@dataclass
class ToolTotals:
    commits: int = 0
    additions: int = 0

    def to_dict(self) -> dict[str, int]:
        return {"commits": self.commits, "additions": self.additions}


@dataclass
class WeeklySummary:
    """Commit and line-of-code shares across a run of weekly buckets.

    ``total`` is recomputed from the per-classification counts rather than
    read from the stored ``total`` column. Automation additions are not
    stored per bot, so they are the remainder of ``totalAdditions`` after
    human and AI additions (never negative).
    """

    human: int = 0
    ai: int = 0
    automation: int = 0
    human_additions: int = 0
    ai_additions: int = 0
    automation_additions: int = 0
    total_additions: int = 0
    trend: int = 0
    tools: dict[str, ToolTotals] = field(default_factory=dict)
    bots: dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return self.human + self.ai + self.automation

    @property
    def has_loc_data(self) -> bool:
        return self.total_additions > 0

    def _share(self, part: int) -> float:
        return part / self.total * 100 if self.total > 0 else 0.0

    def _loc_share(self, part: int) -> Optional[float]:
        return part / self.total_additions * 100 if self.has_loc_data else None

    @property
    def human_percentage(self) -> float:
        return self._share(self.human)

    @property
    def ai_percentage(self) -> float:
        return self._share(self.ai)

    @property
    def automation_percentage(self) -> float:
        return self._share(self.automation)

    @property
    def loc_human_percentage(self) -> Optional[float]:
        return self._loc_share(self.human_additions)

    @property
    def loc_ai_percentage(self) -> Optional[float]:
        return self._loc_share(self.ai_additions)

    @property
    def loc_automation_percentage(self) -> Optional[float]:
        return self._loc_share(self.automation_additions)

    def to_dict(self) -> dict[str, Any]:
        """Wire form; percentages are display strings, LOC ones ``None`` without data."""

        def loc(value: Optional[float]) -> Optional[str]:
            return None if value is None else format_percentage(value)

        return {
            "totals": {
                "human": self.human,
                "ai": self.ai,
                "automation": self.automation,
                "total": self.total,
            },
            "humanPercentage": format_percentage(self.human_percentage),
            "aiPercentage": format_percentage(self.ai_percentage),
            "automationPercentage": format_percentage(self.automation_percentage),
            "trend": self.trend,
            "locTotals": {
                "humanAdditions": self.human_additions,
                "aiAdditions": self.ai_additions,
                "automationAdditions": self.automation_additions,
                "totalAdditions": self.total_additions,
            },
            "locHumanPercentage": loc(self.loc_human_percentage),
            "locAiPercentage": loc(self.loc_ai_percentage),
            "locAutomationPercentage": loc(self.loc_automation_percentage),
            "hasLocData": self.has_loc_data,
            "toolBreakdown": {name: t.to_dict() for name, t in self.tools.items()},
            "botBreakdown": {name: {"commits": n} for name, n in self.bots.items()},
        }


def _ai_commits(week: Mapping[str, Any]) -> int:
    return sum(week[name] for name in AI_FIELDS)


def ai_trend(weeks: list[dict[str, Any]], window: int = TREND_WEEKS) -> int:
    """Percent change in AI commits, last *window* buckets vs the *window* before.

    Buckets are counted by position, not calendar distance. Returns 0 when
    the earlier window has no AI commits (including when it is empty).
    Halves round up.
    """
    recent = sum(_ai_commits(w) for w in weeks[-window:])
    previous = sum(_ai_commits(w) for w in weeks[-2 * window : -window])
    if previous <= 0:
        return 0
    return math.floor((recent - previous) / previous * 100 + 0.5)


def summarize_weekly_stats(rows: Iterable[Mapping[str, Any]]) -> WeeklySummary:
    """Human / AI / automation totals and shares for stored weekly buckets."""
    weeks = combine_weekly_stats(rows)
    summary = WeeklySummary(
        tools={name: ToolTotals() for name in AI_FIELDS},
        bots={name: 0 for name in AUTOMATION_FIELDS},
    )

    for week in weeks:
        ai_adds = 0
        for name in AI_FIELDS:
            tool = summary.tools[name]
            tool.commits += week[name]
            tool.additions += week[_AI_ADDITIONS[name]]
            ai_adds += week[_AI_ADDITIONS[name]]
        for name in AUTOMATION_FIELDS:
            summary.bots[name] += week[name]

        human_adds = week["humanAdditions"]
        total_adds = week["totalAdditions"]
        summary.human += week["human"]
        summary.ai += _ai_commits(week)
        summary.automation += sum(week[name] for name in AUTOMATION_FIELDS)
        summary.human_additions += human_adds
        summary.ai_additions += ai_adds
        summary.automation_additions += max(0, total_adds - human_adds - ai_adds)
        summary.total_additions += total_adds

    summary.trend = ai_trend(weeks)
    return summary
