"""Time bucketing and per-repository statistics."""

from .stats import (
    DAILY_COUNT_FIELDS,
    WEEKLY_COUNT_FIELDS,
    CommitForStats,
    ContributorStatEntry,
    RepoStats,
    compute_stats_from_commits,
)
from .summary import WeeklySummary, combine_weekly_stats, summarize_weekly_stats
from .weeks import day_start, parse_timestamp, week_label, week_start

__all__ = [
    "week_start",
    "week_label",
    "day_start",
    "parse_timestamp",
    "CommitForStats",
    "ContributorStatEntry",
    "RepoStats",
    "compute_stats_from_commits",
    "WEEKLY_COUNT_FIELDS",
    "DAILY_COUNT_FIELDS",
    "WeeklySummary",
    "combine_weekly_stats",
    "summarize_weekly_stats",
]
