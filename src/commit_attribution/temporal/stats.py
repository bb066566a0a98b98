"""Weekly, daily and contributor statistics computed from a repo's commits.

Buckets are plain dicts keyed by the wire field names listed in
``WEEKLY_COUNT_FIELDS`` / ``DAILY_COUNT_FIELDS``; the store schema and the
global recompute are built from the same lists.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from ..classification.taxonomy import (
    ADDITIONS_TRACKED,
    STAT_FIELDS,
    Category,
    Classification,
    additions_field,
    category_of,
    parse_classification,
)
from .weeks import day_start, week_label, week_start

WEEKLY_COUNT_FIELDS: tuple[str, ...] = (
    *(STAT_FIELDS[c] for c in Classification),
    "total",
    *(f"{STAT_FIELDS[c]}Additions" for c in ADDITIONS_TRACKED),
    "totalAdditions",
    "totalDeletions",
)

DAILY_COUNT_FIELDS: tuple[str, ...] = (
    "human",
    "ai",
    "automation",
    "humanAdditions",
    "aiAdditions",
    "automationAdditions",
)

_DAILY_ADDITIONS = {
    Category.HUMAN: "humanAdditions",
    Category.AI: "aiAdditions",
    Category.AUTOMATION: "automationAdditions",
}


@dataclass(frozen=True)
class CommitForStats:
    """Minimal commit shape needed for stats computation."""

    authored_at: int  # epoch ms
    classification: str
    additions: int = 0
    deletions: int = 0
    author_login: Optional[str] = None
    author_email: Optional[str] = None
    author_name: Optional[str] = None


@dataclass
class ContributorStatEntry:
    login: Optional[str]
    name: Optional[str]
    email: Optional[str]
    classification: str
    commit_count: int
    additions: int
    deletions: int
    first_commit_at: int
    last_commit_at: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "login": self.login,
            "name": self.name,
            "email": self.email,
            "classification": self.classification,
            "commitCount": self.commit_count,
            "additions": self.additions,
            "deletions": self.deletions,
            "firstCommitAt": self.first_commit_at,
            "lastCommitAt": self.last_commit_at,
        }


@dataclass
class RepoStats:
    weekly: list[dict[str, Any]] = field(default_factory=list)
    daily: list[dict[str, Any]] = field(default_factory=list)
    contributors: list[ContributorStatEntry] = field(default_factory=list)


def empty_weekly_bucket() -> dict[str, int]:
    return {name: 0 for name in WEEKLY_COUNT_FIELDS}


def empty_daily_bucket() -> dict[str, int]:
    return {name: 0 for name in DAILY_COUNT_FIELDS}


def _add_to_week(bucket: dict[str, int], classification: Classification, adds: int, dels: int) -> None:
    bucket[STAT_FIELDS[classification]] += 1
    bucket["total"] += 1
    adds_field = additions_field(classification)
    if adds_field is not None:
        bucket[adds_field] += adds
    bucket["totalAdditions"] += adds
    bucket["totalDeletions"] += dels


def _add_to_day(bucket: dict[str, int], classification: Classification, adds: int) -> None:
    category = category_of(classification)
    bucket[category.value] += 1
    bucket[_DAILY_ADDITIONS[category]] += adds


def _contributor_key(commit: CommitForStats) -> str:
    return commit.author_login or commit.author_email or commit.author_name or "unknown"


def compute_stats_from_commits(commits: Iterable[CommitForStats]) -> RepoStats:
    """Bucket commits by ISO week and UTC day, and roll up contributors.

    Commits with an unrecognised classification are skipped. Output lists
    are sorted by bucket key (contributors by first commit, then key).
    """
    weeks: dict[int, dict[str, int]] = {}
    days: dict[int, dict[str, int]] = {}
    contributors: dict[str, dict[str, Any]] = {}

    for commit in commits:
        classification = parse_classification(commit.classification)
        if classification is None:
            continue
        adds = commit.additions or 0
        dels = commit.deletions or 0

        week = weeks.setdefault(week_start(commit.authored_at), empty_weekly_bucket())
        _add_to_week(week, classification, adds, dels)

        day = days.setdefault(day_start(commit.authored_at), empty_daily_bucket())
        _add_to_day(day, classification, adds)

        key = _contributor_key(commit)
        contrib = contributors.get(key)
        if contrib is None:
            contributors[key] = {
                "login": commit.author_login,
                "name": commit.author_name,
                "email": commit.author_email,
                "counts": Counter({classification.value: 1}),
                "commit_count": 1,
                "additions": adds,
                "deletions": dels,
                "first": commit.authored_at,
                "last": commit.authored_at,
            }
            continue
        contrib["counts"][classification.value] += 1
        contrib["commit_count"] += 1
        contrib["additions"] += adds
        contrib["deletions"] += dels
        contrib["first"] = min(contrib["first"], commit.authored_at)
        contrib["last"] = max(contrib["last"], commit.authored_at)

    weekly = [
        {"weekStart": ws, "weekLabel": week_label(ws), **counts} for ws, counts in sorted(weeks.items())
    ]
    daily = [{"date": d, **counts} for d, counts in sorted(days.items())]

    contributor_entries = [
        ContributorStatEntry(
            login=c["login"],
            name=c["name"],
            email=c["email"],
            classification=_dominant(c["counts"]),
            commit_count=c["commit_count"],
            additions=c["additions"],
            deletions=c["deletions"],
            first_commit_at=c["first"],
            last_commit_at=c["last"],
        )
        for c in contributors.values()
    ]
    contributor_entries.sort(key=lambda e: (e.first_commit_at, e.login or e.email or e.name or ""))

    return RepoStats(weekly=weekly, daily=daily, contributors=contributor_entries)


def _dominant(counts: Counter) -> str:
    # Highest count wins; ties go to the classification seen first.
    best, best_count = Classification.HUMAN.value, 0
    for value, count in counts.items():
        if count > best_count:
            best, best_count = value, count
    return best
