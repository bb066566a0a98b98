"""Find synced repos whose breakdowns fell back to the unspecified buckets.

Such repos were classified before a pattern for their tool or bot existed
(or before breakdowns were stored at all) and are candidates for a resync.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from typing import Any

from .classification.registry import UNKNOWN_AI_KEY, UNKNOWN_AUTOMATION_KEY
from .exceptions import StoreError
from .persistence.reader import list_repo_breakdowns


@dataclass(frozen=True)
class UnspecifiedEntry:
    full_name: str
    commits: int
    additions: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"fullName": self.full_name, "commits": self.commits, "additions": self.additions}


@dataclass
class UnspecifiedReport:
    unspecified_ai: list[UnspecifiedEntry] = field(default_factory=list)
    unspecified_bot: list[UnspecifiedEntry] = field(default_factory=list)
    missing_breakdown: list[str] = field(default_factory=list)

    @property
    def resync_candidates(self) -> list[str]:
        """Repos to resync: unspecified AI first, then missing breakdowns."""
        seen: dict[str, None] = {}
        for entry in self.unspecified_ai:
            seen.setdefault(entry.full_name)
        for name in self.missing_breakdown:
            seen.setdefault(name)
        return list(seen)

    @property
    def is_clean(self) -> bool:
        return not (self.unspecified_ai or self.unspecified_bot or self.missing_breakdown)

    def to_dict(self) -> dict[str, Any]:
        return {
            "unspecifiedAi": [e.to_dict() for e in self.unspecified_ai],
            "unspecifiedBot": [e.to_dict() for e in self.unspecified_bot],
            "missingBreakdown": list(self.missing_breakdown),
            "resyncCandidates": self.resync_candidates,
        }


def find_unspecified(conn: sqlite3.Connection, synced_status: str = "synced") -> UnspecifiedReport:
    """Scan synced repos for ``ai-unspecified`` / ``bot-unspecified`` entries.

    A repo with neither a tool nor a bot breakdown is reported as missing.
    Entries are sorted by commits, most first.
    """
    try:
        repos = list_repo_breakdowns(conn, synced_status)
    except sqlite3.Error as e:
        raise StoreError("find_unspecified", str(e), table="repos") from e

    report = UnspecifiedReport()
    for repo in repos:
        tools = repo["toolBreakdown"] or []
        bots = repo["botBreakdown"] or []
        for entry in tools:
            if entry.get("key") == UNKNOWN_AI_KEY:
                report.unspecified_ai.append(
                    UnspecifiedEntry(repo["fullName"], entry.get("commits", 0), entry.get("additions", 0))
                )
        for entry in bots:
            if entry.get("key") == UNKNOWN_AUTOMATION_KEY:
                report.unspecified_bot.append(UnspecifiedEntry(repo["fullName"], entry.get("commits", 0)))
        if not tools and not bots:
            report.missing_breakdown.append(repo["fullName"])

    report.unspecified_ai.sort(key=lambda e: -e.commits)
    report.unspecified_bot.sort(key=lambda e: -e.commits)
    return report
