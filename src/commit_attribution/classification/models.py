"""Attribution records exchanged with the ingestion and query layers.

Python attributes are snake_case; ``to_dict`` / ``from_dict`` use the
camelCase field names of the wire contract (``totalCommits``,
``commitCount``, ...), which downstream consumers depend on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Optional

Lane = Literal["ai", "automation"]

LANE_AI: Lane = "ai"
LANE_AUTOMATION: Lane = "automation"


@dataclass(frozen=True)
class AttributionSignal:
    """One commit's or one PR's worth of attribution context.

    ``classification`` stays a raw string so unrecognised values reach the
    classifier, which maps them to no attribution.
    """

    classification: str
    login: Optional[str] = None
    body: Optional[str] = None
    branch: Optional[str] = None
    labels: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AttributionSignal":
        return cls(**_signal_kwargs(data))


@dataclass(frozen=True)
class AggregateInput(AttributionSignal):
    """An attribution signal carrying the number of commits it covers."""

    commit_count: Any = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AggregateInput":
        return cls(commit_count=data.get("commitCount", 0), **_signal_kwargs(data))


@dataclass(frozen=True)
class AttributionMatch:
    """Resolved tool or bot identity for a signal."""

    key: str
    label: str
    lane: Lane

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "label": self.label, "lane": self.lane}


@dataclass
class BreakdownItem:
    key: str
    label: str
    lane: Lane
    commits: int | float = 0

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "label": self.label, "lane": self.lane, "commits": self.commits}


@dataclass
class AttributionSummary:
    """Aggregate attribution for a batch of signals.

    Invariants: ``total_commits == ai_commits + automation_commits`` and
    ``sum(item.commits for item in breakdown) == total_commits``.
    """

    total_commits: int | float = 0
    ai_commits: int | float = 0
    automation_commits: int | float = 0
    breakdown: list[BreakdownItem] = field(default_factory=list)
    computed_at: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalCommits": self.total_commits,
            "aiCommits": self.ai_commits,
            "automationCommits": self.automation_commits,
            "breakdown": [item.to_dict() for item in self.breakdown],
            "computedAt": self.computed_at,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AttributionSummary":
        return cls(
            total_commits=data.get("totalCommits", 0),
            ai_commits=data.get("aiCommits", 0),
            automation_commits=data.get("automationCommits", 0),
            breakdown=[
                BreakdownItem(
                    key=item["key"],
                    label=item["label"],
                    lane=item["lane"],
                    commits=item.get("commits", 0),
                )
                for item in data.get("breakdown", [])
            ],
            computed_at=data.get("computedAt", 0),
        )


def _signal_kwargs(data: Mapping[str, Any]) -> dict[str, Any]:
    labels = data.get("labels") or ()
    return {
        "classification": data.get("classification", ""),
        "login": data.get("login"),
        "body": data.get("body"),
        "branch": data.get("branch"),
        "labels": tuple(str(label) for label in labels),
    }
