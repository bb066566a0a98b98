"""Per-commit AI tool and bot breakdowns stored on each repository."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from .known_bots import CO_AUTHOR_AI_PATTERNS
from .models import LANE_AI
from .registry import (
    DETAILED_AI_PATTERNS,
    DETAILED_BOT_PATTERNS,
    FIXED_CLASSIFICATION_MATCH,
    UNKNOWN_AI_KEY,
    UNKNOWN_AUTOMATION_KEY,
    find_pattern_match,
)
from .taxonomy import Classification, parse_classification

UNSPECIFIED_AI_LABEL = "Unspecified AI Assistant"
UNSPECIFIED_BOT_LABEL = "Unspecified Bot"


@dataclass(frozen=True)
class BreakdownCommit:
    """The commit fields the breakdown looks at."""

    classification: str
    author_login: Optional[str] = None
    author_name: Optional[str] = None
    author_email: Optional[str] = None
    message: str = ""
    co_authors: tuple[str, ...] = ()
    additions: int = 0


@dataclass
class AiToolStat:
    key: str
    label: str
    commits: int = 0
    additions: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "label": self.label, "commits": self.commits, "additions": self.additions}


@dataclass
class BotToolStat:
    key: str
    label: str
    commits: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "label": self.label, "commits": self.commits}


@dataclass
class DetailedBreakdowns:
    tool_breakdown: list[AiToolStat] = field(default_factory=list)
    bot_breakdown: list[BotToolStat] = field(default_factory=list)


def normalize_identity(source: str) -> Optional[tuple[str, str]]:
    """Turn an account or co-author string into ``(slug, label)``.

    ``"renovate-approve[bot]"`` -> ``("renovate-approve", "Renovate Approve")``.
    Email parts in angle brackets and a leading ``@`` are dropped.
    """
    raw = re.sub(r"\[bot\]", "", source.strip(), flags=re.IGNORECASE)
    raw = re.sub(r"^@", "", raw)
    raw = re.sub(r"<[^>]*>", "", raw).strip()
    if not raw:
        return None

    slug = re.sub(r"[^a-z0-9]+", "-", raw.lower()).strip("-")
    if not slug:
        return None

    parts = re.sub(r"[_-]+", " ", raw).split()
    label = " ".join(part[:1].upper() + part[1:] for part in parts)
    if not label:
        return None

    return slug, label


def _haystack(commit: BreakdownCommit) -> str:
    parts = [
        commit.author_login,
        commit.author_name,
        commit.author_email,
        commit.message,
        *commit.co_authors,
    ]
    return "\n".join(part for part in parts if part)


def _classify_ai(commit: BreakdownCommit) -> tuple[str, str]:
    rule = find_pattern_match(_haystack(commit), DETAILED_AI_PATTERNS)
    if rule:
        return rule.key, rule.label

    # The author of an ai-assisted commit is the human who used the tool, so
    # the identity can only come from an AI co-author, never the author.
    for co_author in commit.co_authors:
        rule = find_pattern_match(co_author, DETAILED_AI_PATTERNS)
        if rule:
            return rule.key, rule.label
        if any(p.search(co_author) for p in CO_AUTHOR_AI_PATTERNS):
            normalized = normalize_identity(co_author)
            if normalized:
                slug, label = normalized
                return f"ai-{slug}", label

    return UNKNOWN_AI_KEY, UNSPECIFIED_AI_LABEL


def _classify_bot(commit: BreakdownCommit) -> tuple[str, str]:
    rule = find_pattern_match(_haystack(commit), DETAILED_BOT_PATTERNS)
    if rule:
        return rule.key, rule.label

    identity = commit.author_login or commit.author_name or commit.author_email
    if not identity and commit.co_authors:
        identity = commit.co_authors[0]
    normalized = normalize_identity(identity) if identity else None
    if normalized:
        slug, label = normalized
        return f"bot-{slug}", label

    return UNKNOWN_AUTOMATION_KEY, UNSPECIFIED_BOT_LABEL


def build_detailed_breakdowns(commits: Iterable[BreakdownCommit]) -> DetailedBreakdowns:
    """Count commits per AI tool and per bot.

    Human commits and unknown classifications are skipped. AI tools sort by
    commits, then additions (both descending), then label; bots by commits
    then label.
    """
    ai: dict[str, AiToolStat] = {}
    bots: dict[str, BotToolStat] = {}

    for commit in commits:
        classification = parse_classification(commit.classification)
        if classification is None or classification is Classification.HUMAN:
            continue

        fixed = FIXED_CLASSIFICATION_MATCH.get(classification.value)
        if fixed is not None:
            is_ai = fixed.lane == LANE_AI
            key, label = fixed.key, fixed.label
        elif classification is Classification.AI_ASSISTED:
            is_ai = True
            key, label = _classify_ai(commit)
        elif classification is Classification.OTHER_BOT:
            is_ai = False
            key, label = _classify_bot(commit)
        else:
            continue

        if is_ai:
            stat = ai.setdefault(key, AiToolStat(key, label))
            stat.commits += 1
            stat.additions += commit.additions or 0
        else:
            bot = bots.setdefault(key, BotToolStat(key, label))
            bot.commits += 1

    return DetailedBreakdowns(
        tool_breakdown=sorted(
            ai.values(), key=lambda s: (-s.commits, -s.additions, s.label.casefold(), s.label)
        ),
        bot_breakdown=sorted(bots.values(), key=lambda s: (-s.commits, s.label.casefold(), s.label)),
    )
