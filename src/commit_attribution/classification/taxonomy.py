"""Commit classification taxonomy.

Every commit carries exactly one ``Classification``. The enum is closed: each
member maps to the stat-bucket field that counts it and to the coarse
category (human / ai / automation) used by daily buckets and summaries.
Adding a member without extending both tables fails at import time.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional


class Classification(str, Enum):
    """Commit classification values, as stored and sent over the wire."""

    HUMAN = "human"
    DEPENDABOT = "dependabot"
    RENOVATE = "renovate"
    COPILOT = "copilot"
    CLAUDE = "claude"
    CURSOR = "cursor"
    AIDER = "aider"
    DEVIN = "devin"
    OPENAI_CODEX = "openai-codex"
    GEMINI = "gemini"
    GITHUB_ACTIONS = "github-actions"
    OTHER_BOT = "other-bot"
    AI_ASSISTED = "ai-assisted"

    def __str__(self) -> str:
        return self.value


class Category(str, Enum):
    """Coarse three-way split used by daily buckets."""

    HUMAN = "human"
    AI = "ai"
    AUTOMATION = "automation"


STAT_FIELDS: Mapping[Classification, str] = MappingProxyType(
    {
        Classification.HUMAN: "human",
        Classification.DEPENDABOT: "dependabot",
        Classification.RENOVATE: "renovate",
        Classification.COPILOT: "copilot",
        Classification.CLAUDE: "claude",
        Classification.CURSOR: "cursor",
        Classification.AIDER: "aider",
        Classification.DEVIN: "devin",
        Classification.OPENAI_CODEX: "openaiCodex",
        Classification.GEMINI: "gemini",
        Classification.GITHUB_ACTIONS: "githubActions",
        Classification.OTHER_BOT: "otherBot",
        Classification.AI_ASSISTED: "aiAssisted",
    }
)

CATEGORIES: Mapping[Classification, Category] = MappingProxyType(
    {
        Classification.HUMAN: Category.HUMAN,
        Classification.DEPENDABOT: Category.AUTOMATION,
        Classification.RENOVATE: Category.AUTOMATION,
        Classification.COPILOT: Category.AI,
        Classification.CLAUDE: Category.AI,
        Classification.CURSOR: Category.AI,
        Classification.AIDER: Category.AI,
        Classification.DEVIN: Category.AI,
        Classification.OPENAI_CODEX: Category.AI,
        Classification.GEMINI: Category.AI,
        Classification.GITHUB_ACTIONS: Category.AUTOMATION,
        Classification.OTHER_BOT: Category.AUTOMATION,
        Classification.AI_ASSISTED: Category.AI,
    }
)

_missing = (set(Classification) - set(STAT_FIELDS)) | (set(Classification) - set(CATEGORIES))
if _missing:
    raise RuntimeError(f"Classification members without a mapping: {sorted(m.value for m in _missing)}")

# Classifications whose weekly buckets also track lines added.
ADDITIONS_TRACKED: tuple[Classification, ...] = (
    Classification.HUMAN,
    Classification.COPILOT,
    Classification.CLAUDE,
    Classification.CURSOR,
    Classification.AIDER,
    Classification.DEVIN,
    Classification.OPENAI_CODEX,
    Classification.GEMINI,
    Classification.AI_ASSISTED,
)

AI_CLASSIFICATIONS: frozenset[Classification] = frozenset(
    c for c, cat in CATEGORIES.items() if cat is Category.AI
)
AUTOMATION_CLASSIFICATIONS: frozenset[Classification] = frozenset(
    c for c, cat in CATEGORIES.items() if cat is Category.AUTOMATION
)


def parse_classification(value: object) -> Optional[Classification]:
    """Return the ``Classification`` for *value*, or ``None`` if unrecognised."""
    if isinstance(value, Classification):
        return value
    try:
        return Classification(value)
    except (TypeError, ValueError):
        return None


def stat_field(classification: Classification) -> str:
    """Weekly stat-bucket field name counting *classification*."""
    return STAT_FIELDS[classification]


def additions_field(classification: Classification) -> Optional[str]:
    """Weekly additions field for *classification*, if it tracks one."""
    if classification not in ADDITIONS_TRACKED:
        return None
    return f"{STAT_FIELDS[classification]}Additions"


def category_of(classification: Classification) -> Category:
    return CATEGORIES[classification]


def can_reclassify(current: object, proposed: object) -> bool:
    """Upgrade-only transition rule for stored classifications.

    Only ``human`` commits may be retagged, and only to a non-human value.
    Every other transition is a no-op for callers.
    """
    cur = parse_classification(current)
    new = parse_classification(proposed)
    if cur is None or new is None:
        return False
    return cur is Classification.HUMAN and new is not Classification.HUMAN
