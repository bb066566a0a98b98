"""Pattern registry: known AI tool and automation bot identities.

Two-tier resolution. Classifications that the commit-level detector already
pinned precisely (``copilot``, ``dependabot``, ...) resolve through
``FIXED_CLASSIFICATION_MATCH`` without looking at any text. The generic
``ai-assisted`` and ``other-bot`` buckets are refined by testing the ordered
pattern lists below against PR-level evidence.

Pattern order is load-bearing: the first pattern that matches wins, so more
specific identities must stay ahead of broader ones. Reordering changes
historical attributions.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from .models import LANE_AI, LANE_AUTOMATION, AttributionMatch
from .taxonomy import Classification


@dataclass(frozen=True)
class PatternRule:
    """Case-insensitive regex that identifies one tool or bot."""

    pattern: re.Pattern[str]
    key: str
    label: str

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


def _rule(regex: str, key: str, label: str) -> PatternRule:
    return PatternRule(re.compile(regex, re.IGNORECASE), key, label)


UNKNOWN_AI_KEY = "ai-unspecified"
UNKNOWN_AI_LABEL = "Unknown AI Assistant"
UNKNOWN_AUTOMATION_KEY = "bot-unspecified"
UNKNOWN_AUTOMATION_LABEL = "Unknown Automation Bot"

UNKNOWN_AI_MATCH = AttributionMatch(UNKNOWN_AI_KEY, UNKNOWN_AI_LABEL, LANE_AI)
UNKNOWN_AUTOMATION_MATCH = AttributionMatch(
    UNKNOWN_AUTOMATION_KEY, UNKNOWN_AUTOMATION_LABEL, LANE_AUTOMATION
)

FIXED_CLASSIFICATION_MATCH: Mapping[str, AttributionMatch] = MappingProxyType(
    {
        Classification.COPILOT.value: AttributionMatch("github-copilot", "GitHub Copilot", LANE_AI),
        Classification.CLAUDE.value: AttributionMatch("claude-code", "Claude Code", LANE_AI),
        Classification.CURSOR.value: AttributionMatch("cursor", "Cursor", LANE_AI),
        Classification.AIDER.value: AttributionMatch("aider", "Aider", LANE_AI),
        Classification.DEVIN.value: AttributionMatch("devin", "Devin", LANE_AI),
        Classification.OPENAI_CODEX.value: AttributionMatch("openai-codex", "OpenAI Codex", LANE_AI),
        Classification.GEMINI.value: AttributionMatch("gemini", "Gemini", LANE_AI),
        Classification.DEPENDABOT.value: AttributionMatch("dependabot", "Dependabot", LANE_AUTOMATION),
        Classification.RENOVATE.value: AttributionMatch("renovate", "Renovate", LANE_AUTOMATION),
        Classification.GITHUB_ACTIONS.value: AttributionMatch(
            "github-actions", "GitHub Actions", LANE_AUTOMATION
        ),
    }
)

# AI code-review agents. Shared by PR attribution and the per-commit breakdown.
AI_REVIEW_PATTERNS: tuple[PatternRule, ...] = (
    _rule(r"coderabbit(?:ai)?(?:\[bot\])?", "coderabbit", "CodeRabbit"),
    _rule(r"seer-by-sentry(?:\[bot\])?", "seer-by-sentry", "Seer by Sentry"),
    _rule(r"sentry-ai-review(?:er)?(?:\[bot\])?", "sentry-ai-reviewer", "Sentry AI Reviewer"),
    _rule(r"qodo(?:-merge(?:-pro)?)?(?:\[bot\])?", "qodo-merge", "Qodo Merge"),
    _rule(r"greptile(?:-apps)?(?:\[bot\])?", "greptile", "Greptile"),
    _rule(r"korbit-ai(?:\[bot\])?", "korbit-ai", "Korbit AI"),
)

_AI_TOOL_PATTERNS: tuple[PatternRule, ...] = (
    _rule(r"codeium", "codeium", "Codeium"),
    _rule(r"windsurf", "windsurf", "Windsurf"),
    _rule(r"sourcegraph|\bcody\b", "sourcegraph-cody", "Sourcegraph Cody"),
    _rule(r"tabnine", "tabnine", "Tabnine"),
    _rule(r"continue(?:-dev|\.dev)", "continue-dev", "Continue.dev"),
    _rule(r"replit(?:-agent)?", "replit-agent", "Replit Agent"),
    _rule(r"bolt(?:-agent)?", "bolt", "Bolt"),
    _rule(r"\bv0(?:-bot)?\b", "v0", "v0"),
    _rule(r"blackbox-ai", "blackbox-ai", "Blackbox AI"),
)

_AMAZON_Q = _rule(r"amazon-q(?:-developer)?", "amazon-q-developer", "Amazon Q Developer")
_SWEEP = _rule(r"sweep(?:\[bot\])?", "sweep", "Sweep")

AI_ASSISTED_PATTERNS: tuple[PatternRule, ...] = (
    *AI_REVIEW_PATTERNS,
    _AMAZON_Q,
    _SWEEP,
    *_AI_TOOL_PATTERNS,
)

# Bots without a fixed classification. The PR lane below prepends the
# dependency/CI bots so free-text evidence can still name them.
_OTHER_BOT_PATTERNS: tuple[PatternRule, ...] = (
    _rule(r"greenkeeper", "greenkeeper", "Greenkeeper"),
    _rule(r"snyk-bot|snyk", "snyk-bot", "Snyk Bot"),
    _rule(r"sentry-bot|sentry\[bot\]", "sentry-bot", "Sentry Bot"),
    _rule(r"imgbot", "imgbot", "Imgbot"),
    _rule(r"codecov", "codecov", "Codecov"),
    _rule(r"sonarcloud", "sonarcloud", "SonarCloud"),
    _rule(r"allcontributors", "all-contributors", "All Contributors"),
    _rule(r"semantic-release-bot|semantic-release", "semantic-release", "Semantic Release"),
    _rule(r"release-please", "release-please", "Release Please"),
    _rule(r"mergify", "mergify", "Mergify"),
    _rule(r"stale\[bot\]", "stale", "Stale"),
    _rule(r"vercel\[bot\]", "vercel", "Vercel Bot"),
    _rule(r"netlify\[bot\]", "netlify", "Netlify Bot"),
    _rule(r"changeset-bot|changesets?", "changesets", "Changesets"),
    _rule(r"kodiakhq|kodiak", "kodiak", "Kodiak"),
    _rule(r"auto-merge", "auto-merge", "Auto Merge"),
    _rule(r"clawdhub", "clawdhub", "ClawdHub"),
    _rule(r"blog-post-bot", "blog-post-bot", "Blog Post Bot"),
    _rule(r"smithery", "smithery", "Smithery"),
    _rule(r"expo-bot|expo\[bot\]", "expo-bot", "Expo Bot"),
)

AUTOMATION_PATTERNS: tuple[PatternRule, ...] = (
    _rule(r"dependabot", "dependabot", "Dependabot"),
    _rule(r"renovate", "renovate", "Renovate"),
    _rule(r"github-actions|^actions$", "github-actions", "GitHub Actions"),
    *_OTHER_BOT_PATTERNS,
)

# Per-commit breakdown lanes. Same identities, ordered for commit text
# (author login/name/email, message, co-authors) rather than PR evidence.
DETAILED_AI_PATTERNS: tuple[PatternRule, ...] = (
    _AMAZON_Q,
    _SWEEP,
    *AI_REVIEW_PATTERNS,
    *_AI_TOOL_PATTERNS,
    _rule(r"\bclawd\b", "clawd", "Clawd"),
)

DETAILED_BOT_PATTERNS: tuple[PatternRule, ...] = _OTHER_BOT_PATTERNS

# Every AI key the per-commit breakdown can emit, apart from co-author slugs.
KNOWN_AI_TOOL_KEYS: frozenset[str] = frozenset(
    [m.key for m in FIXED_CLASSIFICATION_MATCH.values() if m.lane == LANE_AI]
    + [rule.key for rule in DETAILED_AI_PATTERNS]
    + [UNKNOWN_AI_KEY]
)


def find_pattern_match(text: str, patterns: tuple[PatternRule, ...]) -> PatternRule | None:
    """Return the first rule in *patterns* that matches *text*."""
    if not text:
        return None
    for rule in patterns:
        if rule.matches(text):
            return rule
    return None
