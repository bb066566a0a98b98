"""Known bot identities and AI markers for first-pass commit classification.

Bot patterns are matched against author login, author name and email, in
order, so more specific patterns come first and the generic ``[bot]`` /
``-bot`` catch-alls come last.
"""

from __future__ import annotations

import re
from typing import Optional

from .taxonomy import Classification

_I = re.IGNORECASE

_C = Classification

# Shared AI review agent mappings (login, co-author and message forms).
_AI_REVIEW_LOGIN_PATTERNS: tuple[tuple[re.Pattern[str], Classification], ...] = (
    (re.compile(r"coderabbit", _I), _C.AI_ASSISTED),
    (re.compile(r"seer-by-sentry", _I), _C.AI_ASSISTED),
    (re.compile(r"sentry-ai-review", _I), _C.AI_ASSISTED),
    (re.compile(r"qodo", _I), _C.AI_ASSISTED),
    (re.compile(r"greptile", _I), _C.AI_ASSISTED),
    (re.compile(r"korbit-ai", _I), _C.AI_ASSISTED),
)

_AI_REVIEW_COAUTHOR_PATTERNS: tuple[tuple[re.Pattern[str], Classification], ...] = (
    (re.compile(r"coderabbit", _I), _C.AI_ASSISTED),
    (re.compile(r"seer-by-sentry|seer by sentry", _I), _C.AI_ASSISTED),
    (re.compile(r"qodo", _I), _C.AI_ASSISTED),
    (re.compile(r"greptile", _I), _C.AI_ASSISTED),
    (re.compile(r"korbit", _I), _C.AI_ASSISTED),
)

_AI_REVIEW_MESSAGE_PATTERNS: tuple[tuple[re.Pattern[str], Classification], ...] = (
    (re.compile(r"Generated by CodeRabbit", _I), _C.AI_ASSISTED),
    (re.compile(r"Fixes? (?:suggested|generated) by Seer", _I), _C.AI_ASSISTED),
    (re.compile(r"Generated by Qodo", _I), _C.AI_ASSISTED),
    (re.compile(r"Generated by Greptile", _I), _C.AI_ASSISTED),
)

KNOWN_BOT_PATTERNS: tuple[tuple[re.Pattern[str], Classification], ...] = (
    # Dependency management
    (re.compile(r"dependabot", _I), _C.DEPENDABOT),
    (re.compile(r"renovate", _I), _C.RENOVATE),
    (re.compile(r"greenkeeper", _I), _C.OTHER_BOT),
    (re.compile(r"snyk-bot", _I), _C.OTHER_BOT),
    # Community / org bots
    (re.compile(r"clawdhub", _I), _C.OTHER_BOT),
    (re.compile(r"blog-post-bot", _I), _C.OTHER_BOT),
    (re.compile(r"smithery", _I), _C.OTHER_BOT),
    (re.compile(r"expo-bot|expo\[bot\]", _I), _C.OTHER_BOT),
    # AI coding agents
    (re.compile(r"^cursoragent$", _I), _C.CURSOR),
    (re.compile(r"cursoragent@cursor\.com", _I), _C.CURSOR),
    (re.compile(r"^cursor[- ]?agent$", _I), _C.CURSOR),
    (re.compile(r"copilot-swe-agent", _I), _C.COPILOT),
    (re.compile(r"copilot", _I), _C.COPILOT),
    (re.compile(r"devin-ai-integration", _I), _C.DEVIN),
    (re.compile(r"devin-ai", _I), _C.DEVIN),
    (re.compile(r"^devin$", _I), _C.DEVIN),
    (re.compile(r"chatgpt-codex-connector", _I), _C.OPENAI_CODEX),
    (re.compile(r"^codex$", _I), _C.OPENAI_CODEX),
    (re.compile(r"gemini-code-assist", _I), _C.GEMINI),
    (re.compile(r"amazon-q-developer", _I), _C.AI_ASSISTED),
    (re.compile(r"sweep\[bot\]", _I), _C.AI_ASSISTED),
    # AI review agents
    *_AI_REVIEW_LOGIN_PATTERNS,
    # Sentry automation (non-AI)
    (re.compile(r"sentry-bot", _I), _C.OTHER_BOT),
    (re.compile(r"sentry\[bot\]", _I), _C.OTHER_BOT),
    # AI coding tools that may register as bot accounts
    (re.compile(r"codeium", _I), _C.AI_ASSISTED),
    (re.compile(r"windsurf", _I), _C.AI_ASSISTED),
    (re.compile(r"\bcody\b", _I), _C.AI_ASSISTED),
    (re.compile(r"tabnine", _I), _C.AI_ASSISTED),
    (re.compile(r"continue-dev", _I), _C.AI_ASSISTED),
    (re.compile(r"replit-agent", _I), _C.AI_ASSISTED),
    (re.compile(r"^replit$", _I), _C.AI_ASSISTED),
    (re.compile(r"bolt-agent", _I), _C.AI_ASSISTED),
    (re.compile(r"^v0$", _I), _C.AI_ASSISTED),
    (re.compile(r"v0-bot", _I), _C.AI_ASSISTED),
    (re.compile(r"blackbox-ai", _I), _C.AI_ASSISTED),
    # CI/CD
    (re.compile(r"github-actions", _I), _C.GITHUB_ACTIONS),
    (re.compile(r"^actions$", _I), _C.GITHUB_ACTIONS),
    # Other common bots
    (re.compile(r"imgbot", _I), _C.OTHER_BOT),
    (re.compile(r"codecov", _I), _C.OTHER_BOT),
    (re.compile(r"sonarcloud", _I), _C.OTHER_BOT),
    (re.compile(r"allcontributors", _I), _C.OTHER_BOT),
    (re.compile(r"semantic-release-bot", _I), _C.OTHER_BOT),
    (re.compile(r"release-please", _I), _C.OTHER_BOT),
    (re.compile(r"mergify", _I), _C.OTHER_BOT),
    (re.compile(r"stale\[bot\]", _I), _C.OTHER_BOT),
    (re.compile(r"vercel\[bot\]", _I), _C.OTHER_BOT),
    (re.compile(r"netlify\[bot\]", _I), _C.OTHER_BOT),
    (re.compile(r"changeset-bot", _I), _C.OTHER_BOT),
    (re.compile(r"kodiakhq", _I), _C.OTHER_BOT),
    (re.compile(r"auto-merge", _I), _C.OTHER_BOT),
    # Generic catch-alls (keep last)
    (re.compile(r"\[bot\]$", _I), _C.OTHER_BOT),
    (re.compile(r"^bot-", _I), _C.OTHER_BOT),
    (re.compile(r"-bot$", _I), _C.OTHER_BOT),
    (re.compile(r"-bot\b", _I), _C.OTHER_BOT),
)

# Any of these in a Co-authored-by trailer marks the commit as AI-assisted.
CO_AUTHOR_AI_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"noreply@anthropic\.com", _I),
    re.compile(r"\bclaude\b", _I),
    re.compile(r"cursoragent@cursor\.com", _I),
    re.compile(r"\bcursor\b", _I),
    re.compile(r"codex@openai\.com", _I),
    re.compile(r"\bcodex\b", _I),
    re.compile(r"\bcopilot\b", _I),
    re.compile(r"noreply@aider\.chat", _I),
    re.compile(r"\baider\b", _I),
    re.compile(r"codeium", _I),
    re.compile(r"windsurf", _I),
    re.compile(r"gemini-code-assist", _I),
    re.compile(r"\bgemini\b", _I),
    re.compile(r"amazon-q-developer", _I),
    re.compile(r"devin-ai", _I),
    re.compile(r"\bdevin\b", _I),
    re.compile(r"tabnine", _I),
    re.compile(r"\bcody\b", _I),
    re.compile(r"continue\.dev", _I),
    re.compile(r"sweep", _I),
    re.compile(r"\bclawd\b", _I),
    *(pattern for pattern, _ in _AI_REVIEW_COAUTHOR_PATTERNS),
)

_CO_AUTHOR_CLASSIFICATION_PATTERNS: tuple[tuple[re.Pattern[str], Classification], ...] = (
    (re.compile(r"cursoragent@cursor\.com", _I), _C.CURSOR),
    (re.compile(r"\bcursor\b", _I), _C.CURSOR),
    (re.compile(r"noreply@anthropic\.com", _I), _C.CLAUDE),
    (re.compile(r"\bclaude\b", _I), _C.CLAUDE),
    (re.compile(r"\bcopilot\b", _I), _C.COPILOT),
    (re.compile(r"codex@openai\.com", _I), _C.OPENAI_CODEX),
    (re.compile(r"\bcodex\b", _I), _C.OPENAI_CODEX),
    (re.compile(r"noreply@aider\.chat", _I), _C.AIDER),
    (re.compile(r"\baider\b", _I), _C.AIDER),
    (re.compile(r"gemini-code-assist", _I), _C.GEMINI),
    (re.compile(r"\bgemini\b", _I), _C.GEMINI),
    (re.compile(r"devin-ai", _I), _C.DEVIN),
    (re.compile(r"\bdevin\b", _I), _C.DEVIN),
    *_AI_REVIEW_COAUTHOR_PATTERNS,
)

_MESSAGE_MARKER_CLASSIFICATION_PATTERNS: tuple[tuple[re.Pattern[str], Classification], ...] = (
    (re.compile(r"Generated with Cursor", _I), _C.CURSOR),
    (re.compile(r"\[Cursor\]", _I), _C.CURSOR),
    (re.compile(r"Generated with Claude", _I), _C.CLAUDE),
    (re.compile(r"Generated by GitHub Copilot", _I), _C.COPILOT),
    (re.compile(r"Generated by Copilot", _I), _C.COPILOT),
    (re.compile(r"^aider:", _I | re.MULTILINE), _C.AIDER),
    (re.compile(r"Generated by Gemini", _I), _C.GEMINI),
    *_AI_REVIEW_MESSAGE_PATTERNS,
)

COMMIT_MESSAGE_AI_MARKERS: tuple[re.Pattern[str], ...] = (
    re.compile(r"Generated with Claude Code", _I),
    re.compile(r"Generated with Claude", _I),
    re.compile(r"Generated with Cursor", _I),
    re.compile(r"\[Cursor\]", _I),
    re.compile(r"Generated by Windsurf", _I),
    re.compile(r"Generated by GitHub Copilot", _I),
    re.compile(r"Generated by Gemini", _I),
    re.compile(r"^aider:", _I | re.MULTILINE),
    re.compile(r"\bAI[- ]generated\b", _I),
    re.compile(r"\bgenerated by AI\b", _I),
    *(pattern for pattern, _ in _AI_REVIEW_MESSAGE_PATTERNS),
)

AUTHOR_NAME_AI_PATTERNS: tuple[re.Pattern[str], ...] = (re.compile(r"\(aider\)$", _I),)

_CO_AUTHOR_TRAILER = re.compile(r"Co-Authored-By:\s*(.+)", _I)
_SQUASH_PR_SUFFIX = re.compile(r"\(#(\d+)\)\s*$")
_MERGE_PR_PREFIX = re.compile(r"^Merge pull request #(\d+)")


def extract_co_authors(message: str) -> list[str]:
    """Values of every ``Co-authored-by:`` trailer in *message*."""
    return [m.group(1).strip() for m in _CO_AUTHOR_TRAILER.finditer(message)]


def match_bot_pattern(value: str) -> Optional[Classification]:
    for pattern, classification in KNOWN_BOT_PATTERNS:
        if pattern.search(value):
            return classification
    return None


def has_ai_co_author(co_authors: list[str]) -> bool:
    return any(p.search(ca) for ca in co_authors for p in CO_AUTHOR_AI_PATTERNS)


def classify_ai_co_author(co_authors: list[str]) -> Optional[Classification]:
    """Specific tool named by the first identifiable AI co-author."""
    for ca in co_authors:
        for pattern, classification in _CO_AUTHOR_CLASSIFICATION_PATTERNS:
            if pattern.search(ca):
                return classification
    return None


def has_ai_message_marker(message: str) -> bool:
    return any(p.search(message) for p in COMMIT_MESSAGE_AI_MARKERS)


def classify_ai_message_marker(message: str) -> Optional[Classification]:
    for pattern, classification in _MESSAGE_MARKER_CLASSIFICATION_PATTERNS:
        if pattern.search(message):
            return classification
    return None


def has_ai_author_name(author_name: str) -> bool:
    return any(p.search(author_name) for p in AUTHOR_NAME_AI_PATTERNS)


def extract_pr_number(message: str) -> Optional[int]:
    """PR number referenced by a squash-merge or merge commit subject.

    Recognises ``"Subject (#123)"`` and ``"Merge pull request #123 from ..."``.
    """
    first_line = message.split("\n", 1)[0]
    squash = _SQUASH_PR_SUFFIX.search(first_line)
    if squash:
        return int(squash.group(1))
    merge = _MERGE_PR_PREFIX.match(first_line)
    if merge:
        return int(merge.group(1))
    return None
