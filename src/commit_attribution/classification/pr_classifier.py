"""PR-level evidence for squash- and merge-commit reclassification.

When an agent opens a PR that a human squash-merges, the resulting commit is
authored by the human and the first pass tags it ``human``. The PR itself
(author account, branch name, body, labels) still carries the agent's
fingerprints, and this module turns that evidence into reclassifications.
Reclassification is upgrade-only: see ``taxonomy.can_reclassify``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Sequence

from .known_bots import extract_pr_number
from .models import AggregateInput
from .taxonomy import Classification, can_reclassify

_I = re.IGNORECASE
_C = Classification

PR_BOT_PATTERNS: tuple[tuple[re.Pattern[str], Classification], ...] = (
    (re.compile(r"cursor[- ]?agent", _I), _C.CURSOR),
    (re.compile(r"copilot-swe-agent", _I), _C.COPILOT),
    (re.compile(r"copilot", _I), _C.COPILOT),
    (re.compile(r"devin-ai-integration", _I), _C.DEVIN),
    (re.compile(r"devin", _I), _C.DEVIN),
    (re.compile(r"sweep", _I), _C.AI_ASSISTED),
    (re.compile(r"gemini-code-assist", _I), _C.GEMINI),
    (re.compile(r"amazon-q-developer", _I), _C.AI_ASSISTED),
    (re.compile(r"chatgpt-codex-connector", _I), _C.OPENAI_CODEX),
    (re.compile(r"codex", _I), _C.OPENAI_CODEX),
    (re.compile(r"aider", _I), _C.AIDER),
    (re.compile(r"coderabbit", _I), _C.OTHER_BOT),
    (re.compile(r"sentry", _I), _C.OTHER_BOT),
    (re.compile(r"\[bot\]$", _I), _C.AI_ASSISTED),
)

PR_BODY_AI_PATTERNS: tuple[tuple[re.Pattern[str], Classification], ...] = (
    (re.compile(r"Generated with Cursor", _I), _C.CURSOR),
    (re.compile(r"\[Cursor\]", _I), _C.CURSOR),
    (re.compile(r"Generated with Claude Code", _I), _C.CLAUDE),
    (re.compile(r"Generated with Claude", _I), _C.CLAUDE),
    (re.compile(r"Generated by GitHub Copilot", _I), _C.COPILOT),
    (re.compile(r"Generated by Copilot", _I), _C.COPILOT),
    (re.compile(r"Created by Devin", _I), _C.DEVIN),
    (re.compile(r"aider", _I), _C.AIDER),
    (re.compile(r"gemini", _I), _C.GEMINI),
    (re.compile(r"codex", _I), _C.OPENAI_CODEX),
    (re.compile(r"Generated by Windsurf", _I), _C.AI_ASSISTED),
    (re.compile(r"Generated by CodeRabbit", _I), _C.OTHER_BOT),
    (re.compile(r"\bAI[- ]generated\b", _I), _C.AI_ASSISTED),
    (
        re.compile(
            r"Co-authored-by:.*(?:claude|copilot|cursor|codex|aider|anthropic|openai|cursoragent)", _I
        ),
        _C.AI_ASSISTED,
    ),
    (re.compile("\U0001f916 Generated with", _I), _C.AI_ASSISTED),
)

PR_BRANCH_AI_PATTERNS: tuple[tuple[re.Pattern[str], Classification], ...] = (
    (re.compile(r"^cursor/", _I), _C.CURSOR),
    (re.compile(r"^copilot/", _I), _C.COPILOT),
    (re.compile(r"^devin/", _I), _C.DEVIN),
    (re.compile(r"^codex/", _I), _C.OPENAI_CODEX),
    (re.compile(r"^openai-codex/", _I), _C.OPENAI_CODEX),
    (re.compile(r"^aider/", _I), _C.AIDER),
    (re.compile(r"^gemini/", _I), _C.GEMINI),
    (re.compile(r"^sweep/", _I), _C.AI_ASSISTED),
    (re.compile(r"^amazon-q/", _I), _C.AI_ASSISTED),
    (re.compile(r"^windsurf/", _I), _C.AI_ASSISTED),
    (re.compile(r"^coderabbit/", _I), _C.OTHER_BOT),
    (re.compile(r"^ai[-/]", _I), _C.AI_ASSISTED),
)

PR_LABEL_AI_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"ai[- ]generated", _I),
    re.compile(r"copilot", _I),
    re.compile(r"automated", _I),
)


@dataclass(frozen=True)
class PullRequest:
    """PR metadata relevant to attribution."""

    number: int
    author_login: str = ""
    author_type: str = "User"
    body: Optional[str] = None
    branch: Optional[str] = None
    labels: tuple[str, ...] = ()

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "PullRequest":
        """Build from a GitHub REST ``/pulls/{number}`` response."""
        user = data.get("user") or {}
        head = data.get("head") or {}
        return cls(
            number=int(data["number"]),
            author_login=user.get("login") or "",
            author_type=user.get("type") or "User",
            body=data.get("body"),
            branch=head.get("ref"),
            labels=tuple(label.get("name", "") for label in data.get("labels") or ()),
        )


@dataclass(frozen=True)
class HumanCommit:
    """A stored commit currently tagged ``human``."""

    commit_id: int
    message: str


@dataclass(frozen=True)
class Reclassification:
    commit_id: int
    classification: Classification


def _first(patterns: Iterable[tuple[re.Pattern[str], Classification]], text: str) -> Optional[Classification]:
    for pattern, classification in patterns:
        if pattern.search(text):
            return classification
    return None


def classify_pr_author(pr: PullRequest) -> Optional[Classification]:
    """Classification implied by a PR, or ``None`` when it looks human.

    Checks, in order: bot author account, known agent logins, branch name,
    body markers, labels. Bot accounts that match no known pattern count
    as ``ai-assisted``.
    """
    login_match = _first(PR_BOT_PATTERNS, pr.author_login)
    if pr.author_type == "Bot":
        return login_match or Classification.AI_ASSISTED
    if login_match:
        return login_match

    branch_match = _first(PR_BRANCH_AI_PATTERNS, pr.branch or "")
    if branch_match:
        return branch_match

    body_match = _first(PR_BODY_AI_PATTERNS, pr.body or "")
    if body_match:
        return body_match

    for label in pr.labels:
        if any(p.search(label) for p in PR_LABEL_AI_PATTERNS):
            return Classification.AI_ASSISTED

    return None


def group_commits_by_pr(commits: Iterable[HumanCommit]) -> dict[int, list[int]]:
    """Map PR number -> ids of the commits that reference it."""
    by_pr: dict[int, list[int]] = {}
    for commit in commits:
        number = extract_pr_number(commit.message)
        if number is not None:
            by_pr.setdefault(number, []).append(commit.commit_id)
    return by_pr


def plan_reclassifications(
    commits: Iterable[HumanCommit], pull_requests: Mapping[int, PullRequest]
) -> list[Reclassification]:
    """Reclassifications for human commits whose PR carries agent evidence.

    PRs missing from *pull_requests* (deleted, not fetched) are skipped.
    """
    planned: list[Reclassification] = []
    for number, commit_ids in sorted(group_commits_by_pr(commits).items()):
        pr = pull_requests.get(number)
        if pr is None:
            continue
        classification = classify_pr_author(pr)
        if classification is None or not can_reclassify(Classification.HUMAN, classification):
            continue
        planned.extend(Reclassification(cid, classification) for cid in commit_ids)
    return planned


def pr_attribution_inputs(
    reclassifications: Sequence[Reclassification],
    commits: Iterable[HumanCommit],
    pull_requests: Mapping[int, PullRequest],
) -> list[AggregateInput]:
    """One aggregation input per PR that triggered a reclassification.

    The PR's login, branch, body and labels become the signal evidence and
    the number of reclassified commits becomes its ``commit_count``.
    """
    reclassified = {r.commit_id: r.classification for r in reclassifications}
    inputs: list[AggregateInput] = []
    for number, commit_ids in sorted(group_commits_by_pr(commits).items()):
        pr = pull_requests.get(number)
        hits = [cid for cid in commit_ids if cid in reclassified]
        if pr is None or not hits:
            continue
        inputs.append(
            AggregateInput(
                classification=reclassified[hits[0]].value,
                login=pr.author_login or None,
                body=pr.body,
                branch=pr.branch,
                labels=pr.labels,
                commit_count=len(hits),
            )
        )
    return inputs
