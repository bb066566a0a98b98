"""First-pass commit classification from GitHub commit payloads."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .known_bots import (
    classify_ai_co_author,
    classify_ai_message_marker,
    extract_co_authors,
    has_ai_author_name,
    has_ai_co_author,
    has_ai_message_marker,
    match_bot_pattern,
)
from .taxonomy import Classification

_BOT_NOREPLY_SUFFIX = "[bot]@users.noreply.github.com"
_GITHUB_NOREPLY = "noreply@github.com"


@dataclass(frozen=True)
class GitIdentity:
    """Author or committer as recorded in the git object."""

    name: str = ""
    email: str = ""
    date: str = ""


@dataclass(frozen=True)
class GitHubAccount:
    """GitHub account linked to a commit author or committer."""

    login: str = ""
    id: int = 0
    type: str = "User"  # "User" | "Bot" | "Organization"


@dataclass(frozen=True)
class CommitPayload:
    sha: str
    message: str
    author: Optional[GitIdentity] = None
    committer: Optional[GitIdentity] = None
    author_account: Optional[GitHubAccount] = None
    committer_account: Optional[GitHubAccount] = None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "CommitPayload":
        """Build from a GitHub REST ``/repos/{owner}/{repo}/commits`` item."""
        commit = data.get("commit") or {}
        return cls(
            sha=data.get("sha") or "",
            message=commit.get("message", "") or "",
            author=_identity(commit.get("author")),
            committer=_identity(commit.get("committer")),
            author_account=_account(data.get("author")),
            committer_account=_account(data.get("committer")),
        )


@dataclass(frozen=True)
class ClassificationResult:
    classification: Classification
    co_authors: list[str] = field(default_factory=list)


def _identity(raw: Optional[Mapping[str, Any]]) -> Optional[GitIdentity]:
    if not raw:
        return None
    return GitIdentity(
        name=raw.get("name") or "", email=raw.get("email") or "", date=raw.get("date") or ""
    )


def _account(raw: Optional[Mapping[str, Any]]) -> Optional[GitHubAccount]:
    if not raw:
        return None
    return GitHubAccount(
        login=raw.get("login") or "", id=int(raw.get("id") or 0), type=raw.get("type") or "User"
    )


def classify_commit(commit: CommitPayload) -> ClassificationResult:
    """Classify a commit with a priority cascade.

    1. GitHub account ``type == "Bot"`` (most authoritative)
    2. Author email patterns (dependabot, renovate, ``[bot]`` noreply, web-flow)
    3. Author email matching a known bot/agent pattern
    4. Author login / name patterns
    5. Bot committer with a bot-like subject line
    6. AI ``Co-authored-by`` trailers
    7. AI markers in the commit message
    8. ``(aider)`` author-name suffix

    Anything else is ``human``. Steps 6 and 7 return the specific tool when
    one can be named, ``ai-assisted`` otherwise.
    """
    message = commit.message
    co_authors = extract_co_authors(message)

    author_login = (commit.author_account.login if commit.author_account else "").lower()
    author_type = commit.author_account.type if commit.author_account else None
    author_email = (commit.author.email if commit.author else "").lower()
    author_name = (commit.author.name if commit.author else "").lower()
    committer_email = (commit.committer.email if commit.committer else "").lower()
    committer_name = (commit.committer.name if commit.committer else "").lower()

    def result(classification: Classification) -> ClassificationResult:
        return ClassificationResult(classification, co_authors)

    if author_type == "Bot":
        return result(match_bot_pattern(author_login) or Classification.OTHER_BOT)

    if "dependabot" in author_email:
        return result(Classification.DEPENDABOT)
    if "renovate" in author_email:
        return result(Classification.RENOVATE)
    if author_email.endswith(_BOT_NOREPLY_SUFFIX):
        return result(match_bot_pattern(author_email) or Classification.OTHER_BOT)
    if author_email == _GITHUB_NOREPLY and author_name == "github":
        return result(Classification.GITHUB_ACTIONS)

    # Agents that register as "User" accounts still use their own domains.
    email_match = match_bot_pattern(author_email) if author_email else None
    if email_match:
        return result(email_match)

    name_match = (match_bot_pattern(author_login) if author_login else None) or (
        match_bot_pattern(author_name) if author_name else None
    )
    if name_match:
        return result(name_match)

    if committer_email.endswith(_BOT_NOREPLY_SUFFIX) or (
        committer_email == _GITHUB_NOREPLY and committer_name == "github"
    ):
        subject = message.split("\n", 1)[0].lower()
        subject_match = match_bot_pattern(subject)
        if subject_match:
            return result(subject_match)

    if co_authors and has_ai_co_author(co_authors):
        return result(classify_ai_co_author(co_authors) or Classification.AI_ASSISTED)

    if has_ai_message_marker(message):
        return result(classify_ai_message_marker(message) or Classification.AI_ASSISTED)

    if author_name and has_ai_author_name(author_name):
        return result(Classification.AI_ASSISTED)

    return result(Classification.HUMAN)
