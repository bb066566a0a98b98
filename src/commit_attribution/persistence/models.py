"""Row types for the stats store."""

from __future__ import annotations

import json
import sqlite3
from dataclasses import dataclass
from typing import Optional

from ..classification.breakdown import BreakdownCommit
from ..classification.detector import ClassificationResult, CommitPayload
from ..temporal.stats import CommitForStats
from ..temporal.weeks import parse_timestamp


@dataclass(frozen=True)
class CommitRecord:
    """A classified commit awaiting stats computation.

    ``id`` is ``None`` until the row has been inserted.
    """

    sha: str
    authored_at: int  # epoch ms
    classification: str
    author_login: Optional[str] = None
    author_name: Optional[str] = None
    author_email: Optional[str] = None
    message: str = ""
    co_authors: tuple[str, ...] = ()
    additions: int = 0
    deletions: int = 0
    id: Optional[int] = None

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "CommitRecord":
        return cls(
            id=row["id"],
            sha=row["sha"],
            authored_at=row["authored_at"],
            classification=row["classification"],
            author_login=row["author_login"],
            author_name=row["author_name"],
            author_email=row["author_email"],
            message=row["message"],
            co_authors=tuple(json.loads(row["co_authors"] or "[]")),
            additions=row["additions"],
            deletions=row["deletions"],
        )

    @classmethod
    def from_classified(
        cls,
        payload: CommitPayload,
        result: ClassificationResult,
        additions: int = 0,
        deletions: int = 0,
    ) -> "CommitRecord":
        """Combine a commit payload with its first-pass classification."""
        author = payload.author
        return cls(
            sha=payload.sha,
            authored_at=parse_timestamp(author.date) if author and author.date else 0,
            classification=result.classification.value,
            author_login=payload.author_account.login if payload.author_account else None,
            author_name=author.name or None if author else None,
            author_email=author.email or None if author else None,
            message=payload.message,
            co_authors=tuple(result.co_authors),
            additions=additions,
            deletions=deletions,
        )

    def for_stats(self) -> CommitForStats:
        return CommitForStats(
            authored_at=self.authored_at,
            classification=self.classification,
            additions=self.additions,
            deletions=self.deletions,
            author_login=self.author_login,
            author_email=self.author_email,
            author_name=self.author_name,
        )

    def for_breakdown(self) -> BreakdownCommit:
        return BreakdownCommit(
            classification=self.classification,
            author_login=self.author_login,
            author_name=self.author_name,
            author_email=self.author_email,
            message=self.message,
            co_authors=self.co_authors,
            additions=self.additions,
        )
