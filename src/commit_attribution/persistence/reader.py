"""Read repos, commits and stat buckets back from the stats database.

Bucket readers return plain dicts with the camelCase wire keys. Count
columns are returned as stored, so rows written before a classification
existed carry ``None`` for it.
"""

import json
import sqlite3
from typing import Any, Optional

from ..classification.pr_classifier import HumanCommit
from ..exceptions import RepoNotFoundError
from ..temporal.stats import DAILY_COUNT_FIELDS, WEEKLY_COUNT_FIELDS
from .database import quote
from .models import CommitRecord

_WEEKLY_SELECT = ", ".join(quote(c) for c in ("weekStart", "weekLabel", *WEEKLY_COUNT_FIELDS))
_DAILY_SELECT = ", ".join(quote(c) for c in ("date", *DAILY_COUNT_FIELDS))


def _loads(raw: Optional[str]) -> Any:
    return json.loads(raw) if raw else None


def _repo_dict(row: sqlite3.Row) -> dict[str, Any]:
    return {
        "id": row["id"],
        "owner": row["owner"],
        "name": row["name"],
        "fullName": f"{row['owner']}/{row['name']}",
        "syncStatus": row["sync_status"],
        "totalCommits": row["total_commits"],
        "syncedAt": row["synced_at"],
    }


def list_synced_repos(conn: sqlite3.Connection, synced_status: str = "synced") -> list[dict[str, Any]]:
    """Repos whose sync status equals *synced_status*, by id."""
    rows = conn.execute(
        "SELECT * FROM repos WHERE sync_status = ? ORDER BY id", (synced_status,)
    ).fetchall()
    return [_repo_dict(r) for r in rows]


def get_repo(conn: sqlite3.Connection, repo_id: int) -> dict[str, Any]:
    """Load one repo with its decoded breakdown columns.

    Raises
    ------
    RepoNotFoundError
        If no repo with that id exists.
    """
    row = conn.execute("SELECT * FROM repos WHERE id = ?", (repo_id,)).fetchone()
    if row is None:
        raise RepoNotFoundError(repo_id)
    repo = _repo_dict(row)
    repo["toolBreakdown"] = _loads(row["tool_breakdown"])
    repo["botBreakdown"] = _loads(row["bot_breakdown"])
    repo["prAttribution"] = _loads(row["pr_attribution"])
    return repo


def list_repo_breakdowns(
    conn: sqlite3.Connection, sync_status: Optional[str] = None
) -> list[dict[str, Any]]:
    """Repos (all, or those with *sync_status*) with decoded tool and bot breakdowns."""
    if sync_status is None:
        rows = conn.execute("SELECT * FROM repos ORDER BY owner, name").fetchall()
    else:
        rows = conn.execute(
            "SELECT * FROM repos WHERE sync_status = ? ORDER BY owner, name", (sync_status,)
        ).fetchall()
    out = []
    for row in rows:
        repo = _repo_dict(row)
        repo["toolBreakdown"] = _loads(row["tool_breakdown"])
        repo["botBreakdown"] = _loads(row["bot_breakdown"])
        out.append(repo)
    return out


def get_repo_weekly_stats(conn: sqlite3.Connection, repo_id: int) -> list[dict[str, Any]]:
    rows = conn.execute(
        f'SELECT {_WEEKLY_SELECT} FROM repo_weekly_stats WHERE repo_id = ? ORDER BY "weekStart"',
        (repo_id,),
    ).fetchall()
    return [{"repoId": repo_id, **dict(r)} for r in rows]


def get_repo_daily_stats(conn: sqlite3.Connection, repo_id: int) -> list[dict[str, Any]]:
    rows = conn.execute(
        f'SELECT {_DAILY_SELECT} FROM repo_daily_stats WHERE repo_id = ? ORDER BY "date"',
        (repo_id,),
    ).fetchall()
    return [{"repoId": repo_id, **dict(r)} for r in rows]


def get_repo_contributor_stats(conn: sqlite3.Connection, repo_id: int) -> list[dict[str, Any]]:
    rows = conn.execute(
        """
        SELECT login, name, email, classification, commit_count, additions,
               deletions, first_commit_at, last_commit_at
        FROM repo_contributor_stats
        WHERE repo_id = ?
        ORDER BY first_commit_at, id
        """,
        (repo_id,),
    ).fetchall()
    return [
        {
            "login": r["login"],
            "name": r["name"],
            "email": r["email"],
            "classification": r["classification"],
            "commitCount": r["commit_count"],
            "additions": r["additions"],
            "deletions": r["deletions"],
            "firstCommitAt": r["first_commit_at"],
            "lastCommitAt": r["last_commit_at"],
        }
        for r in rows
    ]


def get_commits(conn: sqlite3.Connection, repo_id: int) -> list[CommitRecord]:
    rows = conn.execute(
        "SELECT * FROM commits WHERE repo_id = ? ORDER BY authored_at, id", (repo_id,)
    ).fetchall()
    return [CommitRecord.from_row(r) for r in rows]


def get_human_commits(conn: sqlite3.Connection, repo_id: int) -> list[HumanCommit]:
    """Commits still tagged ``human``; the candidates for PR reclassification."""
    rows = conn.execute(
        "SELECT id, message FROM commits WHERE repo_id = ? AND classification = 'human' ORDER BY id",
        (repo_id,),
    ).fetchall()
    return [HumanCommit(commit_id=r["id"], message=r["message"]) for r in rows]


def get_global_weekly_stats(conn: sqlite3.Connection) -> list[dict[str, Any]]:
    rows = conn.execute(
        f'SELECT {_WEEKLY_SELECT}, "repoCount" FROM global_weekly_stats ORDER BY "weekStart"'
    ).fetchall()
    return [dict(r) for r in rows]


def get_global_daily_stats(conn: sqlite3.Connection) -> list[dict[str, Any]]:
    rows = conn.execute(
        f'SELECT {_DAILY_SELECT}, "repoCount" FROM global_daily_stats ORDER BY "date"'
    ).fetchall()
    return [dict(r) for r in rows]


def count_unfinished_repos(conn: sqlite3.Connection, owner: str, exclude_id: Optional[int] = None) -> int:
    """Repos of *owner* still ``pending`` or ``syncing``, optionally excluding one."""
    row = conn.execute(
        """
        SELECT COUNT(*) AS n FROM repos
        WHERE owner = ? AND sync_status IN ('pending', 'syncing') AND id IS NOT ?
        """,
        (owner, exclude_id),
    ).fetchone()
    return row["n"]
