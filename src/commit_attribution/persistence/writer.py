"""Write repos, commits and per-repo stats into the stats database.

Every function runs in its own transaction and rolls back on failure;
SQLite errors surface as :class:`StoreError`.
"""

import json
import sqlite3
from typing import Iterable, Optional

from ..classification.breakdown import DetailedBreakdowns
from ..classification.models import AttributionSummary
from ..classification.pr_classifier import Reclassification
from ..classification.taxonomy import Classification, can_reclassify
from ..exceptions import RepoNotFoundError, StoreError
from ..logging_config import get_logger
from ..temporal.stats import DAILY_COUNT_FIELDS, WEEKLY_COUNT_FIELDS, RepoStats
from .database import quote, transaction
from .models import CommitRecord

logger = get_logger(__name__)

_WEEKLY_COLUMNS = ("repo_id", "weekStart", "weekLabel", *WEEKLY_COUNT_FIELDS)
_DAILY_COLUMNS = ("repo_id", "date", *DAILY_COUNT_FIELDS)


def _insert_sql(table: str, columns: tuple[str, ...]) -> str:
    cols = ", ".join(quote(c) for c in columns)
    marks = ", ".join("?" for _ in columns)
    return f"INSERT INTO {table} ({cols}) VALUES ({marks})"


def upsert_repo(conn: sqlite3.Connection, owner: str, name: str) -> int:
    """Return the id of ``owner/name``, creating the row if needed."""
    try:
        with transaction(conn):
            conn.execute(
                "INSERT INTO repos (owner, name) VALUES (?, ?) ON CONFLICT (owner, name) DO NOTHING",
                (owner, name),
            )
            row = conn.execute(
                "SELECT id FROM repos WHERE owner = ? AND name = ?", (owner, name)
            ).fetchone()
    except sqlite3.Error as e:
        raise StoreError("upsert_repo", str(e), table="repos") from e
    return row["id"]


def set_sync_status(
    conn: sqlite3.Connection, repo_id: int, status: str, synced_at: Optional[int] = None
) -> None:
    """Update a repo's sync status (and ``synced_at`` when given)."""
    try:
        with transaction(conn):
            cur = conn.execute(
                "UPDATE repos SET sync_status = ?, synced_at = COALESCE(?, synced_at) WHERE id = ?",
                (status, synced_at, repo_id),
            )
    except sqlite3.Error as e:
        raise StoreError("set_sync_status", str(e), table="repos") from e
    if cur.rowcount == 0:
        raise RepoNotFoundError(repo_id)


def insert_commits(conn: sqlite3.Connection, repo_id: int, commits: Iterable[CommitRecord]) -> int:
    """Insert classified commits; a sha already stored for the repo is ignored.

    Returns the number of rows actually inserted.
    """
    rows = [
        (
            repo_id,
            c.sha,
            c.authored_at,
            c.classification,
            c.author_login,
            c.author_name,
            c.author_email,
            c.message,
            json.dumps(list(c.co_authors)),
            c.additions or 0,
            c.deletions or 0,
        )
        for c in commits
    ]
    if not rows:
        return 0

    try:
        with transaction(conn):
            before = conn.total_changes
            conn.executemany(
                """
                INSERT OR IGNORE INTO commits (
                    repo_id, sha, authored_at, classification, author_login,
                    author_name, author_email, message, co_authors, additions, deletions
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                rows,
            )
            inserted = conn.total_changes - before
    except sqlite3.Error as e:
        raise StoreError("insert_commits", str(e), table="commits") from e

    logger.debug("Inserted %d/%d commits for repo %d", inserted, len(rows), repo_id)
    return inserted


def apply_reclassifications(conn: sqlite3.Connection, reclassifications: Iterable[Reclassification]) -> int:
    """Upgrade ``human`` commits to the planned classification.

    Only human -> non-human transitions are applied. The SQL guard on the
    current value keeps an already-attributed commit from being overwritten
    even if the plan was built from stale rows. Returns rows changed.
    """
    rows = [
        (r.classification.value, r.commit_id)
        for r in reclassifications
        if can_reclassify(Classification.HUMAN, r.classification)
    ]
    if not rows:
        return 0

    try:
        with transaction(conn):
            before = conn.total_changes
            conn.executemany(
                "UPDATE commits SET classification = ? WHERE id = ? AND classification = 'human'",
                rows,
            )
            changed = conn.total_changes - before
    except sqlite3.Error as e:
        raise StoreError("apply_reclassifications", str(e), table="commits") from e
    return changed


def write_repo_stats(
    conn: sqlite3.Connection,
    repo_id: int,
    stats: RepoStats,
    breakdowns: Optional[DetailedBreakdowns] = None,
    pr_attribution: Optional[AttributionSummary] = None,
    total_commits: Optional[int] = None,
) -> None:
    """Replace a repo's weekly, daily and contributor rows and its summary columns.

    The delete and the reinsert commit together.
    """
    weekly_rows = [
        (repo_id, w["weekStart"], w["weekLabel"], *(w.get(f, 0) for f in WEEKLY_COUNT_FIELDS))
        for w in stats.weekly
    ]
    daily_rows = [(repo_id, d["date"], *(d.get(f, 0) for f in DAILY_COUNT_FIELDS)) for d in stats.daily]
    contributor_rows = [
        (
            repo_id,
            c.login,
            c.name,
            c.email,
            c.classification,
            c.commit_count,
            c.additions,
            c.deletions,
            c.first_commit_at,
            c.last_commit_at,
        )
        for c in stats.contributors
    ]
    if total_commits is None:
        total_commits = sum(w.get("total", 0) for w in stats.weekly)

    tool_json = bot_json = None
    if breakdowns is not None:
        tool_json = json.dumps([s.to_dict() for s in breakdowns.tool_breakdown])
        bot_json = json.dumps([s.to_dict() for s in breakdowns.bot_breakdown])
    pr_json = json.dumps(pr_attribution.to_dict()) if pr_attribution is not None else None

    table = "repos"
    try:
        with transaction(conn):
            cur = conn.execute(
                """
                UPDATE repos
                SET total_commits = ?, tool_breakdown = ?, bot_breakdown = ?, pr_attribution = ?
                WHERE id = ?
                """,
                (total_commits, tool_json, bot_json, pr_json, repo_id),
            )
            if cur.rowcount == 0:
                raise RepoNotFoundError(repo_id)

            table = "repo_weekly_stats"
            conn.execute("DELETE FROM repo_weekly_stats WHERE repo_id = ?", (repo_id,))
            if weekly_rows:
                conn.executemany(_insert_sql("repo_weekly_stats", _WEEKLY_COLUMNS), weekly_rows)

            table = "repo_daily_stats"
            conn.execute("DELETE FROM repo_daily_stats WHERE repo_id = ?", (repo_id,))
            if daily_rows:
                conn.executemany(_insert_sql("repo_daily_stats", _DAILY_COLUMNS), daily_rows)

            table = "repo_contributor_stats"
            conn.execute("DELETE FROM repo_contributor_stats WHERE repo_id = ?", (repo_id,))
            if contributor_rows:
                conn.executemany(
                    """
                    INSERT INTO repo_contributor_stats (
                        repo_id, login, name, email, classification, commit_count,
                        additions, deletions, first_commit_at, last_commit_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    contributor_rows,
                )
    except sqlite3.Error as e:
        raise StoreError("write_repo_stats", str(e), table=table) from e

    logger.debug(
        "Wrote %d weekly, %d daily, %d contributor rows for repo %d",
        len(weekly_rows),
        len(daily_rows),
        len(contributor_rows),
        repo_id,
    )


def delete_repo_commits(conn: sqlite3.Connection, repo_id: int) -> int:
    """Drop a repo's raw commits once its stats are written."""
    try:
        with transaction(conn):
            cur = conn.execute("DELETE FROM commits WHERE repo_id = ?", (repo_id,))
    except sqlite3.Error as e:
        raise StoreError("delete_repo_commits", str(e), table="commits") from e
    return cur.rowcount
