"""SQLite-backed stats store."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from ..exceptions import StoreError
from ..logging_config import get_logger
from ..temporal.stats import DAILY_COUNT_FIELDS, WEEKLY_COUNT_FIELDS

logger = get_logger(__name__)

# Current schema version (bump when tables change).
_SCHEMA_VERSION = 1


def quote(identifier: str) -> str:
    """Quote a column name; stat columns keep their camelCase wire names."""
    return '"' + identifier.replace('"', '""') + '"'


def _count_columns(fields: tuple[str, ...], nullable: bool) -> str:
    # Per-repo rows may predate newer classification columns, so they allow
    # NULL; global rows are always written in full.
    column_type = "INTEGER" if nullable else "INTEGER NOT NULL DEFAULT 0"
    return ",\n                ".join(f"{quote(name)} {column_type}" for name in fields)


class StatsDB:
    """Manages the stats SQLite database.

    The connection runs in autocommit mode; multi-statement writes go
    through :func:`transaction`.

    Usage::

        with StatsDB("stats.db") as db:
            recompute_global_stats(db.conn)
    """

    def __init__(self, db_path: Union[str, Path]) -> None:
        self.db_path: Path = Path(db_path)
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def conn(self) -> sqlite3.Connection:
        """Return the active connection. Raises if not connected."""
        if self._conn is None:
            raise RuntimeError("StatsDB is not connected. Use as context manager or call connect().")
        return self._conn

    # ── lifecycle ─────────────────────────────────────────────────

    def connect(self) -> sqlite3.Connection:
        """Open (or create) the database and run migrations."""
        if self.db_path.parent and not self.db_path.parent.exists():
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            conn = sqlite3.connect(str(self.db_path), isolation_level=None)
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA foreign_keys=ON")
        except sqlite3.Error as e:
            raise StoreError("connect", str(e))
        conn.row_factory = sqlite3.Row
        self._conn = conn
        self._migrate()
        logger.debug("Stats DB connected at %s", self.db_path)
        return conn

    def close(self) -> None:
        """Close the connection if open."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "StatsDB":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ── migration ─────────────────────────────────────────────────

    def _migrate(self) -> None:
        """Idempotently create all tables."""
        c = self.conn

        with transaction(c):
            c.execute(
                """
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER NOT NULL
                )
                """
            )
            row = c.execute("SELECT version FROM schema_version").fetchone()
            if row is None:
                c.execute("INSERT INTO schema_version (version) VALUES (?)", (_SCHEMA_VERSION,))

            # ── repos ────────────────────────────────────────────────
            c.execute(
                """
                CREATE TABLE IF NOT EXISTS repos (
                    id             INTEGER PRIMARY KEY AUTOINCREMENT,
                    owner          TEXT    NOT NULL,
                    name           TEXT    NOT NULL,
                    sync_status    TEXT    NOT NULL DEFAULT 'pending',
                    total_commits  INTEGER NOT NULL DEFAULT 0,
                    tool_breakdown TEXT,
                    bot_breakdown  TEXT,
                    pr_attribution TEXT,
                    synced_at      INTEGER,
                    UNIQUE (owner, name)
                )
                """
            )

            # ── commits (raw, dropped once stats are written) ───────
            c.execute(
                """
                CREATE TABLE IF NOT EXISTS commits (
                    id             INTEGER PRIMARY KEY AUTOINCREMENT,
                    repo_id        INTEGER NOT NULL REFERENCES repos(id) ON DELETE CASCADE,
                    sha            TEXT    NOT NULL,
                    authored_at    INTEGER NOT NULL,
                    classification TEXT    NOT NULL,
                    author_login   TEXT,
                    author_name    TEXT,
                    author_email   TEXT,
                    message        TEXT    NOT NULL DEFAULT '',
                    co_authors     TEXT    NOT NULL DEFAULT '[]',
                    additions      INTEGER NOT NULL DEFAULT 0,
                    deletions      INTEGER NOT NULL DEFAULT 0,
                    UNIQUE (repo_id, sha)
                )
                """
            )

            # ── per-repo buckets ─────────────────────────────────────
            c.execute(
                f"""
                CREATE TABLE IF NOT EXISTS repo_weekly_stats (
                    id          INTEGER PRIMARY KEY AUTOINCREMENT,
                    repo_id     INTEGER NOT NULL REFERENCES repos(id) ON DELETE CASCADE,
                    "weekStart" INTEGER NOT NULL,
                    "weekLabel" TEXT    NOT NULL,
                    {_count_columns(WEEKLY_COUNT_FIELDS, nullable=True)},
                    UNIQUE (repo_id, "weekStart")
                )
                """
            )
            c.execute(
                f"""
                CREATE TABLE IF NOT EXISTS repo_daily_stats (
                    id      INTEGER PRIMARY KEY AUTOINCREMENT,
                    repo_id INTEGER NOT NULL REFERENCES repos(id) ON DELETE CASCADE,
                    "date"  INTEGER NOT NULL,
                    {_count_columns(DAILY_COUNT_FIELDS, nullable=True)},
                    UNIQUE (repo_id, "date")
                )
                """
            )
            c.execute(
                """
                CREATE TABLE IF NOT EXISTS repo_contributor_stats (
                    id              INTEGER PRIMARY KEY AUTOINCREMENT,
                    repo_id         INTEGER NOT NULL REFERENCES repos(id) ON DELETE CASCADE,
                    login           TEXT,
                    name            TEXT,
                    email           TEXT,
                    classification  TEXT    NOT NULL,
                    commit_count    INTEGER NOT NULL DEFAULT 0,
                    additions       INTEGER NOT NULL DEFAULT 0,
                    deletions       INTEGER NOT NULL DEFAULT 0,
                    first_commit_at INTEGER NOT NULL,
                    last_commit_at  INTEGER NOT NULL
                )
                """
            )

            # ── global buckets (derived, rebuilt by recompute) ───────
            c.execute(
                f"""
                CREATE TABLE IF NOT EXISTS global_weekly_stats (
                    "weekStart" INTEGER PRIMARY KEY,
                    "weekLabel" TEXT    NOT NULL,
                    {_count_columns(WEEKLY_COUNT_FIELDS, nullable=False)},
                    "repoCount" INTEGER NOT NULL DEFAULT 0
                )
                """
            )
            c.execute(
                f"""
                CREATE TABLE IF NOT EXISTS global_daily_stats (
                    "date" INTEGER PRIMARY KEY,
                    {_count_columns(DAILY_COUNT_FIELDS, nullable=False)},
                    "repoCount" INTEGER NOT NULL DEFAULT 0
                )
                """
            )

            # ── indexes ──────────────────────────────────────────────
            c.execute("CREATE INDEX IF NOT EXISTS idx_repos_sync_status ON repos(sync_status)")
            c.execute(
                "CREATE INDEX IF NOT EXISTS idx_commits_repo_class ON commits(repo_id, classification)"
            )
            c.execute("CREATE INDEX IF NOT EXISTS idx_repo_weekly_repo ON repo_weekly_stats(repo_id)")
            c.execute("CREATE INDEX IF NOT EXISTS idx_repo_daily_repo ON repo_daily_stats(repo_id)")
            c.execute(
                "CREATE INDEX IF NOT EXISTS idx_repo_contrib_repo ON repo_contributor_stats(repo_id)"
            )


@contextmanager
def transaction(conn: sqlite3.Connection, immediate: bool = False) -> Iterator[sqlite3.Connection]:
    """Run the block in one transaction; roll back if it raises.

    ``immediate=True`` takes the write lock up front so concurrent writers
    queue instead of interleaving.
    """
    conn.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
    try:
        yield conn
    except BaseException:
        conn.execute("ROLLBACK")
        raise
    conn.execute("COMMIT")
