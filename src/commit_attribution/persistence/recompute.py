"""Rebuild the global weekly and daily stats from every synced repo.

The global tables are derived data: each run deletes them and reinserts
the sum of all synced repos' buckets. Both steps share one ``BEGIN
IMMEDIATE`` transaction, so a reader sees either the previous global view
or the new one, never an empty table in between.
"""

import sqlite3
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from ..exceptions import RecomputeError
from ..logging_config import get_logger
from ..temporal.stats import DAILY_COUNT_FIELDS, WEEKLY_COUNT_FIELDS
from ..temporal.weeks import week_label
from .database import quote, transaction
from .reader import get_repo_daily_stats, get_repo_weekly_stats, list_synced_repos

logger = get_logger(__name__)


@dataclass(frozen=True)
class RecomputeResult:
    repos: int
    weekly_buckets: int
    daily_buckets: int

    def to_dict(self) -> dict[str, int]:
        return {
            "repos": self.repos,
            "weeklyBuckets": self.weekly_buckets,
            "dailyBuckets": self.daily_buckets,
        }


def _count(row: Mapping[str, Any], name: str) -> int:
    # Rows written before a classification existed have no value for it.
    return row.get(name) or 0


def _merge(
    rows: Iterable[Mapping[str, Any]], key: str, fields: tuple[str, ...]
) -> dict[int, tuple[dict[str, Any], set]]:
    buckets: dict[int, tuple[dict[str, Any], set]] = {}
    for row in rows:
        bucket_key = row[key]
        entry = buckets.get(bucket_key)
        if entry is None:
            counts = {name: _count(row, name) for name in fields}
            buckets[bucket_key] = (counts, {row["repoId"]})
            continue
        counts, repo_ids = entry
        for name in fields:
            counts[name] += _count(row, name)
        repo_ids.add(row["repoId"])
    return buckets


def merge_weekly_stats(rows: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """Sum per-repo weekly rows into global buckets.

    Each row needs ``repoId``, ``weekStart`` and any subset of the weekly
    count fields. The result is sorted by ``weekStart``; ``repoCount`` is
    the number of distinct repos that contributed to the week. Input order
    does not affect the output.
    """
    merged = _merge(rows, "weekStart", WEEKLY_COUNT_FIELDS)
    return [
        {"weekStart": ws, "weekLabel": week_label(ws), **counts, "repoCount": len(repo_ids)}
        for ws, (counts, repo_ids) in sorted(merged.items())
    ]


def merge_daily_stats(rows: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """Sum per-repo daily rows into global buckets, sorted by ``date``."""
    merged = _merge(rows, "date", DAILY_COUNT_FIELDS)
    return [
        {"date": day, **counts, "repoCount": len(repo_ids)}
        for day, (counts, repo_ids) in sorted(merged.items())
    ]


def _insert(conn: sqlite3.Connection, table: str, rows: list[dict[str, Any]]) -> None:
    if not rows:
        return
    columns = list(rows[0])
    sql = "INSERT INTO {} ({}) VALUES ({})".format(
        table, ", ".join(quote(c) for c in columns), ", ".join("?" for _ in columns)
    )
    conn.executemany(sql, [tuple(r[c] for c in columns) for r in rows])


def recompute_global_stats(conn: sqlite3.Connection, synced_status: str = "synced") -> RecomputeResult:
    """Replace the global weekly/daily tables with the sum over synced repos.

    Running it twice without per-repo changes produces identical rows.

    Raises
    ------
    RecomputeError
        If any read or write fails. The transaction is rolled back and the
        previous global rows stay in place.
    """
    try:
        with transaction(conn, immediate=True):
            repos = list_synced_repos(conn, synced_status)
            weekly_rows: list[dict[str, Any]] = []
            daily_rows: list[dict[str, Any]] = []
            for repo in repos:
                weekly_rows.extend(get_repo_weekly_stats(conn, repo["id"]))
                daily_rows.extend(get_repo_daily_stats(conn, repo["id"]))

            weekly = merge_weekly_stats(weekly_rows)
            daily = merge_daily_stats(daily_rows)

            conn.execute("DELETE FROM global_weekly_stats")
            conn.execute("DELETE FROM global_daily_stats")
            _insert(conn, "global_weekly_stats", weekly)
            _insert(conn, "global_daily_stats", daily)
    except sqlite3.Error as e:
        raise RecomputeError(str(e)) from e

    result = RecomputeResult(repos=len(repos), weekly_buckets=len(weekly), daily_buckets=len(daily))
    logger.info(
        "Recomputed global stats from %d repos: %d weekly, %d daily buckets",
        result.repos,
        result.weekly_buckets,
        result.daily_buckets,
    )
    return result
