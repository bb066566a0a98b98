"""SQLite persistence for repos, commits and stat buckets."""

from .database import StatsDB, transaction
from .models import CommitRecord
from .reader import (
    count_unfinished_repos,
    get_commits,
    get_global_daily_stats,
    get_global_weekly_stats,
    get_human_commits,
    get_repo,
    get_repo_contributor_stats,
    get_repo_daily_stats,
    get_repo_weekly_stats,
    list_repo_breakdowns,
    list_synced_repos,
)
from .recompute import RecomputeResult, merge_daily_stats, merge_weekly_stats, recompute_global_stats
from .writer import (
    apply_reclassifications,
    delete_repo_commits,
    insert_commits,
    set_sync_status,
    upsert_repo,
    write_repo_stats,
)

__all__ = [
    "StatsDB",
    "transaction",
    "CommitRecord",
    "upsert_repo",
    "set_sync_status",
    "insert_commits",
    "apply_reclassifications",
    "write_repo_stats",
    "delete_repo_commits",
    "list_synced_repos",
    "count_unfinished_repos",
    "get_repo",
    "list_repo_breakdowns",
    "get_repo_weekly_stats",
    "get_repo_daily_stats",
    "get_repo_contributor_stats",
    "get_commits",
    "get_human_commits",
    "get_global_weekly_stats",
    "get_global_daily_stats",
    "RecomputeResult",
    "merge_weekly_stats",
    "merge_daily_stats",
    "recompute_global_stats",
]
