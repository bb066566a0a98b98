"""Finalize a repository sync once all of its commits are stored.

Steps, each committed on its own:

1. Reclassify ``human`` squash/merge commits whose PR carries agent evidence.
2. Compute weekly, daily and contributor stats plus the tool/bot breakdowns.
3. Aggregate the PR evidence into the repo's attribution summary.
4. Write the stats and drop the raw commit rows.
5. Mark the repo synced and, once no other repo of the same owner is still
   in flight, rebuild the global stats.
"""

from __future__ import annotations

import sqlite3
import time
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Union

from .classification.attribution import aggregate
from .classification.breakdown import build_detailed_breakdowns
from .classification.known_bots import extract_pr_number
from .classification.pr_classifier import PullRequest, plan_reclassifications, pr_attribution_inputs
from .logging_config import get_logger
from .persistence.reader import count_unfinished_repos, get_commits, get_human_commits, get_repo
from .persistence.recompute import RecomputeResult, recompute_global_stats
from .persistence.writer import (
    apply_reclassifications,
    delete_repo_commits,
    set_sync_status,
    write_repo_stats,
)
from .temporal.stats import compute_stats_from_commits

logger = get_logger(__name__)

PullRequests = Union[Mapping[int, PullRequest], Iterable[PullRequest]]


@dataclass(frozen=True)
class SyncResult:
    repo_id: int
    total_commits: int
    reclassified: int
    recompute: Optional[RecomputeResult] = None


def _by_number(pull_requests: PullRequests) -> dict[int, PullRequest]:
    if isinstance(pull_requests, Mapping):
        return dict(pull_requests)
    return {pr.number: pr for pr in pull_requests}


def finalize_repo_sync(
    conn: sqlite3.Connection,
    repo_id: int,
    pull_requests: PullRequests = (),
    synced_status: str = "synced",
    now: Optional[int] = None,
) -> SyncResult:
    """Turn a repo's stored commits into stats and mark it synced.

    *pull_requests* holds the metadata fetched for PRs referenced by the
    repo's commits; referenced PRs missing from it are skipped.

    Raises
    ------
    RepoNotFoundError
        If *repo_id* has no row.
    StoreError
        If a write fails. Steps already committed stay committed.
    """
    repo = get_repo(conn, repo_id)
    prs = _by_number(pull_requests)
    now = int(time.time() * 1000) if now is None else now

    # 1. PR-driven reclassification
    human = get_human_commits(conn, repo_id)
    referenced = {n for n in (extract_pr_number(c.message) for c in human) if n is not None}
    missing = referenced - prs.keys()
    if missing:
        logger.warning(
            "%s: no metadata for %d referenced PRs, skipping them", repo["fullName"], len(missing)
        )
    plan = plan_reclassifications(human, prs)
    reclassified = apply_reclassifications(conn, plan)

    # 2-3. Stats, breakdowns and PR attribution from the final classifications
    commits = get_commits(conn, repo_id)
    stats = compute_stats_from_commits(c.for_stats() for c in commits)
    breakdowns = build_detailed_breakdowns(c.for_breakdown() for c in commits)
    pr_inputs = pr_attribution_inputs(plan, human, prs)
    pr_attribution = aggregate(pr_inputs, computed_at=now) if pr_inputs else None

    # 4. Persist, then drop raw commits
    write_repo_stats(
        conn,
        repo_id,
        stats,
        breakdowns=breakdowns,
        pr_attribution=pr_attribution,
        total_commits=len(commits),
    )
    delete_repo_commits(conn, repo_id)

    # 5. Mark synced; the owner's last repo to finish triggers the recompute
    set_sync_status(conn, repo_id, synced_status, synced_at=now)
    result = None
    if count_unfinished_repos(conn, repo["owner"], exclude_id=repo_id) == 0:
        result = recompute_global_stats(conn, synced_status)
    else:
        logger.debug("%s: other repos of %s still syncing, deferring recompute", repo["fullName"], repo["owner"])

    logger.info(
        "%s: synced %d commits (%d reclassified from PRs)",
        repo["fullName"],
        len(commits),
        reclassified,
    )
    return SyncResult(repo_id=repo_id, total_commits=len(commits), reclassified=reclassified, recompute=result)
