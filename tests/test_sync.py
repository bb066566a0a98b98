"""Tests for finalizing a repo sync."""

import logging

import pytest

from commit_attribution.classification.pr_classifier import PullRequest
from commit_attribution.exceptions import RepoNotFoundError
from commit_attribution.persistence import (
    CommitRecord,
    get_commits,
    get_global_weekly_stats,
    get_repo,
    get_repo_weekly_stats,
    insert_commits,
    set_sync_status,
    upsert_repo,
)
from commit_attribution.sync import finalize_repo_sync

NOW = 1_717_000_000_000


@pytest.fixture
def repo_id(conn, ms):
    rid = upsert_repo(conn, "acme", "api")
    set_sync_status(conn, rid, "syncing")
    insert_commits(
        conn,
        rid,
        [
            CommitRecord("a", ms("2024-01-01T10:00:00Z"), "human", "alice", message="Add search (#5)", additions=10),
            CommitRecord("b", ms("2024-01-02T10:00:00Z"), "human", "alice", message="Fix typo", additions=1),
            CommitRecord("c", ms("2024-01-03T10:00:00Z"), "dependabot", "dependabot[bot]", message="Bump x"),
            CommitRecord(
                "d", ms("2024-01-09T10:00:00Z"), "human", "bob", message="Merge pull request #6 from bob/feature"
            ),
        ],
    )
    return rid


@pytest.fixture
def pull_requests():
    return [
        PullRequest(5, author_login="alice", branch="cursor/search"),
        PullRequest(6, author_login="bob", branch="feature"),
    ]


class TestFinalizeRepoSync:
    def test_reclassifies_and_writes_stats(self, conn, repo_id, pull_requests):
        result = finalize_repo_sync(conn, repo_id, pull_requests, now=NOW)
        assert (result.total_commits, result.reclassified) == (4, 1)

        weekly = get_repo_weekly_stats(conn, repo_id)
        assert [w["weekLabel"] for w in weekly] == ["2024-W01", "2024-W02"]
        assert (weekly[0]["human"], weekly[0]["cursor"], weekly[0]["dependabot"]) == (1, 1, 1)
        assert weekly[0]["cursorAdditions"] == 10
        assert weekly[1]["human"] == 1

    def test_repo_row_updated(self, conn, repo_id, pull_requests):
        finalize_repo_sync(conn, repo_id, pull_requests, now=NOW)
        repo = get_repo(conn, repo_id)
        assert repo["syncStatus"] == "synced"
        assert repo["syncedAt"] == NOW
        assert repo["totalCommits"] == 4
        assert repo["toolBreakdown"] == [{"key": "cursor", "label": "Cursor", "commits": 1, "additions": 10}]
        assert [b["key"] for b in repo["botBreakdown"]] == ["dependabot"]
        assert repo["prAttribution"] == {
            "totalCommits": 1,
            "aiCommits": 1,
            "automationCommits": 0,
            "breakdown": [{"key": "cursor", "label": "Cursor", "lane": "ai", "commits": 1}],
            "computedAt": NOW,
        }

    def test_raw_commits_dropped(self, conn, repo_id, pull_requests):
        finalize_repo_sync(conn, repo_id, pull_requests, now=NOW)
        assert get_commits(conn, repo_id) == []

    def test_accepts_mapping(self, conn, repo_id, pull_requests):
        result = finalize_repo_sync(conn, repo_id, {pr.number: pr for pr in pull_requests}, now=NOW)
        assert result.reclassified == 1

    def test_without_pull_requests(self, conn, repo_id, caplog):
        with caplog.at_level(logging.WARNING, logger="commit_attribution.sync"):
            result = finalize_repo_sync(conn, repo_id, now=NOW)
        assert result.reclassified == 0
        assert get_repo(conn, repo_id)["prAttribution"] is None
        assert "2 referenced PRs" in caplog.text

    def test_last_repo_of_owner_triggers_recompute(self, conn, repo_id, pull_requests):
        result = finalize_repo_sync(conn, repo_id, pull_requests, now=NOW)
        assert result.recompute is not None
        assert result.recompute.repos == 1
        assert [w["weekLabel"] for w in get_global_weekly_stats(conn)] == ["2024-W01", "2024-W02"]

    def test_recompute_deferred_while_owner_has_pending_repos(self, conn, repo_id, pull_requests):
        upsert_repo(conn, "acme", "web")
        result = finalize_repo_sync(conn, repo_id, pull_requests, now=NOW)
        assert result.recompute is None
        assert get_global_weekly_stats(conn) == []

    def test_other_owners_do_not_defer(self, conn, repo_id, pull_requests):
        upsert_repo(conn, "other", "lib")
        assert finalize_repo_sync(conn, repo_id, pull_requests, now=NOW).recompute is not None

    def test_unknown_repo(self, conn):
        with pytest.raises(RepoNotFoundError):
            finalize_repo_sync(conn, 404)
