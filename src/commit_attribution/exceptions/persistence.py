"""Store exceptions: stats database reads, writes and recomputation."""

from typing import Optional

from .base import AttributionError


class StoreError(AttributionError):
    """Raised when the stats store cannot be read or written."""

    def __init__(self, operation: str, reason: str, table: Optional[str] = None):
        details = {"operation": operation, "reason": reason}
        if table:
            details["table"] = table

        super().__init__(f"Store operation failed: {operation}", details=details)
        self.operation = operation
        self.reason = reason
        self.table = table


class RecomputeError(StoreError):
    """Raised when a global stats rebuild fails. Nothing is committed."""

    def __init__(self, reason: str, table: Optional[str] = None):
        super().__init__("recompute_global_stats", reason, table=table)


class RepoNotFoundError(StoreError):
    """Raised when a repository id has no row in the store."""

    def __init__(self, repo_id: int):
        super().__init__("lookup_repo", f"no repo with id={repo_id}", table="repos")
        self.repo_id = repo_id
