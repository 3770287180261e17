"""Resilient Git repository snapshots."""

from reposnap.exceptions import RepositoryLockedError, RepoSnapError
from reposnap.snapshot import (
    NO_TRACKING,
    RepositoryReader,
    RepositorySnapshot,
    RetryPolicy,
    extract_snapshot,
    locate_repository,
    read_repository,
    read_with_retries,
)

__all__ = [
    "NO_TRACKING",
    "RepoSnapError",
    "RepositoryLockedError",
    "RepositoryReader",
    "RepositorySnapshot",
    "RetryPolicy",
    "extract_snapshot",
    "locate_repository",
    "read_repository",
    "read_with_retries",
]
