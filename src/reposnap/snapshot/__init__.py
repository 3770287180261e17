"""Repository snapshot reading.

This package locates the repository enclosing a path and reads its branch
and tracking state into an immutable snapshot, retrying while the repository
metadata is locked by another process.

Functions:
    locate_repository: Find the repository root enclosing a path.
    extract_snapshot: Single open-read-close cycle, no retries.
    read_with_retries: Read a located root, retrying on lock errors.
    read_repository: Locate and read; EMPTY when there is no repository.

Classes:
    RepositorySnapshot: Immutable branch and tracking state.
    RepositoryReader: Configurable locate-then-read entry point.
    RetryPolicy: Attempt limit and backoff interval.
    GitBackend, RepositoryHandle: Protocols for Git access.
    DulwichBackend: dulwich implementation of GitBackend.
    FakeBackend: In-memory GitBackend for tests.

Example:
    >>> from reposnap.snapshot import read_repository
    >>> snapshot = read_repository(".")
    >>> snapshot.current_branch, snapshot.ahead_by, snapshot.behind_by
    ('main', 0, 0)
"""

from reposnap.snapshot._dulwich import DulwichBackend, DulwichRepositoryHandle
from reposnap.snapshot._fake import FakeBackend, FakeRepositoryHandle
from reposnap.snapshot._locator import locate_repository
from reposnap.snapshot._models import DETACHED_HEAD, NO_TRACKING, RepositorySnapshot
from reposnap.snapshot._protocol import GitBackend, RepositoryHandle
from reposnap.snapshot._reader import (
    RepositoryReader,
    extract_snapshot,
    read_repository,
    read_with_retries,
)
from reposnap.snapshot._retry import (
    DEFAULT_BACKOFF,
    DEFAULT_MAX_ATTEMPTS,
    Attempting,
    Done,
    Failed,
    ReadState,
    RetryPolicy,
    state_after,
)

__all__ = [
    "DEFAULT_BACKOFF",
    "DEFAULT_MAX_ATTEMPTS",
    "DETACHED_HEAD",
    "NO_TRACKING",
    "Attempting",
    "Done",
    "DulwichBackend",
    "DulwichRepositoryHandle",
    "Failed",
    "FakeBackend",
    "FakeRepositoryHandle",
    "GitBackend",
    "ReadState",
    "RepositoryHandle",
    "RepositoryReader",
    "RepositorySnapshot",
    "RetryPolicy",
    "extract_snapshot",
    "locate_repository",
    "read_repository",
    "read_with_retries",
    "state_after",
]
