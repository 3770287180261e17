# ruff: noqa: TC003  # Path needed at runtime for signatures
"""Resilient repository snapshot reading.

extract_snapshot() performs a single open-read-close cycle. read_with_retries()
drives it through a tenacity retry loop, sleeping between attempts when the
repository is locked. read_repository() and RepositoryReader combine discovery
and reading into the caller-facing entry points.
"""

import time
from collections.abc import Callable
from os import PathLike
from pathlib import Path
from typing import TYPE_CHECKING, Final, Self, TypeAlias

from reposnap.snapshot._dulwich import DulwichBackend
from reposnap.snapshot._locator import locate_repository
from reposnap.snapshot._models import NO_TRACKING, RepositorySnapshot
from reposnap.snapshot._protocol import GitBackend
from reposnap.snapshot._retry import (
    DEFAULT_BACKOFF,
    DEFAULT_MAX_ATTEMPTS,
    Attempting,
    Failed,
    RetryPolicy,
    state_after,
)

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from reposnap.config import Config

Sleeper: TypeAlias = Callable[[float], None]


def extract_snapshot(
    root: Path,
    *,
    backend: GitBackend | None = None,
) -> RepositorySnapshot:
    """Read a snapshot with a single open-read-close cycle.

    The repository handle is closed before this function returns or raises.
    Nothing is caught here; lock errors are left to the caller.

    Args:
        root: Repository root as returned by locate_repository().
        backend: Git backend. Defaults to dulwich.

    Returns:
        A fully populated snapshot.
    """
    if backend is None:
        backend = DulwichBackend()

    with backend.open(root) as handle:
        working_directory = handle.working_directory
        branches = tuple(handle.list_branches())
        current_branch = handle.head_name()
        tracking = handle.tracking_counts()

    if tracking is None:
        ahead_by, behind_by = NO_TRACKING, NO_TRACKING
    else:
        ahead_by, behind_by = tracking
    return RepositorySnapshot(
        name=working_directory.name,
        path=str(working_directory),
        branches=branches,
        current_branch=current_branch,
        ahead_by=ahead_by,
        behind_by=behind_by,
    )


def read_with_retries(
    root: Path,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    *,
    backend: GitBackend | None = None,
    backoff: float = DEFAULT_BACKOFF,
    sleep: Sleeper = time.sleep,
    logger: "FilteringBoundLogger | None" = None,  # noqa: UP037
) -> RepositorySnapshot:
    """Read a snapshot, retrying while the repository is locked.

    Args:
        root: Repository root; not re-validated.
        max_attempts: Total attempts allowed (at least 1).
        backend: Git backend. Defaults to dulwich.
        backoff: Seconds to sleep between attempts.
        sleep: Blocking sleep function, replaceable in tests.
        logger: Optional structured logger for retry events.

    Returns:
        A fully populated snapshot.

    Raises:
        RepositoryLockedError: If every attempt found the repository locked.
        ValueError: If max_attempts is below 1 or backoff is negative.
        Exception: Any other read failure, raised on first occurrence.
    """
    policy = RetryPolicy(max_attempts=max_attempts, backoff=backoff)
    if backend is None:
        backend = DulwichBackend()

    for attempt in policy.retrying(sleep=sleep):
        with attempt:
            return extract_snapshot(root, backend=backend)

        # Only failed attempts get here; tenacity sleeps before the next one
        match state_after(attempt.retry_state, policy):
            case Attempting(attempt=number, last_error=error):
                if logger is not None:
                    logger.warning(
                        "repository_locked",
                        root=str(root),
                        attempt=number - 1,
                        max_attempts=policy.max_attempts,
                        delay=policy.backoff,
                        error=str(error),
                    )
            case Failed(attempt=number, error=error):
                if logger is not None:
                    logger.error(
                        "repository_read_failed",
                        root=str(root),
                        attempt=number,
                        max_attempts=policy.max_attempts,
                        error=repr(error),
                    )
                raise error

    msg = f"retry loop for {root} ended without a result"
    raise RuntimeError(msg)


def read_repository(
    path: str | PathLike[str] | None,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    backoff: float = DEFAULT_BACKOFF,
    backend: GitBackend | None = None,
    sleep: Sleeper = time.sleep,
    logger: "FilteringBoundLogger | None" = None,  # noqa: UP037
) -> RepositorySnapshot:
    """Read the repository enclosing a path.

    Args:
        path: Any filesystem path, or None.
        max_attempts: Total attempts allowed while the repository is locked.
        backoff: Seconds to sleep between attempts.
        backend: Git backend. Defaults to dulwich.
        sleep: Blocking sleep function, replaceable in tests.
        logger: Optional structured logger for retry events.

    Returns:
        The snapshot, or RepositorySnapshot.EMPTY if no repository encloses
        the path.

    Raises:
        RepositoryLockedError: If every attempt found the repository locked.
    """
    reader = RepositoryReader(
        backend=backend,
        policy=RetryPolicy(max_attempts=max_attempts, backoff=backoff),
        sleep=sleep,
        logger=logger,
    )
    return reader.read(path)


class RepositoryReader:
    """Reusable locate-then-read entry point.

    Example:
        >>> reader = RepositoryReader(policy=RetryPolicy(max_attempts=5))
        >>> snapshot = reader.read(".")
        >>> snapshot.current_branch
        'main'
    """

    __slots__: Final = ("_backend", "_logger", "_policy", "_sleep")

    def __init__(
        self,
        *,
        backend: GitBackend | None = None,
        policy: RetryPolicy | None = None,
        sleep: Sleeper = time.sleep,
        logger: "FilteringBoundLogger | None" = None,  # noqa: UP037
    ) -> None:
        self._backend: GitBackend = backend if backend is not None else DulwichBackend()
        self._policy: RetryPolicy = policy if policy is not None else RetryPolicy()
        self._sleep: Sleeper = sleep
        self._logger: "FilteringBoundLogger | None" = logger  # noqa: UP037

    @classmethod
    def from_config(
        cls,
        config: "Config",  # noqa: UP037
        *,
        backend: GitBackend | None = None,
        logger: "FilteringBoundLogger | None" = None,  # noqa: UP037
    ) -> Self:
        """Create a reader using the [reader] section of a configuration."""
        return cls(
            backend=backend,
            policy=RetryPolicy(
                max_attempts=config.reader.max_attempts,
                backoff=config.reader.backoff,
            ),
            logger=logger,
        )

    @property
    def policy(self) -> RetryPolicy:
        """The retry policy applied to locked repositories."""
        return self._policy

    def locate(self, path: str | PathLike[str] | None) -> Path | None:
        """Find the repository root enclosing path, or None."""
        return locate_repository(path, backend=self._backend)

    def read_root(self, root: Path) -> RepositorySnapshot:
        """Read an already located repository root with retries."""
        return read_with_retries(
            root,
            self._policy.max_attempts,
            backend=self._backend,
            backoff=self._policy.backoff,
            sleep=self._sleep,
            logger=self._logger,
        )

    def read(self, path: str | PathLike[str] | None) -> RepositorySnapshot:
        """Read the repository enclosing path.

        Returns:
            The snapshot, or RepositorySnapshot.EMPTY when there is none.
        """
        root = self.locate(path)
        if root is None:
            if self._logger is not None:
                self._logger.debug("repository_not_found", path=str(path))
            return RepositorySnapshot.EMPTY
        return self.read_root(root)
