# ruff: noqa: TC003  # Path needed at runtime for dataclass fields
"""Fake Git backend for testing.

This module provides FakeBackend and FakeRepositoryHandle, which implement
GitBackend and RepositoryHandle without touching the filesystem. Failures can
be scripted per open() call to exercise the reader's retry behaviour.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from os import PathLike, fspath
from pathlib import Path
from types import TracebackType
from typing import Self

from reposnap.snapshot._models import DETACHED_HEAD


@dataclass(slots=True)
class FakeRepositoryHandle:
    """In-memory repository handle.

    Attributes:
        working_directory: Reported working directory.
        branches: Branch names returned by list_branches().
        head: Friendly name returned by head_name().
        tracking: Value returned by tracking_counts().
        read_error: If set, raised by every read method.
        closed: True once close() has been called.
    """

    working_directory: Path
    branches: list[str] = field(default_factory=list)
    head: str = DETACHED_HEAD
    tracking: tuple[int, int] | None = None
    read_error: BaseException | None = None
    closed: bool = False

    def __enter__(self) -> Self:
        """Enter context manager.

        Returns:
            Self for use in with statement.
        """
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit context manager and close the handle."""
        self.close()

    def close(self) -> None:
        """Mark the handle as closed."""
        self.closed = True

    def _check(self) -> None:
        if self.read_error is not None:
            raise self.read_error

    def list_branches(self) -> list[str]:
        """Return the configured branch names."""
        self._check()
        return list(self.branches)

    def head_name(self) -> str:
        """Return the configured HEAD name."""
        self._check()
        return self.head

    def tracking_counts(self) -> tuple[int, int] | None:
        """Return the configured tracking counts."""
        self._check()
        return self.tracking


@dataclass(slots=True)
class FakeBackend:
    """In-memory Git backend.

    ``repositories`` maps repository roots to the handle state returned for
    them. Discovery walks upward from the given path through those roots, so
    any path below a registered root resolves to it.

    ``open_errors`` and ``read_errors`` are consumed one per open() call;
    ``None`` entries mean "succeed". Once exhausted, calls succeed.

    Example:
        >>> from reposnap.exceptions import RepositoryLockedError
        >>> backend = FakeBackend()
        >>> backend.add_repository(Path("/fake/repo"), branches=["main"], head="main")
        >>> backend.discover_root("/fake/repo/src")
        PosixPath('/fake/repo')
        >>> backend.open_errors = [RepositoryLockedError("locked"), None]
    """

    repositories: dict[Path, FakeRepositoryHandle] = field(default_factory=dict)
    open_errors: list[BaseException | None] = field(default_factory=list)
    read_errors: list[BaseException | None] = field(default_factory=list)
    discover_calls: list[str] = field(default_factory=list)
    opened: list[FakeRepositoryHandle] = field(default_factory=list)
    _failed_opens: int = field(default=0)

    def add_repository(
        self,
        root: Path,
        *,
        branches: Sequence[str] = (),
        head: str = DETACHED_HEAD,
        tracking: tuple[int, int] | None = None,
    ) -> None:
        """Register a repository at root."""
        self.repositories[root] = FakeRepositoryHandle(
            working_directory=root,
            branches=list(branches),
            head=head,
            tracking=tracking,
        )

    @property
    def open_count(self) -> int:
        """Number of open() calls made so far."""
        return len(self.opened) + self._failed_opens

    def discover_root(self, path: str | PathLike[str]) -> Path | None:
        """Return the nearest registered root at or above path."""
        self.discover_calls.append(fspath(path))
        current = Path(fspath(path))
        for candidate in (current, *current.parents):
            if candidate in self.repositories:
                return candidate
        return None

    def open(self, root: Path) -> FakeRepositoryHandle:
        """Return a fresh handle for root, or raise the next scripted error.

        Raises:
            KeyError: If root was never registered.
        """
        if self.open_errors:
            error = self.open_errors.pop(0)
            if error is not None:
                self._failed_opens += 1
                raise error

        template = self.repositories[root]
        read_error = self.read_errors.pop(0) if self.read_errors else None
        handle = FakeRepositoryHandle(
            working_directory=template.working_directory,
            branches=list(template.branches),
            head=template.head,
            tracking=template.tracking,
            read_error=read_error,
        )
        self.opened.append(handle)
        return handle
