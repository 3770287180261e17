"""Git access protocols for type-safe dependency injection.

The snapshot reader only talks to Git through these protocols, so the
dulwich-backed implementation can be swapped for a fake in tests or for a
different Git library without touching the retry or snapshot logic.
"""

# ruff: noqa: TC003  # Path needed at runtime for Protocol method signatures
from os import PathLike
from pathlib import Path
from types import TracebackType
from typing import Protocol, Self, runtime_checkable


@runtime_checkable
class RepositoryHandle(Protocol):
    """An open repository, valid until close() is called.

    Handles are context managers; leaving the ``with`` block closes them.
    """

    @property
    def working_directory(self) -> Path:
        """Absolute path of the repository's working directory."""
        ...

    def list_branches(self) -> list[str]:
        """Return friendly names of all local and remote branches."""
        ...

    def head_name(self) -> str:
        """Return the friendly name of HEAD.

        Returns:
            The branch name HEAD points at, or a detached-HEAD marker.
        """
        ...

    def tracking_counts(self) -> tuple[int, int] | None:
        """Return ``(ahead, behind)`` relative to HEAD's upstream.

        Returns:
            Commit counts, or None when HEAD has no usable upstream.
        """
        ...

    def close(self) -> None:
        """Release file handles held by the repository."""
        ...

    def __enter__(self) -> Self: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...


@runtime_checkable
class GitBackend(Protocol):
    """Factory for repository discovery and handles."""

    def discover_root(self, path: str | PathLike[str]) -> Path | None:
        """Find the nearest enclosing repository root.

        Args:
            path: Any filesystem path; it need not exist.

        Returns:
            The repository root, or None if no repository encloses the path.
        """
        ...

    def open(self, root: Path) -> RepositoryHandle:
        """Open the repository at an already discovered root.

        Raises:
            RepositoryLockedError: If repository metadata is locked.
        """
        ...
