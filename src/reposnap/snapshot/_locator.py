"""Repository root discovery."""

from os import PathLike, fspath
from pathlib import Path

from reposnap.snapshot._dulwich import DulwichBackend
from reposnap.snapshot._protocol import GitBackend


def locate_repository(
    path: str | PathLike[str] | None,
    *,
    backend: GitBackend | None = None,
) -> Path | None:
    """Find the repository enclosing a path.

    Absence of a repository is a normal outcome, not an error.

    Args:
        path: Any filesystem path. Empty or None short-circuits without
            touching the filesystem.
        backend: Git backend used for discovery. Defaults to dulwich.

    Returns:
        The repository root, or None if no repository encloses the path.
    """
    if path is None or not fspath(path):
        return None

    if backend is None:
        backend = DulwichBackend()
    return backend.discover_root(path)
