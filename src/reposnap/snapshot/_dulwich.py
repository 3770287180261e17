"""dulwich-backed Git access.

This module implements GitBackend and RepositoryHandle on top of dulwich.
Branch enumeration, HEAD resolution and ahead/behind walks are all delegated
to dulwich; this module only maps its byte-oriented results to friendly
strings and turns dulwich's lock failures into RepositoryLockedError.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from os import PathLike, fspath
from pathlib import Path
from types import TracebackType
from typing import Final, Self

from dulwich.errors import NotGitRepository
from dulwich.file import FileLocked
from dulwich.repo import Repo

from reposnap.exceptions import RepositoryLockedError
from reposnap.snapshot._models import DETACHED_HEAD

_HEADS_PREFIX: Final = "refs/heads/"
_REMOTES_PREFIX: Final = "refs/remotes/"


def decode_bytes(value: bytes | str) -> str:
    """Decode bytes to str if needed.

    Args:
        value: A bytes or str value.

    Returns:
        The value as a string.
    """
    if isinstance(value, bytes):
        return value.decode()
    return value


def friendly_name(ref: bytes | str) -> str:
    """Strip the refs/heads/ or refs/remotes/ prefix from a reference.

    Args:
        ref: Fully qualified reference name.

    Returns:
        The short branch name, or the reference unchanged if it is not a
        branch reference.
    """
    ref_str = decode_bytes(ref)
    for prefix in (_HEADS_PREFIX, _REMOTES_PREFIX):
        if ref_str.startswith(prefix):
            return ref_str[len(prefix) :]
    return ref_str


def get_worktree_dir(repo: Repo) -> Path:
    """Get the worktree directory for a repository.

    Args:
        repo: The repository instance.

    Returns:
        Path to the worktree directory. Bare repositories report their own
        directory.
    """
    path = Path(decode_bytes(repo.path))
    # If path is .git directory, return parent
    if path.name == ".git":
        return path.parent
    return path


@contextmanager
def _translate_lock_errors() -> Iterator[None]:
    """Re-raise dulwich's FileLocked as RepositoryLockedError."""
    try:
        yield
    except FileLocked as e:
        lock_file = getattr(e, "lockfilename", None) or getattr(e, "filename", None)
        msg = f"Repository metadata is locked: {e}"
        raise RepositoryLockedError(
            msg,
            path=Path(decode_bytes(lock_file)) if lock_file else None,
        ) from e


class DulwichRepositoryHandle:
    """Open dulwich repository implementing RepositoryHandle.

    Use as a context manager so the underlying Repo is always closed:

    Example:
        >>> with DulwichBackend().open(Path("/path/to/repo")) as handle:
        ...     handle.head_name()
        'main'
    """

    __slots__: Final = ("_repo", "_working_directory")
    _repo: Repo
    _working_directory: Path

    def __init__(self, repo: Repo) -> None:
        """Wrap an already opened dulwich Repo.

        Args:
            repo: The repository to take ownership of.
        """
        self._repo = repo
        self._working_directory = get_worktree_dir(repo)

    def __enter__(self) -> Self:
        """Enter the context manager.

        Returns:
            The handle instance.
        """
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the context manager and close the repository.

        Args:
            exc_type: Exception type if an exception was raised.
            exc_val: Exception value if an exception was raised.
            exc_tb: Exception traceback if an exception was raised.
        """
        self.close()

    def close(self) -> None:
        """Close the underlying dulwich Repo."""
        self._repo.close()

    @property
    def working_directory(self) -> Path:
        """Absolute path of the working directory."""
        return self._working_directory

    def list_branches(self) -> list[str]:
        """Return local branches followed by remote-tracking branches.

        Symbolic remote HEAD references (``refs/remotes/origin/HEAD``) are
        not branches and are left out.

        Returns:
            Friendly branch names, each group sorted by name.
        """
        with _translate_lock_errors():
            ref_names = [decode_bytes(ref) for ref in self._repo.refs.allkeys()]
            symrefs = {
                decode_bytes(name) for name in self._repo.refs.get_symrefs()
            }

        local = sorted(
            friendly_name(ref) for ref in ref_names if ref.startswith(_HEADS_PREFIX)
        )
        remote = sorted(
            friendly_name(ref)
            for ref in ref_names
            if ref.startswith(_REMOTES_PREFIX) and ref not in symrefs
        )
        return local + remote

    def _head_ref(self) -> str | None:
        """Return the reference HEAD points at, or None when detached."""
        with _translate_lock_errors():
            symrefs = self._repo.refs.get_symrefs()

        head_ref = symrefs.get(b"HEAD")
        if head_ref is None:
            return None
        return decode_bytes(head_ref)

    def head_name(self) -> str:
        """Return the friendly name of HEAD.

        Returns:
            The branch HEAD points at (even if it has no commits yet), or
            "(no branch)" when HEAD is detached.
        """
        head_ref = self._head_ref()
        if head_ref is None:
            return DETACHED_HEAD
        return friendly_name(head_ref)

    def _upstream_ref(self, branch: str) -> bytes | None:
        """Resolve the upstream reference configured for a local branch.

        Args:
            branch: Local branch name without refs/heads/.

        Returns:
            The fully qualified upstream reference, or None when the branch
            has no ``branch.<name>.remote``/``branch.<name>.merge`` pair.
        """
        with _translate_lock_errors():
            config = self._repo.get_config()
        section = (b"branch", branch.encode())
        try:
            remote = config.get(section, b"remote")
            merge = config.get(section, b"merge")
        except KeyError:
            return None

        # "." means the upstream is another local branch
        if remote == b".":
            return merge
        merge_branch = friendly_name(merge).encode()
        return b"refs/remotes/" + remote + b"/" + merge_branch

    def _resolve(self, ref: bytes) -> bytes | None:
        with _translate_lock_errors():
            try:
                return self._repo.refs[ref]
            except KeyError:
                return None

    def _count_exclusive(self, include: bytes, exclude: bytes) -> int:
        """Count commits reachable from include but not from exclude."""
        with _translate_lock_errors():
            walker = self._repo.get_walker(include=[include], exclude=[exclude])
            return sum(1 for _ in walker)

    def tracking_counts(self) -> tuple[int, int] | None:
        """Return ``(ahead, behind)`` of HEAD relative to its upstream.

        Returns:
            Commit counts, or None when HEAD is detached, unborn, has no
            upstream configured, or the upstream reference does not exist.
        """
        head_ref = self._head_ref()
        if head_ref is None or not head_ref.startswith(_HEADS_PREFIX):
            return None

        upstream_ref = self._upstream_ref(head_ref[len(_HEADS_PREFIX) :])
        if upstream_ref is None:
            return None

        local_sha = self._resolve(head_ref.encode())
        upstream_sha = self._resolve(upstream_ref)
        if local_sha is None or upstream_sha is None:
            return None
        if local_sha == upstream_sha:
            return 0, 0

        ahead = self._count_exclusive(local_sha, upstream_sha)
        behind = self._count_exclusive(upstream_sha, local_sha)
        return ahead, behind


class DulwichBackend:
    """GitBackend implementation using dulwich."""

    __slots__: Final = ()

    def discover_root(self, path: str | PathLike[str]) -> Path | None:
        """Find the nearest enclosing repository root.

        Searches upward from the path; the path itself need not exist. The
        repository opened during discovery is closed before returning.

        Args:
            path: Directory or file to start the search from.

        Returns:
            The working directory of the enclosing repository, or None.

        Raises:
            RepositoryLockedError: If repository metadata is locked.
        """
        try:
            with _translate_lock_errors():
                repo = Repo.discover(fspath(path))
        except NotGitRepository:
            return None

        try:
            return get_worktree_dir(repo)
        finally:
            repo.close()

    def open(self, root: Path) -> DulwichRepositoryHandle:
        """Open the repository at root.

        Args:
            root: Repository root as returned by discover_root().

        Returns:
            An open handle; the caller must close it.

        Raises:
            RepositoryLockedError: If repository metadata is locked.
            NotGitRepository: If root is not a repository.
        """
        with _translate_lock_errors():
            return DulwichRepositoryHandle(Repo(str(root)))
