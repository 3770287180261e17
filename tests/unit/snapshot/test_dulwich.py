"""Unit tests for the dulwich adapter helpers."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from dulwich.errors import NotGitRepository
from dulwich.file import FileLocked
from pytest_mock import MockerFixture

from reposnap.exceptions import RepositoryLockedError
from reposnap.snapshot import (
    DETACHED_HEAD,
    DulwichBackend,
    DulwichRepositoryHandle,
    GitBackend,
    RepositoryHandle,
)
from reposnap.snapshot._dulwich import decode_bytes, friendly_name, get_worktree_dir


class TestDecodeBytes:
    def test_bytes_are_decoded(self) -> None:
        assert decode_bytes(b"refs/heads/main") == "refs/heads/main"

    def test_str_passes_through(self) -> None:
        assert decode_bytes("main") == "main"


class TestFriendlyName:
    @pytest.mark.parametrize(
        ("ref", "expected"),
        [
            (b"refs/heads/main", "main"),
            (b"refs/heads/feature/login", "feature/login"),
            (b"refs/remotes/origin/main", "origin/main"),
            ("refs/remotes/upstream/release/1.0", "upstream/release/1.0"),
            (b"refs/tags/v1.0", "refs/tags/v1.0"),
            (b"HEAD", "HEAD"),
        ],
    )
    def test_strips_branch_prefixes(self, ref: bytes | str, expected: str) -> None:
        assert friendly_name(ref) == expected


class TestGetWorktreeDir:
    def test_non_bare_path(self) -> None:
        repo = MagicMock()
        repo.path = "/work/project"
        assert get_worktree_dir(repo) == Path("/work/project")

    def test_dot_git_path_reports_parent(self) -> None:
        repo = MagicMock()
        repo.path = "/work/project/.git"
        assert get_worktree_dir(repo) == Path("/work/project")

    def test_bare_repository_reports_itself(self) -> None:
        repo = MagicMock()
        repo.path = "/srv/git/project.git"
        assert get_worktree_dir(repo) == Path("/srv/git/project.git")


class TestProtocolConformance:
    def test_backend_is_git_backend(self) -> None:
        assert isinstance(DulwichBackend(), GitBackend) is True

    def test_handle_is_repository_handle(self) -> None:
        repo = MagicMock()
        repo.path = "/work/project"
        assert isinstance(DulwichRepositoryHandle(repo), RepositoryHandle) is True


class TestLockTranslation:
    def test_open_translates_file_locked(self, mocker: MockerFixture) -> None:
        _ = mocker.patch(
            "reposnap.snapshot._dulwich.Repo",
            side_effect=FileLocked(
                "/work/project/.git/config", "/work/project/.git/config.lock"
            ),
        )
        with pytest.raises(RepositoryLockedError) as exc_info:
            _ = DulwichBackend().open(Path("/work/project"))
        assert exc_info.value.path == Path("/work/project/.git/config.lock")
        assert isinstance(exc_info.value.__cause__, FileLocked)

    def test_discover_translates_file_locked(self, mocker: MockerFixture) -> None:
        repo_class = mocker.patch("reposnap.snapshot._dulwich.Repo")
        repo_class.discover.side_effect = FileLocked(
            "/work/project/.git/config", "/work/project/.git/config.lock"
        )
        with pytest.raises(RepositoryLockedError) as exc_info:
            _ = DulwichBackend().discover_root("/work/project/src")
        assert exc_info.value.path == Path("/work/project/.git/config.lock")

    def test_discover_not_a_repository_is_none(self, mocker: MockerFixture) -> None:
        repo_class = mocker.patch("reposnap.snapshot._dulwich.Repo")
        repo_class.discover.side_effect = NotGitRepository("no repo")
        assert DulwichBackend().discover_root("/elsewhere") is None

    def test_read_translates_file_locked(self) -> None:
        repo = MagicMock()
        repo.path = "/work/project"
        repo.refs.get_symrefs.side_effect = FileLocked(
            "/work/project/.git/HEAD", "/work/project/.git/HEAD.lock"
        )
        handle = DulwichRepositoryHandle(repo)
        with pytest.raises(RepositoryLockedError):
            _ = handle.head_name()

    def test_other_errors_pass_through(self, mocker: MockerFixture) -> None:
        _ = mocker.patch(
            "reposnap.snapshot._dulwich.Repo", side_effect=PermissionError("denied")
        )
        with pytest.raises(PermissionError):
            _ = DulwichBackend().open(Path("/work/project"))


class TestHandleWithMockRepo:
    def test_detached_head_has_no_tracking(self) -> None:
        repo = MagicMock()
        repo.path = "/work/project"
        repo.refs.get_symrefs.return_value = {}
        handle = DulwichRepositoryHandle(repo)
        assert handle.head_name() == DETACHED_HEAD
        assert handle.tracking_counts() is None

    def test_exit_closes_repo(self) -> None:
        repo = MagicMock()
        repo.path = "/work/project"
        with DulwichRepositoryHandle(repo):
            pass
        repo.close.assert_called_once_with()
