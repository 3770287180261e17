"""End-to-end CLI tests against real repositories."""

import json
from pathlib import Path

import pytest
from rich.console import Console

from reposnap.cli import ExitCode, create_app
from tests.conftest import commit_file, run_git


@pytest.fixture
def log_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    path = tmp_path / "logs" / "cli.log"
    monkeypatch.setenv("REPOSNAP_LOGGING__FILE", str(path))
    return path


def _run(console: Console, *tokens: str) -> int:
    app = create_app(console=console, error_console=console, exit_on_error=False)
    try:
        app.meta(list(tokens))
    except SystemExit as e:
        return int(e.code or 0)
    return 0


class TestStatus:
    def test_json_for_repository_and_plain_directory(
        self,
        tmp_path: Path,
        git_repo: Path,
        console: Console,
        log_file: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        plain = tmp_path / "plain"
        plain.mkdir()

        code = _run(console, "status", str(git_repo), str(plain), "--format", "json")

        data = json.loads(capsys.readouterr().out)
        assert code == ExitCode.SUCCESS
        assert data[str(plain)] == {}
        assert data[str(git_repo)] == {
            "name": git_repo.name,
            "path": str(git_repo),
            "branches": ["main"],
            "current_branch": "main",
            "ahead_by": -1,
            "behind_by": -1,
        }

    def test_table_shows_tracking(
        self,
        git_repo: Path,
        console: Console,
        log_file: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        run_git(git_repo, "checkout", "-q", "-b", "feature")
        run_git(git_repo, "branch", "--set-upstream-to=main")
        _ = commit_file(git_repo, "feature.txt")

        code = _run(console, "status", str(git_repo))

        out = capsys.readouterr().out
        assert code == ExitCode.SUCCESS
        assert "feature" in out
        assert "↑1" in out

    def test_writes_log_file(
        self, git_repo: Path, console: Console, log_file: Path
    ) -> None:
        _ = _run(console, "--verbose", "status", str(git_repo))
        assert log_file.exists()


class TestBranches:
    def test_lists_branches(
        self,
        git_repo: Path,
        console: Console,
        log_file: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        run_git(git_repo, "branch", "develop")

        code = _run(console, "branches", str(git_repo))

        assert code == ExitCode.SUCCESS
        assert capsys.readouterr().out.splitlines() == ["  develop", "* main"]

    def test_outside_repository(
        self,
        tmp_path: Path,
        console: Console,
        log_file: Path,
    ) -> None:
        plain = tmp_path / "plain"
        plain.mkdir()
        assert _run(console, "branches", str(plain)) == ExitCode.NOT_FOUND
