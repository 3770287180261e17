"""Shared test fixtures for reposnap tests."""

import subprocess
from collections.abc import Callable
from io import StringIO
from pathlib import Path

import pytest
from rich.console import Console

from reposnap.snapshot import FakeBackend


def run_git(cwd: Path, *args: str) -> str:
    """Run a git command and return stdout."""
    result = subprocess.run(  # noqa: S603 - Safe: running git in tests
        ["git", *args],  # noqa: S607
        cwd=str(cwd),
        capture_output=True,
        text=True,
        check=False,
    )
    if result.returncode != 0:
        msg = f"git {' '.join(args)} failed: {result.stderr}"
        raise RuntimeError(msg)
    return result.stdout


def init_git_repo(path: Path, *, bare: bool = False) -> Path:
    """Initialize a repository whose default branch is main."""
    path.mkdir(parents=True, exist_ok=True)
    run_git(path, "init", *(["--bare"] if bare else []))
    run_git(path, "symbolic-ref", "HEAD", "refs/heads/main")
    run_git(path, "config", "user.name", "Test User")
    run_git(path, "config", "user.email", "test@example.com")
    run_git(path, "config", "commit.gpgsign", "false")
    return path


def commit_file(repo: Path, name: str, content: str | None = None) -> str:
    """Write a file, commit it, and return the new commit sha."""
    (repo / name).write_text(content if content is not None else f"{name}\n")
    run_git(repo, "add", name)
    run_git(repo, "commit", "-m", f"Add {name}")
    return run_git(repo, "rev-parse", "HEAD").strip()


GitRepoFactory = Callable[..., Path]


@pytest.fixture
def make_git_repo(tmp_path: Path) -> GitRepoFactory:
    """Return a factory creating repositories with an initial commit on main."""

    def _make(name: str = "project", *, commit: bool = True) -> Path:
        repo = init_git_repo(tmp_path / name)
        if commit:
            commit_file(repo, "README.md", "# Test Repository\n")
        return repo

    return _make


@pytest.fixture
def git_repo(make_git_repo: GitRepoFactory) -> Path:
    """Create a real repository with one commit on main."""
    return make_git_repo()


@pytest.fixture
def fake_backend() -> FakeBackend:
    """Create a FakeBackend with one repository at /fake/project."""
    backend = FakeBackend()
    backend.add_repository(
        Path("/fake/project"),
        branches=["main", "feature", "origin/main"],
        head="main",
        tracking=(2, 1),
    )
    return backend


@pytest.fixture
def console() -> Console:
    """Create a recording console writing to memory."""
    return Console(file=StringIO(), force_terminal=False, width=120, record=True)


@pytest.fixture(autouse=True)
def _isolate_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Keep tests away from the user's config, logs and REPOSNAP_* variables."""
    import os

    for key in list(os.environ):
        if key.startswith("REPOSNAP_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "xdg-state"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "xdg-cache"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
