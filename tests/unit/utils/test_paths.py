"""Tests for platform path helpers."""

from pathlib import Path

import pytest

from reposnap.utils import get_cli_log_file, get_log_dir, get_user_config_path


class TestPaths:
    def test_cli_log_file_lives_in_log_dir(self) -> None:
        assert get_cli_log_file() == get_log_dir() / "cli.log"

    def test_user_config_path_follows_xdg(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
        assert get_user_config_path() == tmp_path / "cfg" / "reposnap" / "config.toml"

    def test_paths_are_not_created(self) -> None:
        assert get_user_config_path().exists() is False
        assert get_cli_log_file().exists() is False
