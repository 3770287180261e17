from pathlib import Path

import platformdirs


def get_log_dir() -> Path:
    """Get the platform-specific reposnap log directory."""
    return platformdirs.user_log_path("reposnap")


def get_cli_log_file() -> Path:
    """Get the path to the CLI log file.

    Returns:
        Path to cli.log inside the log directory (may not exist yet).
    """
    return get_log_dir() / "cli.log"


def get_user_config_path() -> Path:
    r"""Get platform-specific user config file path.

    - Linux: ``~/.config/reposnap/config.toml``
    - macOS: ``~/Library/Application Support/reposnap/config.toml``
    - Windows: ``%APPDATA%\reposnap\config.toml``

    The path is returned regardless of whether the file exists.
    """
    return platformdirs.user_config_path("reposnap") / "config.toml"
