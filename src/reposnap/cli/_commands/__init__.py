"""reposnap CLI commands."""
# pyright: reportUnusedCallResult=false

from typing import TYPE_CHECKING

from ._config import config
from ._shared import (
    ExitCode,
    exit_with_error,
    format_json,
    format_table,
    get_error_console,
)
from ._status import branches, describe_tracking, status

if TYPE_CHECKING:
    from cyclopts import App

__all__ = [
    "ExitCode",
    "branches",
    "config",
    "describe_tracking",
    "exit_with_error",
    "format_json",
    "format_table",
    "get_error_console",
    "register_commands",
    "status",
]


def register_commands(app: "App") -> None:  # noqa: UP037
    app.command(status)
    app.command(branches)
    app.command(config)
