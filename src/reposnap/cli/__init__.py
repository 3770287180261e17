"""reposnap command-line interface."""

from ._app import app, create_app, main
from ._commands import ExitCode, register_commands
from ._context import CLIContext, OutputFormat

__all__ = [
    "CLIContext",
    "ExitCode",
    "OutputFormat",
    "app",
    "create_app",
    "main",
    "register_commands",
]
