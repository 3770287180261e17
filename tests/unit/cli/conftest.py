from collections.abc import Callable

import pytest
from rich.console import Console

from reposnap.cli import create_app

RunCli = Callable[..., int]


@pytest.fixture
def run_cli(console: Console) -> RunCli:
    """Return a function invoking the app and returning its exit code."""

    def _run(*tokens: str) -> int:
        app = create_app(console=console, error_console=console, exit_on_error=False)
        try:
            app.meta(list(tokens))
        except SystemExit as e:
            return int(e.code or 0)
        return 0

    return _run
