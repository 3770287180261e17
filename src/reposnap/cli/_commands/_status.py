# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# ruff: noqa: D415, A002
"""Repository status commands."""

from typing import Annotated

from cyclopts import Parameter
from rich.console import Console

from reposnap.cli._context import CLIContext, OutputFormat
from reposnap.exceptions import RepositoryLockedError
from reposnap.snapshot import DETACHED_HEAD, RepositoryReader, RepositorySnapshot

from ._shared import ExitCode, exit_with_error, format_json, format_table

NOT_A_REPOSITORY = "not a git repository"


def describe_tracking(snapshot: RepositorySnapshot) -> str:
    """Summarise ahead/behind counts for display.

    Examples:
        >>> describe_tracking(RepositorySnapshot(ahead_by=2, behind_by=1))
        '↑2 ↓1'
        >>> describe_tracking(RepositorySnapshot(ahead_by=0, behind_by=0))
        'up to date'
        >>> describe_tracking(RepositorySnapshot())
        'no upstream'
    """
    if not snapshot.has_upstream:
        return "no upstream"
    if snapshot.ahead_by == 0 and snapshot.behind_by == 0:
        return "up to date"
    parts: list[str] = []
    if snapshot.ahead_by:
        parts.append(f"↑{snapshot.ahead_by}")
    if snapshot.behind_by:
        parts.append(f"↓{snapshot.behind_by}")
    return " ".join(parts)


def _read(reader: RepositoryReader, path: str, ctx: CLIContext) -> RepositorySnapshot:
    """Read one path, exiting with a specific code on failure."""
    try:
        return reader.read(path)
    except RepositoryLockedError as e:
        exit_with_error(
            f"{path}: repository is locked after "
            f"{reader.policy.max_attempts} attempt(s): {e}",
            ExitCode.LOCKED,
        )
    except Exception as e:  # noqa: BLE001 - reported to the user with an exit code
        if ctx.logger is not None:
            ctx.logger.exception("read_failed", path=path)
        exit_with_error(f"{path}: {e}", ExitCode.READ_ERROR)


def status(
    *paths: Annotated[
        str,
        Parameter(help="Paths to inspect. Defaults to the current directory."),
    ],
    format: Annotated[
        OutputFormat,
        Parameter(name=["--format", "-f"], help="Output format (table, json, plain)"),
    ] = OutputFormat.TABLE,
) -> None:
    """Show branch and tracking state of the repositories enclosing PATHS"""
    ctx = CLIContext.get_current()
    if format == OutputFormat.TOML:
        exit_with_error(
            f"Unsupported format for status: {format.value}",
            ExitCode.VALIDATION_ERROR,
        )

    reader = RepositoryReader.from_config(ctx.config, logger=ctx.logger)

    results = [(path, _read(reader, path, ctx)) for path in paths or (".",)]

    if format == OutputFormat.JSON:
        # A path outside any repository maps to an empty object
        data = {
            path: {} if snapshot.is_empty else snapshot.to_dict()
            for path, snapshot in results
        }
        print(format_json(data))  # noqa: T201
        return

    if format == OutputFormat.PLAIN:
        for path, snapshot in results:
            if snapshot.is_empty:
                print(f"{path}: {NOT_A_REPOSITORY}")  # noqa: T201
            else:
                print(  # noqa: T201
                    f"{snapshot.name} [{snapshot.current_branch}] "
                    f"{describe_tracking(snapshot)} {snapshot.path}"
                )
        return

    rows: list[list[str]] = []
    for path, snapshot in results:
        if snapshot.is_empty:
            rows.append([path, NOT_A_REPOSITORY, "", ""])
        else:
            rows.append(
                [
                    snapshot.name,
                    snapshot.current_branch,
                    describe_tracking(snapshot),
                    snapshot.path,
                ]
            )
    print(format_table(["Repository", "Branch", "Tracking", "Path"], rows))  # noqa: T201

    if ctx.verbose:
        Console().print(f"[dim]{len(results)} path(s) inspected[/dim]")


def branches(
    path: Annotated[str, Parameter(help="Path inside the repository")] = ".",
) -> None:
    """List branches of the repository enclosing PATH, marking the current one"""
    ctx = CLIContext.get_current()
    reader = RepositoryReader.from_config(ctx.config, logger=ctx.logger)

    snapshot = _read(reader, path, ctx)
    if snapshot.is_empty:
        exit_with_error(f"{path}: {NOT_A_REPOSITORY}", ExitCode.NOT_FOUND)

    # Detached or unborn HEAD is not in the branch list
    if snapshot.current_branch not in snapshot.branches:
        print(f"* {snapshot.current_branch or DETACHED_HEAD}")  # noqa: T201
    for branch in snapshot.branches:
        marker = "*" if branch == snapshot.current_branch else " "
        print(f"{marker} {branch}")  # noqa: T201
