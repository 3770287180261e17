# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# ruff: noqa: D415, A002
"""Config command for viewing the effective reposnap configuration."""

from typing import Annotated

from cyclopts import Parameter

from reposnap.cli._context import CLIContext, OutputFormat

from ._shared import ExitCode, exit_with_error, format_json, format_table


def _format_sources(ctx: CLIContext, format: OutputFormat) -> str:
    sources = ctx.config.sources
    if format == OutputFormat.JSON:
        return format_json(
            [
                {
                    "name": source.name.value,
                    "path": str(source.path) if source.path else None,
                    "exists": source.exists,
                }
                for source in sources
            ]
        )
    rows = [
        [
            str(precedence),
            source.name.value,
            str(source.path) if source.path else "-",
            "yes" if source.exists else "no",
        ]
        for precedence, source in enumerate(sources, start=1)
    ]
    return format_table(["#", "Source", "Path", "Exists"], rows)


def config(
    *,
    format: Annotated[
        OutputFormat,
        Parameter(name=["--format", "-f"], help="Output format (toml, json)"),
    ] = OutputFormat.TOML,
    sources: Annotated[
        bool, Parameter(help="List configuration sources instead of values")
    ] = False,
) -> None:
    """Show the effective configuration"""
    ctx = CLIContext.get_current()

    if sources:
        print(_format_sources(ctx, format))  # noqa: T201
        return

    # Defaults replaced a config file that failed to load
    if ctx.config_error is not None:
        exit_with_error(ctx.config_error, ExitCode.LOAD_ERROR)

    if format == OutputFormat.JSON:
        print(format_json(ctx.config.to_dict()))  # noqa: T201
    elif format == OutputFormat.TOML:
        print(ctx.config.to_toml(), end="")  # noqa: T201
    else:
        exit_with_error(
            f"Unsupported format for config: {format.value}",
            ExitCode.VALIDATION_ERROR,
        )
