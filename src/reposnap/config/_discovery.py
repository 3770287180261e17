"""Configuration source discovery."""

from pathlib import Path
from typing import Any

from reposnap.config._defaults import DEFAULT_CONFIG
from reposnap.config._models import ConfigSource, ConfigSourceName
from reposnap.utils import get_user_config_path


def _file_exists(path: Path) -> bool:
    """Check if a file exists, treating permission errors as absence."""
    try:
        return path.is_file()
    except OSError:
        return False


def discover_sources(
    *,
    config_path: Path | None = None,
    include_env: bool = True,
    cli_overrides: dict[str, Any] | None = None,  # pyright: ignore[reportExplicitAny]
) -> list[ConfigSource]:
    """Discover all configuration sources.

    Args:
        config_path: Explicit config file given on the command line.
        include_env: Include environment variables as a source.
        cli_overrides: Values from command-line flags, if any.

    Returns:
        ConfigSource objects in precedence order (highest first). File
        sources that don't exist are included with exists=False; values are
        filled in by Config.load().

    Examples:
        >>> [source.name.value for source in discover_sources()]
        ['env', 'user', 'default']
    """
    sources: list[ConfigSource] = []

    if cli_overrides is not None:
        sources.append(
            ConfigSource(
                name=ConfigSourceName.CLI,
                path=None,
                exists=bool(cli_overrides),
                values=cli_overrides,
            )
        )

    if include_env:
        sources.append(
            ConfigSource(
                name=ConfigSourceName.ENV,
                path=None,
                exists=True,  # Actual values parsed during loading phase
                values={},
            )
        )

    if config_path is not None:
        sources.append(
            ConfigSource(
                name=ConfigSourceName.FILE,
                path=config_path,
                exists=_file_exists(config_path),
                values={},
            )
        )

    user_path = get_user_config_path()
    sources.append(
        ConfigSource(
            name=ConfigSourceName.USER,
            path=user_path,
            exists=_file_exists(user_path),
            values={},
        )
    )

    sources.append(
        ConfigSource(
            name=ConfigSourceName.DEFAULT,
            path=None,
            exists=True,
            values=DEFAULT_CONFIG,
        )
    )

    return sources
