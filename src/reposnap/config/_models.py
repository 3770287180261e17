# pyright: reportExplicitAny=false, reportAny=false
"""Configuration models.

This module provides the Pydantic models for reposnap configuration and the
Config container with its factory methods.
"""

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Any, ClassVar, Self

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError

from reposnap.config._defaults import DEFAULT_CONFIG
from reposnap.config._loader import deep_merge, parse_env_vars, read_toml_file
from reposnap.exceptions import ConfigValidationError


class LogLevel(StrEnum):
    """Log level threshold values."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(StrEnum):
    """Log output format values."""

    JSON = "json"
    TEXT = "text"


class ConfigSourceName(StrEnum):
    """Configuration source names, highest precedence first."""

    CLI = "cli"
    ENV = "env"
    FILE = "file"
    USER = "user"
    DEFAULT = "default"


@dataclass(frozen=True, slots=True)
class ConfigSource:
    """Represents a configuration source.

    Attributes:
        name: The source type identifier.
        path: Path to the config file, or None for non-file sources.
        exists: Whether the source exists (file exists, or values are present).
        values: Configuration values from this source.
    """

    name: ConfigSourceName
    path: Path | None
    exists: bool
    values: dict[str, Any]


class LoggingConfig(BaseModel):
    """Logging configuration section.

    Attributes:
        level: Log level threshold.
        format: Log output format.
        file: Path to log file (empty uses the default CLI log file).
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.JSON
    file: str = ""


class ReaderConfig(BaseModel):
    """Snapshot reader configuration section.

    Attributes:
        max_attempts: Attempts allowed while the repository is locked.
        backoff: Seconds to wait between attempts.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    max_attempts: int = Field(default=3, ge=1)
    backoff: float = Field(default=0.5, ge=0)


def _validation_error(
    error: ValidationError, *, source: str | None = None
) -> ConfigValidationError:
    """Convert the first Pydantic error into a ConfigValidationError."""
    details = error.errors()[0]
    key = ".".join(str(part) for part in details["loc"])
    msg = f"Invalid value for '{key}': {details['msg']}"
    return ConfigValidationError(
        msg,
        key=key,
        value=details.get("input"),
        expected=details["msg"],
        source=source,
    )


class Config(BaseModel):
    """Configuration container with typed access.

    Use the factory methods (from_dict, from_file, load) rather than the
    constructor so defaults are merged in and errors are translated.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    reader: ReaderConfig = Field(default_factory=ReaderConfig)

    _sources: tuple[ConfigSource, ...] = PrivateAttr(default=())

    @classmethod
    def _build(
        cls,
        merged: dict[str, Any],
        sources: tuple[ConfigSource, ...],
        *,
        source: str | None = None,
    ) -> Self:
        try:
            config = cls.model_validate(merged)
        except ValidationError as e:
            raise _validation_error(e, source=source) from e
        config._sources = sources
        return config

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create configuration from a dictionary merged over the defaults.

        Raises:
            ConfigValidationError: If a value is invalid.
        """
        return cls._build(deep_merge(DEFAULT_CONFIG, data), ())

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """Load configuration from a single TOML file merged over the defaults.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigLoadError: If the file cannot be parsed.
            ConfigValidationError: If a value is invalid.
        """
        data = read_toml_file(path)
        source = ConfigSource(
            name=ConfigSourceName.FILE, path=path, exists=True, values=data
        )
        return cls._build(
            deep_merge(DEFAULT_CONFIG, data), (source,), source=str(path)
        )

    @classmethod
    def load(
        cls,
        *,
        config_path: Path | None = None,
        include_env: bool = True,
        cli_overrides: dict[str, Any] | None = None,
    ) -> Self:
        """Load merged configuration from all sources.

        Sources are merged lowest to highest precedence:
        defaults -> user file -> explicit file -> env -> cli.

        Args:
            config_path: Explicit config file (--config); must exist.
            include_env: Include REPOSNAP_SECTION__KEY environment variables.
            cli_overrides: Values from command-line flags.

        Returns:
            Merged configuration object.

        Raises:
            FileNotFoundError: If config_path does not exist.
            ConfigLoadError: If a config file cannot be parsed.
            ConfigValidationError: If the merged config is invalid.
        """
        from reposnap.config._discovery import discover_sources  # noqa: PLC0415

        sources = discover_sources(
            config_path=config_path,
            include_env=include_env,
            cli_overrides=cli_overrides,
        )

        merged: dict[str, Any] = {}
        loaded: list[ConfigSource] = []
        for source in reversed(sources):
            values = source.values
            if source.name == ConfigSourceName.ENV:
                values = parse_env_vars()
            elif source.path is not None and (
                source.exists or source.name == ConfigSourceName.FILE
            ):
                values = read_toml_file(source.path)

            loaded.append(
                ConfigSource(
                    name=source.name,
                    path=source.path,
                    exists=source.exists,
                    values=values,
                )
            )
            if values:
                merged = deep_merge(merged, values)

        return cls._build(merged, tuple(reversed(loaded)))

    @property
    def sources(self) -> list[ConfigSource]:
        """Sources that contributed to this configuration, highest first."""
        return list(self._sources)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a plain dictionary."""
        return self.model_dump(mode="json")

    def to_toml(self) -> str:
        """Convert configuration to a TOML string."""
        return tomli_w.dumps(self.to_dict())
