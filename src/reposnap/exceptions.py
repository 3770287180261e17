"""reposnap exceptions."""

from pathlib import Path
from typing import Any


class RepoSnapError(Exception):
    """Base exception for reposnap errors."""


class RepositoryLockedError(RepoSnapError):
    """Raised when repository metadata is locked by another process.

    This is the only error the snapshot reader retries.

    Attributes:
        path: The lock file (or locked file) that caused the failure, if known.
    """

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        """Initialize with error message and optional lock path."""
        super().__init__(message)
        self.path: Path | None = path


class ConfigError(RepoSnapError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column


class ConfigValidationError(ConfigError):
    """Raised when configuration fails validation."""

    def __init__(
        self,
        message: str,
        *,
        key: str,
        value: Any,  # pyright: ignore[reportAny,reportExplicitAny]
        expected: str,
        source: str | None = None,
    ) -> None:
        """Initialize with error message and validation context."""
        super().__init__(message)
        self.key: str = key
        self.value: Any = value  # pyright: ignore[reportExplicitAny]
        self.expected: str = expected
        self.source: str | None = source
