"""Shared utilities for reposnap."""

from ._logging import LogFormatType, create_cli_logger, create_logger
from ._paths import get_cli_log_file, get_log_dir, get_user_config_path

__all__ = [
    "LogFormatType",
    "create_cli_logger",
    "create_logger",
    "get_cli_log_file",
    "get_log_dir",
    "get_user_config_path",
]
