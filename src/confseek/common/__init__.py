"""Common models and helpers used across confseek modules."""

from .logging import LoggingConfig, create_logger, disable_library_logging, enable_library_logging, setup_cli_logging
from .models import AppInfo, LoaderSettings
from .paths import get_data_directory

__all__ = [
    "AppInfo",
    "LoaderSettings",
    "LoggingConfig",
    "create_logger",
    "disable_library_logging",
    "enable_library_logging",
    "get_data_directory",
    "setup_cli_logging",
]
