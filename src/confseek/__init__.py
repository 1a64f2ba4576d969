"""confseek - find, load and merge config files, blocking or awaited.

By default, confseek's internal logging is disabled when used as a library.
Library users can enable logging by calling confseek.enable_logging().
"""

from confseek.common import disable_library_logging, enable_library_logging

from .dualmode import Body, DualMode, Operation, call_hook, dualmode, io_operation, run_async, run_sync
from .errors import ConfseekError, SyncModeError, UnknownParserError
from .fs import FindUpOptions, find_up
from .loader import (
    ConfigLoader,
    LoadConfigOptions,
    LoadConfigResult,
    LoadConfigSource,
    create_config_loader,
    interop_default,
    load_config,
    load_config_file,
    load_config_sync,
)
from .presets import source_config_factory, source_pyproject_fields

disable_library_logging()

enable_logging = enable_library_logging

__all__ = [
    "Body",
    "ConfigLoader",
    "ConfseekError",
    "DualMode",
    "FindUpOptions",
    "LoadConfigOptions",
    "LoadConfigResult",
    "LoadConfigSource",
    "Operation",
    "SyncModeError",
    "UnknownParserError",
    "call_hook",
    "create_config_loader",
    "dualmode",
    "enable_logging",
    "find_up",
    "interop_default",
    "io_operation",
    "load_config",
    "load_config_file",
    "load_config_sync",
    "run_async",
    "run_sync",
    "source_config_factory",
    "source_pyproject_fields",
]
