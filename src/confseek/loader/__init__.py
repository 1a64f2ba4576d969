"""Config loading: search upward for config files, parse them and merge the results."""

from .evaluators import NativeEvaluator, TrackedEvaluator, get_evaluator
from .file import load_config_file
from .interop import interop_default
from .loader import ConfigLoader, create_config_loader, load_config, load_config_sync
from .merger import apply_defaults
from .models import LoadConfigOptions, LoadConfigResult, LoadConfigSource
from .protocol import Evaluation, Evaluator

__all__ = [
    "ConfigLoader",
    "Evaluation",
    "Evaluator",
    "LoadConfigOptions",
    "LoadConfigResult",
    "LoadConfigSource",
    "NativeEvaluator",
    "TrackedEvaluator",
    "apply_defaults",
    "create_config_loader",
    "get_evaluator",
    "interop_default",
    "load_config",
    "load_config_file",
    "load_config_sync",
]
