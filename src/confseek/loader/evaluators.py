"""Backends that execute config files as Python modules."""

from __future__ import annotations

import importlib.machinery
import importlib.util
import sys
import threading
import uuid
from pathlib import Path
from types import CodeType, ModuleType
from typing import Literal

from confseek.common import create_logger
from confseek.dualmode import io_operation
from confseek.settings import get_settings

from .protocol import Evaluation, Evaluator

logger = create_logger("evaluator")

__all__ = ["NativeEvaluator", "TrackedEvaluator", "evaluate", "get_evaluator"]

# Evaluations import into the shared sys.modules and sys.path, so only one runs at a time.
_EVALUATION_LOCK = threading.RLock()


class _ConfigFileLoader(importlib.machinery.SourceFileLoader):
    """Source loader for files of any suffix that never reads or writes bytecode caches."""

    def get_code(self, fullname: str) -> CodeType:
        return self.source_to_code(self.get_data(self.get_filename(fullname)), self.path)


def _execute(path: Path) -> ModuleType:
    name = f"_confseek_config_{uuid.uuid4().hex}"
    loader = _ConfigFileLoader(name, str(path))
    spec = importlib.util.spec_from_loader(name, loader)
    assert spec is not None
    module = importlib.util.module_from_spec(spec)

    # Registered while executing so that dataclasses defined in the file can resolve their module.
    sys.modules[name] = module
    try:
        loader.exec_module(module)
    finally:
        sys.modules.pop(name, None)
    return module


class NativeEvaluator:
    """Executes the file as a throwaway module; reports no dependencies."""

    def evaluate(self, path: Path) -> Evaluation:
        with _EVALUATION_LOCK:
            return Evaluation(module=_execute(path))


class TrackedEvaluator:
    """Executes the file with its directory importable and records what it imports.

    Every module first imported during evaluation is reported as a dependency.
    Modules that live next to the config file are evicted from ``sys.modules``
    afterwards, so the next evaluation reads them again.
    """

    def evaluate(self, path: Path) -> Evaluation:
        with _EVALUATION_LOCK:
            module, dependencies = self._evaluate_locked(path)

        logger.debug("Evaluated config module", path=str(path), dependencies=len(dependencies))
        return Evaluation(module=module, dependencies=dependencies)

    def _evaluate_locked(self, path: Path) -> tuple[ModuleType, list[Path]]:
        directory = str(path.parent)
        before = set(sys.modules)
        sys.path.insert(0, directory)
        try:
            module = _execute(path)
        finally:
            if directory in sys.path:
                sys.path.remove(directory)
            added = [name for name in list(sys.modules) if name not in before]
            dependencies = [path]
            for name in added:
                filename = getattr(sys.modules.get(name), "__file__", None)
                if not filename:
                    continue
                dependency = Path(filename)
                dependencies.append(dependency)
                if dependency.is_relative_to(path.parent):
                    sys.modules.pop(name, None)
        return module, dependencies


_EVALUATORS: dict[str, type[NativeEvaluator] | type[TrackedEvaluator]] = {
    "native": NativeEvaluator,
    "tracked": TrackedEvaluator,
}


def get_evaluator(kind: Literal["tracked", "native"] | None = None) -> Evaluator:
    """Create the evaluator named by ``kind``, or by the settings when omitted."""
    return _EVALUATORS[kind or get_settings().loader.evaluator]()


def _evaluate(evaluator: Evaluator, path: Path) -> Evaluation:
    return evaluator.evaluate(path)


# The awaited form runs the evaluation in a worker thread.
evaluate = io_operation(_evaluate)
