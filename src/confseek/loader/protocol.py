"""Evaluation backend protocol."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Protocol


@dataclass(frozen=True, slots=True)
class Evaluation:
    """An evaluated config module.

    Attributes:
        module: The executed module.
        dependencies: Files read during evaluation, or ``None`` when the backend
            does not track them.
    """

    module: ModuleType
    dependencies: list[Path] | None = None


class Evaluator(Protocol):
    """Executes a config file as Python code."""

    def evaluate(self, path: Path) -> Evaluation:
        """Execute ``path`` and return the resulting module.

        Errors raised by the code propagate unchanged.
        """
        ...
