"""Unwrap the config value exported by an evaluated module."""

from __future__ import annotations

import __future__
import inspect
from collections.abc import Mapping
from types import ModuleType
from typing import Any

DEFAULT_EXPORT = "default"

_MISSING = object()


def interop_default(value: Any) -> Any:  # noqa: ANN401
    """Return the value a config module exports.

    A module that defines ``default`` exports that value. Nested defaults (a ``default``
    that is itself a module with a ``default``, or a mapping whose only key is
    ``"default"``) are unwrapped to the innermost value. A module without ``default``
    exports its public namespace as a dict: the names in its ``__all__`` when it has one,
    otherwise its public names other than modules, imported functions and classes, and
    ``__future__`` features.
    """
    while (inner := _default_of(value)) is not _MISSING:
        value = inner

    if isinstance(value, ModuleType):
        return _public_namespace(value)
    return value


def _default_of(value: Any) -> Any:  # noqa: ANN401
    if isinstance(value, ModuleType):
        return getattr(value, DEFAULT_EXPORT, _MISSING)
    if isinstance(value, Mapping) and len(value) == 1 and DEFAULT_EXPORT in value:
        return value[DEFAULT_EXPORT]
    return _MISSING


def _public_namespace(module: ModuleType) -> dict[str, Any]:
    exported = getattr(module, "__all__", None)
    if exported is not None:
        return {name: getattr(module, name) for name in exported}

    namespace: dict[str, Any] = {}
    for name, member in vars(module).items():
        if name.startswith("_") or isinstance(member, ModuleType | __future__._Feature):
            continue
        # Imported functions and classes are not part of the config.
        if (inspect.isfunction(member) or inspect.isclass(member)) and member.__module__ != module.__name__:
            continue
        namespace[name] = member
    return namespace
