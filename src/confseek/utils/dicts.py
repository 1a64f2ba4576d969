"""Dictionary helpers used across confseek."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

__all__ = ["deep_merge", "merge_layers"]


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge two mappings, giving precedence to override.

    ``None`` values in ``override`` never replace anything. Lists are replaced
    wholesale.
    """
    result: dict[str, Any] = dict(base)

    for key, override_value in override.items():
        if override_value is None:
            continue

        existing_value = result.get(key)

        if isinstance(existing_value, Mapping) and isinstance(override_value, Mapping):
            result[key] = deep_merge(existing_value, override_value)
        elif isinstance(override_value, list):
            result[key] = list(override_value)
        else:
            result[key] = override_value

    return result


def merge_layers(*layers: Mapping[str, Any] | None) -> dict[str, Any]:
    """Merge mappings where the first layer is the strongest."""
    merged: dict[str, Any] = {}
    for layer in reversed(layers):
        if layer is None:
            continue
        merged = deep_merge(merged, layer)
    return merged
