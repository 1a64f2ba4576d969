"""Merging loaded config values with their defaults."""

from __future__ import annotations

from typing import Any

from confseek.utils.dicts import merge_layers

_WRAP_KEY = "config"


def apply_defaults(*layers: Any) -> Any:  # noqa: ANN401
    """Deep-merge config values, strongest first.

    Each layer is wrapped under a single key before merging so that top-level
    lists and scalars are replaced by the strongest layer defining them rather
    than merged. ``None`` layers contribute nothing.
    """
    return merge_layers(*({_WRAP_KEY: layer} for layer in layers)).get(_WRAP_KEY)
