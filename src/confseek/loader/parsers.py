"""Parsers for structured data config files."""

from __future__ import annotations

import json
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml

__all__ = ["DATA_PARSERS", "parse_json", "parse_toml", "parse_yaml", "parser_for_suffix"]


def parse_json(text: str) -> Any:  # noqa: ANN401
    return json.loads(text)


def parse_yaml(text: str) -> Any:  # noqa: ANN401
    return yaml.safe_load(text)


def parse_toml(text: str) -> dict[str, Any]:
    return tomllib.loads(text)


DATA_PARSERS: dict[str, Callable[[str], Any]] = {
    "json": parse_json,
    "yaml": parse_yaml,
    "toml": parse_toml,
}

_SUFFIX_PARSERS: dict[str, str] = {
    ".yaml": "yaml",
    ".yml": "yaml",
    ".toml": "toml",
}


def parser_for_suffix(path: Path) -> str | None:
    """Data parser implied by the file suffix, for formats JSON cannot sniff."""
    return _SUFFIX_PARSERS.get(path.suffix.lower())
