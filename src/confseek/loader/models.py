"""Source descriptors, loader options and load results."""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from confseek.errors import UnknownParserError
from confseek.settings import get_settings

ParserName = Literal["auto", "json", "yaml", "toml", "code"]
PARSER_NAMES: tuple[str, ...] = ("auto", "json", "yaml", "toml", "code")
PARSER_ALIASES: dict[str, str] = {"import": "code", "yml": "yaml"}

CustomParser = Callable[[Path], Any]
Transform = Callable[[str, Path], Any]
Rewrite = Callable[[Any, Path], Any]


def _default_extensions() -> tuple[str, ...]:
    return get_settings().loader.default_extensions


class LoadConfigSource(BaseModel):
    """One family of config files to look for, and how to read them.

    Attributes:
        files: Base names to search for, in order. Names may contain directories
            (``".config/tool"``).
        extensions: Extensions tried for each base name, in order. ``""`` is the bare
            base name; an empty sequence means the base names are used verbatim.
        parser: ``"auto"``, a built-in parser name, or a callable taking the file path
            and returning the config value.
        transform: Hook ``(text, path) -> text | None`` that rewrites the source text
            before it is evaluated.
        rewrite: Hook ``(config, path) -> config | None`` applied to the parsed value.
            Returning ``None`` or ``False`` rejects the file.
        skip_on_error: Treat errors raised while loading a file as "no config here".
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    files: tuple[str, ...]
    extensions: tuple[str, ...] = Field(default_factory=_default_extensions)
    parser: ParserName | CustomParser = "auto"
    transform: Transform | None = None
    rewrite: Rewrite | None = None
    skip_on_error: bool = False

    @field_validator("files", mode="before")
    @classmethod
    def _coerce_files(cls, value: object) -> object:
        if isinstance(value, (str, os.PathLike)):
            return (os.fspath(value),)
        if isinstance(value, (list, tuple)):
            return tuple(os.fspath(item) if isinstance(item, os.PathLike) else item for item in value)
        return value

    @field_validator("extensions", mode="before")
    @classmethod
    def _coerce_extensions(cls, value: object) -> object:
        if isinstance(value, str):
            value = (value,)
        if isinstance(value, (list, tuple)):
            return tuple(item.removeprefix(".") if isinstance(item, str) else item for item in value)
        return value

    @field_validator("parser", mode="before")
    @classmethod
    def _normalize_parser(cls, value: object) -> object:
        if not isinstance(value, str):
            return value
        name = PARSER_ALIASES.get(value.lower(), value.lower())
        if name not in PARSER_NAMES:
            raise UnknownParserError(value, PARSER_NAMES)
        return name

    def candidates(self) -> list[str]:
        """Every base name and extension combination, in search order."""
        if not self.extensions:
            return list(self.files)
        return [f"{name}.{extension}" if extension else name for name in self.files for extension in self.extensions]


class LoadConfigOptions(BaseModel):
    """Options shared by every source of one :class:`~confseek.loader.ConfigLoader`.

    Attributes:
        sources: Source descriptors, strongest first.
        cwd: Directory the search starts in. Defaults to the process working directory,
            read once when the loader is created.
        stop_at: Ancestor directory the search never reaches.
        merge: Load and deep-merge every matching file instead of stopping at the
            first one that produces a value.
        defaults: Weakest layer, only filling keys no loaded file defines.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    sources: tuple[LoadConfigSource, ...] = ()
    cwd: Path | None = None
    stop_at: Path | None = None
    merge: bool = False
    defaults: Any = None

    @field_validator("sources", mode="before")
    @classmethod
    def _coerce_sources(cls, value: object) -> object:
        if value is None:
            return ()
        if isinstance(value, (LoadConfigSource, Mapping)):
            return (value,)
        if isinstance(value, list):
            return tuple(value)
        return value


@dataclass(frozen=True, slots=True)
class LoadConfigResult[T]:
    """A loaded config value and where it came from.

    Attributes:
        config: The parsed, rewritten and merged config value.
        sources: Files that contributed to ``config``, strongest first.
        dependencies: Files read while evaluating code configs, when the evaluator
            tracks them. ``None`` when nothing was evaluated with tracking.
        matched_files: Every file the search found, whether or not it produced a value.
            Empty when no candidate file exists at all.
    """

    config: T
    sources: list[Path] = field(default_factory=list)
    dependencies: list[Path] | None = None
    matched_files: list[Path] = field(default_factory=list)
