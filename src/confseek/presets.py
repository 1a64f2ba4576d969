"""Ready-made source descriptors for common config layouts."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from confseek.loader.models import LoadConfigSource


def source_pyproject_fields(fields: str | Sequence[str], *, skip_on_error: bool = False) -> LoadConfigSource:
    """Read a tool section out of the closest ``pyproject.toml``.

    ``fields`` name tables under ``[tool]``; dotted names reach nested tables
    (``"poetry.group"``). The first table present wins. Files that have none of
    them are rejected, so the search moves on to the next source.
    """
    names = (fields,) if isinstance(fields, str) else tuple(fields)

    def rewrite(config: Any, path: Path) -> Any:  # noqa: ANN401, ARG001
        tool = config.get("tool") if isinstance(config, Mapping) else None
        for name in names:
            value = _get_dotted(tool, name)
            if value is not None:
                return value
        return None

    return LoadConfigSource(
        files=("pyproject.toml",),
        extensions=(),
        parser="toml",
        rewrite=rewrite,
        skip_on_error=skip_on_error,
    )


def source_config_factory(
    files: str | Sequence[str],
    *,
    args: Sequence[Any] = (),
    kwargs: Mapping[str, Any] | None = None,
    extensions: Sequence[str] = ("py",),
) -> LoadConfigSource:
    """Load Python config files that export a factory instead of a value.

    When the exported value is callable it is called with ``args`` and ``kwargs``
    and the result is the config; other values pass through unchanged.
    """
    call_kwargs = dict(kwargs or {})

    def rewrite(config: Any, path: Path) -> Any:  # noqa: ANN401, ARG001
        if callable(config):
            return config(*args, **call_kwargs)
        return config

    return LoadConfigSource(files=files, extensions=tuple(extensions), parser="code", rewrite=rewrite)


def _get_dotted(data: Any, dotted: str) -> Any:  # noqa: ANN401
    value = data
    for part in dotted.split("."):
        if not isinstance(value, Mapping) or part not in value:
            return None
        value = value[part]
    return value
