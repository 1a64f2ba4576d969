"""Filesystem operations in dual-mode form, and the upward file search."""

from __future__ import annotations

import os
import stat
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from confseek.common import create_logger
from confseek.dualmode import Body, dualmode, io_operation

logger = create_logger("fs")

__all__ = [
    "FindUpOptions",
    "find_up",
    "is_file",
    "read_text",
    "unlink",
    "write_text",
]


def _is_file(path: Path, allow_symlinks: bool = True) -> bool:
    try:
        info = os.stat(path) if allow_symlinks else os.lstat(path)
    except (OSError, ValueError):
        return False
    return stat.S_ISREG(info.st_mode)


def _read_text(path: Path) -> str:
    return Path(path).read_text(encoding="utf-8")


def _write_text(path: Path, content: str) -> None:
    Path(path).write_text(content, encoding="utf-8")


def _unlink(path: Path) -> None:
    Path(path).unlink()


is_file = io_operation(_is_file)
read_text = io_operation(_read_text)
write_text = io_operation(_write_text)
unlink = io_operation(_unlink)


@dataclass(frozen=True, slots=True)
class FindUpOptions:
    """Options for :func:`find_up`.

    Attributes:
        cwd: Directory the search starts in. Defaults to the process working directory.
        stop_at: Ancestor directory that is never searched, nor anything above it.
            Defaults to the filesystem root of ``cwd``.
        multiple: Collect every match instead of returning the first one.
        allow_symlinks: Follow symbolic links when testing whether a candidate is a file.
    """

    cwd: Path | None = None
    stop_at: Path | None = None
    multiple: bool = False
    allow_symlinks: bool = True


@dualmode
def find_up(paths: Sequence[str | os.PathLike[str]], options: FindUpOptions | None = None) -> Body[list[Path]]:
    """Search ``paths`` relative to each directory from ``cwd`` up to ``stop_at``.

    Returns the absolute paths that exist as files, closest directory first and, within
    one directory, in the order of ``paths``.
    """
    options = options or FindUpOptions()
    cwd = _absolute(options.cwd if options.cwd is not None else Path.cwd())
    stop_at = _absolute(options.stop_at) if options.stop_at is not None else Path(cwd.anchor)

    files: list[Path] = []
    current = cwd

    while current != stop_at:
        for candidate in paths:
            filepath = _absolute(current / candidate)
            if (yield from is_file(filepath, options.allow_symlinks)):
                files.append(filepath)
                if not options.multiple:
                    logger.debug("Found file", path=str(filepath))
                    return files
        parent = current.parent
        if parent == current:
            break
        current = parent

    logger.debug("Upward search finished", cwd=str(cwd), stop_at=str(stop_at), found=len(files))
    return files


def _absolute(path: str | os.PathLike[str]) -> Path:
    return Path(os.path.abspath(path))
