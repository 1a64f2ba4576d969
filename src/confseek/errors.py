"""Exceptions raised by confseek itself.

Errors raised while parsing or evaluating a config file are not wrapped: they reach
the caller unchanged, with a note naming the file that failed.
"""

from __future__ import annotations


class ConfseekError(Exception):
    """Base class for confseek errors."""


class SyncModeError(ConfseekError):
    """An awaitable reached the blocking driver."""


class UnknownParserError(ConfseekError, ValueError):
    """A source named a parser that does not exist."""

    def __init__(self, name: str, known: tuple[str, ...]) -> None:
        self.name = name
        self.known = known
        super().__init__(f"Unknown parser '{name}'. Expected one of: {', '.join(known)} or a callable.")
