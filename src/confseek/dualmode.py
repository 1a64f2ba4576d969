"""Write an I/O algorithm once, run it blocking or awaited.

A dual-mode function is a generator function whose body yields :class:`Operation`
objects at every point where it would block. The value of the ``yield`` expression
is the operation's result; a failing operation raises its exception at that same
``yield``. Two drivers consume such bodies:

- :func:`run_sync` performs every operation with its blocking callable;
- :func:`run_async` awaits every operation's non-blocking coroutine.

Decorating the generator function with :func:`dualmode` gives three call forms::

    @dualmode
    def read_first_line(path: Path) -> Body[str]:
        text = yield from read_text(path)
        return text.splitlines()[0]

    read_first_line.sync(path)           # blocking, returns the value
    await read_first_line.async_(path)   # non-blocking coroutine
    line = yield from read_first_line(path)  # lazy, inside another body
    line = await read_first_line(path)       # the lazy form is awaitable too

Nested bodies are composed with ``yield from``, so the outermost caller picks the
mode for the whole call tree.
"""

from __future__ import annotations

import asyncio
import functools
import inspect
import types
from collections.abc import Awaitable, Callable, Generator
from dataclasses import dataclass, field
from typing import Any

from confseek.errors import SyncModeError

type Body[R] = Generator[Operation, Any, R]

__all__ = [
    "Body",
    "DualMode",
    "DualModeCall",
    "Operation",
    "call_hook",
    "dualmode",
    "io_operation",
    "run_async",
    "run_sync",
]


@dataclass(frozen=True, slots=True)
class Operation:
    """One suspension point: a call with a blocking and a non-blocking variant."""

    blocking: Callable[..., Any]
    non_blocking: Callable[..., Awaitable[Any]]
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)

    def run_sync(self) -> Any:  # noqa: ANN401
        return self.blocking(*self.args, **self.kwargs)

    async def run_async(self) -> Any:  # noqa: ANN401
        return await self.non_blocking(*self.args, **self.kwargs)


def run_sync[R](body: Body[R]) -> R:
    """Drive a body to completion, performing each operation in place."""
    send: Callable[[Any], Operation] = body.send
    value: Any = None
    while True:
        try:
            operation = send(value)
        except StopIteration as stop:
            return stop.value
        try:
            value, send = _expect_operation(operation).run_sync(), body.send
        except BaseException as exc:  # noqa: BLE001 - re-raised inside the body
            value, send = exc, body.throw


async def run_async[R](body: Body[R]) -> R:
    """Drive a body to completion, awaiting each operation in order."""
    send: Callable[[Any], Operation] = body.send
    value: Any = None
    while True:
        try:
            operation = send(value)
        except StopIteration as stop:
            return stop.value
        try:
            value, send = await _expect_operation(operation).run_async(), body.send
        except BaseException as exc:  # noqa: BLE001 - re-raised inside the body
            value, send = exc, body.throw


def _expect_operation(value: object) -> Operation:
    if not isinstance(value, Operation):
        raise TypeError(f"Dual-mode bodies may only yield Operation objects, got {type(value).__name__}")
    return value


class DualModeCall[R]:
    """A started-but-not-driven call: ``yield from`` it or ``await`` it."""

    __slots__ = ("_body",)

    def __init__(self, body: Body[R]) -> None:
        self._body = body

    def __iter__(self) -> Body[R]:
        return self._body

    def __await__(self) -> Generator[Any, None, R]:
        return run_async(self._body).__await__()

    def __repr__(self) -> str:
        return f"DualModeCall({self._body.__qualname__})"


class DualMode[**P, R]:
    """A generator function exposed in lazy, blocking and awaitable forms."""

    def __init__(self, body: Callable[P, Body[R]]) -> None:
        if not inspect.isgeneratorfunction(body):
            raise TypeError(f"dualmode expects a generator function, got {body!r}")
        self._body = body
        functools.update_wrapper(self, body)

    def __call__(self, *args: P.args, **kwargs: P.kwargs) -> DualModeCall[R]:
        return DualModeCall(self._body(*args, **kwargs))

    def sync(self, *args: P.args, **kwargs: P.kwargs) -> R:
        return run_sync(self._body(*args, **kwargs))

    async def async_(self, *args: P.args, **kwargs: P.kwargs) -> R:
        return await run_async(self._body(*args, **kwargs))

    def __get__(self, instance: object, owner: type | None = None) -> DualMode[..., R]:
        if instance is None:
            return self
        return DualMode(types.MethodType(self._body, instance))

    def __repr__(self) -> str:
        return f"<dualmode {getattr(self, '__qualname__', self._body)!s}>"


dualmode = DualMode


def io_operation[**P, R](
    blocking: Callable[P, R],
    non_blocking: Callable[P, Awaitable[R]] | None = None,
) -> DualMode[P, R]:
    """Build a single-operation dual-mode function from a blocking callable.

    Without an explicit ``non_blocking`` variant, the awaited form runs ``blocking``
    in a worker thread.
    """
    awaited = non_blocking or functools.partial(asyncio.to_thread, blocking)

    def body(*args: P.args, **kwargs: P.kwargs) -> Body[R]:
        return (yield Operation(blocking, awaited, args, kwargs))

    functools.update_wrapper(body, blocking)
    return DualMode(body)


def _reject_awaitable(awaitable: Awaitable[Any], name: str) -> None:
    if inspect.iscoroutine(awaitable):
        awaitable.close()
    raise SyncModeError(f"{name} returned an awaitable; use the async form to run it")


async def _await(awaitable: Awaitable[Any], name: str) -> Any:  # noqa: ANN401, ARG001
    return await awaitable


@dualmode
def call_hook(hook: Callable[..., Any], /, *args: Any) -> Body[Any]:  # noqa: ANN401
    """Invoke a user hook that may be plain, a coroutine function, or dual-mode."""
    result = hook(*args)
    if isinstance(result, DualModeCall):
        return (yield from result)
    if inspect.isawaitable(result):
        name = getattr(hook, "__qualname__", repr(hook))
        return (yield Operation(_reject_awaitable, _await, (result, name)))
    return result
