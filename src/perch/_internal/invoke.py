"""Invoke helpers: call sync or async callables uniformly.

Handlers and events can be ``def`` or ``async def``. Coroutine functions
are awaited on the event loop; plain callables run in an anyio worker
thread so a blocking handler never stalls other exchanges.

Usage::

    from perch._internal.invoke import invoke

    result = await invoke(handler, request, response)
"""

import functools
import inspect
from typing import Any

import anyio


def is_async_callable(func: Any) -> bool:
    """True for ``async def`` functions, bound methods and callable objects."""
    while isinstance(func, functools.partial):
        func = func.func
    if inspect.iscoroutinefunction(func):
        return True
    call = getattr(func, "__call__", None)  # noqa: B004
    return call is not None and inspect.iscoroutinefunction(call)


async def invoke(func: Any, *args: Any) -> Any:
    """Call *func* with *args* and return its result.

    A sync callable that nonetheless returns an awaitable has it awaited.
    """
    if is_async_callable(func):
        return await func(*args)
    result = await anyio.to_thread.run_sync(functools.partial(func, *args))
    if inspect.isawaitable(result):
        result = await result
    return result
