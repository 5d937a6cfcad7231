"""Tests for perch._internal.invoke: sync/async invocation."""

import functools
import threading

from perch._internal.invoke import invoke, is_async_callable


async def async_add(a: int, b: int) -> int:
    return a + b


def sync_add(a: int, b: int) -> int:
    return a + b


class AsyncCallable:
    async def __call__(self) -> str:
        return "called"


class TestIsAsyncCallable:
    def test_functions(self) -> None:
        assert is_async_callable(async_add)
        assert not is_async_callable(sync_add)

    def test_partial(self) -> None:
        assert is_async_callable(functools.partial(async_add, 1))

    def test_callable_object(self) -> None:
        assert is_async_callable(AsyncCallable())


class TestInvoke:
    async def test_async(self) -> None:
        assert await invoke(async_add, 1, 2) == 3

    async def test_sync_runs_in_worker_thread(self) -> None:
        main = threading.get_ident()
        seen: list[int] = []

        def record() -> str:
            seen.append(threading.get_ident())
            return "ok"

        assert await invoke(record) == "ok"
        assert seen and seen[0] != main

    async def test_sync_returning_awaitable(self) -> None:
        def wrapper():
            return async_add(2, 2)

        assert await invoke(wrapper) == 4
