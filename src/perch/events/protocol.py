"""Event and Cancellable protocols.

An event is any object with a ``handle`` method::

    class Stamp:
        def handle(self, request: Request, response: ResponseState) -> None:
            response.add_header("X-Served-By", "perch")

No base class required. The pipeline checks the shape, not the lineage.
``handle`` may be ``def`` or ``async def``.

An event that can veto the exchange also implements ``Cancellable``::

    class DenyDelete:
        def __init__(self) -> None:
            self._cancelled = ContextVar("deny_delete", default=False)

        async def handle(self, request, response) -> None:
            self._cancelled.set(request.method is HTTPMethod.DELETE)

        def is_cancelled(self) -> bool:
            return self._cancelled.get()

Events are shared by every exchange, so cancellation state that depends
on the request must be kept per exchange (a ``ContextVar``, as above). Sync
``handle`` methods run in a worker thread with a copy of the context, so
set such variables from an ``async def handle``.
"""

from collections.abc import Awaitable
from typing import Protocol, runtime_checkable

from perch.http.request import Request
from perch.http.response import ResponseState


@runtime_checkable
class Event(Protocol):
    """A pre-handler step run once per exchange."""

    def handle(self, request: Request, response: ResponseState) -> None | Awaitable[None]: ...


@runtime_checkable
class Cancellable(Protocol):
    """An event that can report the exchange as cancelled."""

    def is_cancelled(self) -> bool: ...
