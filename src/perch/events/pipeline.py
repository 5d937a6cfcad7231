"""Ordered, cancellable event pipeline.

Events run in registration order. Callers should treat that order as
their own contract: perch only guarantees that every event runs exactly
once per exchange.
"""

import logging
from collections.abc import Iterable

from perch._internal.invoke import invoke
from perch.errors import ConfigurationError
from perch.events.protocol import Cancellable, Event
from perch.http.request import Request
from perch.http.response import ResponseState

logger = logging.getLogger("perch.events")


class EventPipeline:
    """An immutable sequence of events.

    ``run`` calls every event's ``handle``, then asks cancellable events
    whether they cancelled. A cancellation does not skip the events after
    it; only the aggregate answer decides whether the handler runs.
    """

    __slots__ = ("_events",)

    def __init__(self, events: Iterable[Event] = ()) -> None:
        checked: list[Event] = []
        for event in events:
            if not callable(getattr(event, "handle", None)):
                msg = f"Event {type(event).__name__} has no handle(request, response) method"
                raise ConfigurationError(msg)
            checked.append(event)
        self._events: tuple[Event, ...] = tuple(checked)

    @property
    def events(self) -> tuple[Event, ...]:
        return self._events

    def __len__(self) -> int:
        return len(self._events)

    async def run(self, request: Request, response: ResponseState) -> bool:
        """Run every event once; return True if any reported cancelled.

        Exceptions raised by an event propagate and stop the pipeline.
        """
        cancelled = False
        for event in self._events:
            await invoke(event.handle, request, response)
            if isinstance(event, Cancellable) and event.is_cancelled():
                if not cancelled:
                    logger.debug(
                        "%s cancelled %s %s", type(event).__name__, request.method_name, request.uri
                    )
                cancelled = True
        return cancelled
