"""Route declarations and the handler result variant.

A route group declares its handlers explicitly::

    class UserRoutes:
        base_path = "/v1"

        def __init__(self, store: UserStore) -> None:
            self.store = store

        def endpoints(self) -> tuple[Endpoint, ...]:
            return (
                Endpoint("/user", HTTPMethod.GET, self.fetch_user),
                Endpoint("/put", HTTPMethod.POST, self.insert),
            )

        def fetch_user(self, request: Request, response: ResponseState) -> User | None:
            return self.store.get(request.param("name"))
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, Protocol, TypeAlias, runtime_checkable

from perch.http.method import HTTPMethod

# Route handler: called with (request, response), sync or async
Handler: TypeAlias = Callable[..., Any]


@runtime_checkable
class RouteGroup(Protocol):
    """A collection of handlers sharing a base path."""

    base_path: str

    def endpoints(self) -> Iterable[Endpoint]: ...


@dataclass(frozen=True, slots=True)
class Endpoint:
    """One handler declaration inside a route group.

    ``returns_value`` says whether the handler produces a value. Left as
    ``None`` it is read from the handler's return annotation: ``-> None``
    means no value, anything else (or no annotation) means a value.
    """

    path: str
    method: HTTPMethod
    handler: Handler
    returns_value: bool | None = None


@dataclass(frozen=True, slots=True)
class BoundRoute:
    """A compiled entry of the route table."""

    path: str
    method: HTTPMethod
    handler: Handler
    group: object
    returns_value: bool = True

    @property
    def group_name(self) -> str:
        return type(self.group).__name__


@dataclass(frozen=True, slots=True)
class Value:
    """The handler produced a value (possibly ``None``)."""

    payload: Any


@dataclass(frozen=True, slots=True)
class NoValue:
    """The handler is declared to produce nothing."""


NO_VALUE = NoValue()

HandlerResult: TypeAlias = Value | NoValue


def declares_value(handler: Handler) -> bool:
    """Read a handler's return annotation.

    Only an explicit ``None`` annotation counts as "returns nothing".
    """
    try:
        sig = inspect.signature(handler, eval_str=True)
    except (NameError, TypeError, ValueError):
        return True
    annotation = sig.return_annotation
    return annotation is not None and annotation is not type(None)
