"""The closed set of HTTP methods perch dispatches."""

from __future__ import annotations

from enum import Enum


class HTTPMethod(Enum):
    """HTTP methods a route can be declared for."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @classmethod
    def from_name(cls, name: str | None) -> HTTPMethod | None:
        """Parse *name* case-sensitively.

        Returns ``None`` for anything outside the enumeration; the
        dispatcher answers such requests with 400 rather than raising here.
        """
        if name is None:
            return None
        try:
            return cls(name)
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value
