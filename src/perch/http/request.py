"""Immutable request context.

A read-only view of one inbound exchange: method, headers, query
parameters, remote address and raw URI. Built once per exchange from the
ASGI scope and never shared between exchanges.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from perch.http.headers import Headers
from perch.http.method import HTTPMethod
from perch.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request context.

    ``method`` is ``None`` when the request line carried a method outside
    ``HTTPMethod``; ``method_name`` always keeps the raw text.
    """

    method: HTTPMethod | None
    method_name: str
    path: str
    uri: str
    headers: Headers
    query: QueryParams
    client: tuple[str, int] | None = None

    # -- Parameters --

    def param(self, name: str, default: str | None = None) -> str | None:
        """Return query parameter *name*; the last occurrence wins."""
        return self.query.get(name, default)

    @property
    def param_count(self) -> int:
        return len(self.query)

    # -- Headers --

    def header(self, name: str) -> str | None:
        """Return the first value of header *name*, or ``None``."""
        return self.headers.get(name)

    def header_list(self, name: str) -> list[str]:
        return self.headers.get_list(name)

    @property
    def header_count(self) -> int:
        """Number of header values, counting repeated names separately."""
        return self.headers.value_count

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: dict[str, Any]) -> Request:
        """Create a Request from an ASGI HTTP scope."""
        method_name = scope.get("method", "")
        path = scope.get("path", "/")
        query_string = scope.get("query_string", b"")
        uri = f"{path}?{query_string.decode('latin-1')}" if query_string else path
        client = scope.get("client")
        return cls(
            method=HTTPMethod.from_name(method_name),
            method_name=method_name,
            path=path,
            uri=uri,
            headers=Headers(tuple(tuple(pair) for pair in scope.get("headers", ()))),
            query=QueryParams(query_string),
            client=tuple(client) if client else None,
        )
