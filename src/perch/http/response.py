"""Mutable per-exchange response state.

Events and handlers receive the same ``ResponseState`` and may change the
status code or add headers. The dispatcher reads it once the exchange is
decided.
"""

from __future__ import annotations

from perch.http.status import OK, StatusCode


class ResponseState:
    """The in-flight response of one exchange.

    ``status`` defaults to ``OK`` and can never be ``None``: assigning
    ``None`` raises ``TypeError`` immediately. Plain ints are resolved
    through the status registry.
    """

    __slots__ = ("_headers", "_status")

    def __init__(self, status: StatusCode = OK) -> None:
        self._status: StatusCode = OK
        self._headers: list[tuple[str, str]] = []
        self.status = status

    @property
    def status(self) -> StatusCode:
        return self._status

    @status.setter
    def status(self, value: StatusCode | int) -> None:
        if value is None:
            msg = "response status must not be None"
            raise TypeError(msg)
        if isinstance(value, StatusCode):
            self._status = value
        elif isinstance(value, int) and not isinstance(value, bool):
            self._status = StatusCode.lookup(value)
        else:
            msg = f"response status must be a StatusCode or int, got {type(value).__name__}"
            raise TypeError(msg)

    @property
    def is_default(self) -> bool:
        """True while no step has moved the status away from ``OK``."""
        return self._status == OK

    def add_header(self, name: str, value: str) -> None:
        """Queue an extra response header; repeated names are kept."""
        self._headers.append((name, value))

    @property
    def headers(self) -> tuple[tuple[str, str], ...]:
        return tuple(self._headers)

    def __repr__(self) -> str:
        return f"ResponseState(status={self._status.code})"
