"""Shared fixtures for the perch test suite."""

from collections.abc import Callable

import pytest

from perch.http.request import Request


def _make_request(method: str = "GET", path: str = "/v1/user", query: bytes = b"") -> Request:
    return Request.from_asgi(
        {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": query,
            "headers": [],
            "client": ("127.0.0.1", 5000),
        }
    )


class RecordingSend:
    """ASGI ``send`` that keeps every message."""

    def __init__(self) -> None:
        self.messages: list[dict] = []

    async def __call__(self, message: dict) -> None:
        self.messages.append(message)

    @property
    def status(self) -> int:
        return self.messages[0]["status"]

    @property
    def headers(self) -> dict[bytes, bytes]:
        return dict(self.messages[0]["headers"])

    @property
    def body(self) -> bytes:
        return b"".join(m.get("body", b"") for m in self.messages[1:])


@pytest.fixture
def make_request() -> Callable[..., Request]:
    """Factory for request contexts built from a minimal ASGI scope."""
    return _make_request


@pytest.fixture
def recording_send() -> RecordingSend:
    return RecordingSend()
