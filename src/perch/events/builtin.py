"""Built-in events."""

import logging

from perch.http.request import Request
from perch.http.response import ResponseState


class AccessLog:
    """Log one line per dispatched exchange on ``perch.access``.

    Usage::

        server.add_event(AccessLog())
    """

    __slots__ = ("_level", "_logger")

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.INFO) -> None:
        self._logger = logger or logging.getLogger("perch.access")
        self._level = level

    async def handle(self, request: Request, response: ResponseState) -> None:
        client = f"{request.client[0]}:{request.client[1]}" if request.client else "-"
        self._logger.log(self._level, "%s %s from %s", request.method_name, request.uri, client)
