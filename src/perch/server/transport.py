"""Transports: where mounted exchange closures meet the network.

A transport is itself an ASGI application that dispatches on the exact
request path. ``AsgiTransport`` only routes in-process (tests, embedding
in another ASGI server); ``UvicornTransport`` also binds a listener and
serves on a background thread so ``start()`` returns once it is bound.
"""

import logging
import threading
import time
from typing import Protocol, runtime_checkable

import uvicorn

from perch._internal.asgi import ExchangeHandler, Receive, Scope, Send
from perch.errors import TransportError

logger = logging.getLogger("perch.server")


@runtime_checkable
class Transport(Protocol):
    """What the server needs from a transport."""

    def mount(self, path: str, handler: ExchangeHandler) -> None: ...

    def mount_fallback(self, handler: ExchangeHandler) -> None: ...

    def start(self) -> None: ...

    def stop(self, grace_period: float = 0.0) -> None: ...

    @property
    def is_listening(self) -> bool: ...

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None: ...


class AsgiTransport:
    """In-process transport: exact-path dispatch, no listener."""

    def __init__(self) -> None:
        self._contexts: dict[str, ExchangeHandler] = {}
        self._fallback: ExchangeHandler | None = None
        self._listening = False

    def mount(self, path: str, handler: ExchangeHandler) -> None:
        if path in self._contexts:
            msg = f"A handler is already mounted at {path!r}"
            raise TransportError(msg)
        self._contexts[path] = handler

    def mount_fallback(self, handler: ExchangeHandler) -> None:
        """Set the handler answering paths with nothing mounted."""
        self._fallback = handler

    @property
    def paths(self) -> tuple[str, ...]:
        return tuple(self._contexts)

    @property
    def is_listening(self) -> bool:
        return self._listening

    def start(self) -> None:
        self._listening = True

    def stop(self, grace_period: float = 0.0) -> None:
        self._listening = False
        self._contexts.clear()
        self._fallback = None

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return
        handler = self._contexts.get(scope.get("path", "/"), self._fallback)
        if handler is None:
            await _send_bare_404(send)
            return
        await handler(scope, receive, send)


async def _send_bare_404(send: Send) -> None:
    await send({"type": "http.response.start", "status": 404, "headers": []})
    await send({"type": "http.response.body", "body": b""})


class UvicornTransport(AsgiTransport):
    """Serve the mounted closures with uvicorn on a daemon thread.

    Usage::

        transport = UvicornTransport("0.0.0.0", 8080)
        server = Server(transport=transport)
    """

    def __init__(
        self,
        host: str = "127.0.0.1",
        port: int = 8000,
        *,
        log_level: str = "info",
        access_log: bool = False,
        startup_timeout: float = 5.0,
    ) -> None:
        super().__init__()
        self.host = host
        self.port = port
        self.log_level = log_level
        self.access_log = access_log
        self.startup_timeout = startup_timeout
        self._server: uvicorn.Server | None = None
        self._thread: threading.Thread | None = None

    @property
    def is_listening(self) -> bool:
        return self._server is not None and self._server.started

    def start(self) -> None:
        """Bind the listener; return once uvicorn reports it started.

        Raises ``TransportError`` when the listener dies during startup
        (typically a port already in use) or does not come up in time.
        """
        if self._server is not None:
            msg = f"Already listening on {self.host}:{self.port}"
            raise TransportError(msg)

        config = uvicorn.Config(
            self,
            host=self.host,
            port=self.port,
            interface="asgi3",
            loop="asyncio",
            lifespan="off",
            log_config=None,
            log_level=self.log_level,
            access_log=self.access_log,
        )
        server = uvicorn.Server(config)
        thread = threading.Thread(
            target=server.run, name=f"perch-{self.host}:{self.port}", daemon=True
        )
        thread.start()

        deadline = time.monotonic() + self.startup_timeout
        while not server.started:
            if not thread.is_alive():
                msg = f"Could not bind {self.host}:{self.port}"
                raise TransportError(msg)
            if time.monotonic() > deadline:
                server.should_exit = True
                thread.join(timeout=1.0)
                msg = (
                    f"Listener on {self.host}:{self.port} "
                    f"did not start within {self.startup_timeout}s"
                )
                raise TransportError(msg)
            time.sleep(0.01)

        self._server = server
        self._thread = thread
        super().start()

    def stop(self, grace_period: float = 0.0) -> None:
        """Stop accepting connections.

        In-flight exchanges get *grace_period* seconds before uvicorn cancels
        them; with 0 uvicorn closes idle connections and lets running tasks
        finish, bounded by the thread join below.
        """
        server, thread = self._server, self._thread
        self._server = None
        self._thread = None
        if server is not None:
            server.config.timeout_graceful_shutdown = grace_period or None
            server.should_exit = True
        if thread is not None:
            thread.join(timeout=grace_period + 5.0)
            if thread.is_alive():
                logger.warning("Listener thread %s did not exit", thread.name)
        super().stop(grace_period)
