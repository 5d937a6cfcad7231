"""perch server class.

Mutable during setup (route groups, events).
Frozen on the first ``start()``: the route table and event pipeline are
compiled once and never change afterwards, even across stop/start.
"""

from __future__ import annotations

import logging
import threading

from perch._internal.asgi import Receive, Scope, Send
from perch.codec import Codec, JSONCodec
from perch.config import ServerConfig
from perch.errors import AlreadyRunning, NotRunning
from perch.events.pipeline import EventPipeline
from perch.events.protocol import Event
from perch.routing.route import BoundRoute
from perch.routing.table import RouteTable, bind_group, check_route_group
from perch.server.dispatch import Dispatcher
from perch.server.transport import Transport, UvicornTransport

logger = logging.getLogger("perch.server")


class Server:
    """The perch server.

    Usage::

        server = Server(ServerConfig(port=8080))
        server.add_route(UserRoutes(store)).add_event(AccessLog())
        server.start()
        ...
        server.stop()

    Thread safety:
        Setup is single-threaded. The freeze transition uses a Lock +
        double-check so exactly one thread compiles the route table.
        ``start``/``stop`` serialize on a second lock; ``running`` is
        only ever flipped while holding it.
    """

    __slots__ = (
        "_codec",
        "_dispatcher",
        "_freeze_lock",
        "_frozen",
        "_pending_events",
        "_pending_groups",
        "_pipeline",
        "_route_table",
        "_running",
        "_state_lock",
        "_stopped",
        "config",
        "transport",
    )

    def __init__(
        self,
        config: ServerConfig | None = None,
        *,
        codec: Codec | None = None,
        transport: Transport | None = None,
    ) -> None:
        self.config: ServerConfig = config or ServerConfig()
        self._codec: Codec = codec or JSONCodec()
        self.transport: Transport = transport or UvicornTransport(
            self.config.host,
            self.config.port,
            log_level=self.config.log_level,
            access_log=self.config.access_log,
            startup_timeout=self.config.startup_timeout,
        )

        # Setup phase
        self._pending_groups: list[object] = []
        self._pending_events: list[Event] = []

        # Compiled state, set during _freeze()
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()
        self._route_table: RouteTable | None = None
        self._pipeline: EventPipeline | None = None
        self._dispatcher: Dispatcher | None = None

        # Lifecycle
        self._running: bool = False
        self._state_lock: threading.Lock = threading.Lock()
        self._stopped: threading.Event = threading.Event()

    # -- Setup --

    def add_route(self, group: object) -> Server:
        """Register a route group. Returns the server for chaining."""
        self._check_not_frozen()
        check_route_group(group)
        self._pending_groups.append(group)
        return self

    def add_event(self, event: Event) -> Server:
        """Register an event; events run in registration order."""
        self._check_not_frozen()
        self._pending_events.append(event)
        return self

    # -- Lifecycle --

    @property
    def running(self) -> bool:
        return self._running

    @property
    def routes(self) -> list[BoundRoute]:
        """Bound routes; before the first start, resolved from pending groups."""
        if self._route_table is None:
            return [route for group in self._pending_groups for route in bind_group(group)]
        return self._route_table.routes

    @property
    def events(self) -> tuple[Event, ...]:
        """Registered events in run order."""
        if self._pipeline is None:
            return tuple(self._pending_events)
        return self._pipeline.events

    def start(self) -> None:
        """Bind the transport and start serving.

        Raises ``AlreadyRunning`` (state unchanged) when already started,
        ``ConfigurationError`` for duplicate routes and ``TransportError``
        when the listener cannot bind. After a failure the server stays
        stopped.
        """
        with self._state_lock:
            if self._running:
                raise AlreadyRunning()
            self._ensure_frozen()
            self._mount()
            try:
                self.transport.start()
            except Exception:
                self.transport.stop(0.0)
                raise
            self._running = True
            self._stopped.clear()
        logger.info("Started perch on %s:%d", self.config.host, self.config.port)

    def stop(self) -> None:
        """Stop serving; in-flight exchanges get ``config.grace_period`` seconds."""
        with self._state_lock:
            if not self._running:
                raise NotRunning()
            self._running = False
            self.transport.stop(self.config.grace_period)
            self._stopped.set()
        logger.info("Stopped perch on %s:%d", self.config.host, self.config.port)

    cleanup = stop

    def run(self) -> None:
        """Start, block until interrupted or stopped, then stop."""
        self.start()
        try:
            while not self._stopped.wait(0.5):
                pass
        except KeyboardInterrupt:
            logger.info("Interrupted, shutting down")
        finally:
            if self._running:
                self.stop()

    # -- ASGI --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Hand an exchange to the transport's path dispatch."""
        await self.transport(scope, receive, send)

    # -- Internal --

    def _mount(self) -> None:
        assert self._route_table is not None
        assert self._dispatcher is not None
        self.transport.mount_fallback(self._dispatcher.handle_unmatched)
        for path in self._route_table.paths:
            self.transport.mount(path, self._dispatcher.bind(self._route_table.methods_for(path)))

    def _ensure_frozen(self) -> None:
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile route groups and events. Caller holds ``_freeze_lock``."""
        self._route_table = RouteTable.build(self._pending_groups)
        self._pipeline = EventPipeline(self._pending_events)
        self._dispatcher = Dispatcher(self._pipeline, self._codec)
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the server after it has been started. "
                "Register route groups and events before calling server.start()."
            )
            raise RuntimeError(msg)
