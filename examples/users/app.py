"""Users: a small user store served as a JSON API.

A single route group under ``/v1`` backed by a thread-safe in-memory
store. Shows value-returning GET handlers, a POST that reads query
parameters, the access log event and a cancellable maintenance switch.

Run:
    cd examples/users && python app.py
"""

import contextvars
import logging
import threading
from dataclasses import dataclass

from perch import AccessLog, Endpoint, HTTPMethod, Request, ResponseState, Server, ServerConfig
from perch.server.transport import Transport

log = logging.getLogger("userfetch")


# ---------------------------------------------------------------------------
# In-memory storage (sync handlers run on worker threads)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class User:
    name: str
    age: int


class UserStore:
    def __init__(self, users: tuple[User, ...] = ()) -> None:
        self._users: dict[str, User] = {}
        self._lock = threading.Lock()
        for user in users:
            self.add(user)

    def add(self, user: User) -> None:
        with self._lock:
            self._users[user.name] = user

    def remove(self, name: str) -> None:
        with self._lock:
            self._users.pop(name, None)

    def get(self, name: str | None) -> User | None:
        with self._lock:
            return self._users.get(name) if name is not None else None

    def all(self) -> list[User]:
        with self._lock:
            return sorted(self._users.values(), key=lambda user: user.name)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


class UserRoutes:
    base_path = "/v1"

    def __init__(self, store: UserStore) -> None:
        self.store = store

    def endpoints(self) -> tuple[Endpoint, ...]:
        return (
            Endpoint("/user", HTTPMethod.GET, self.fetch_user),
            Endpoint("/users", HTTPMethod.GET, self.list_users),
            Endpoint("/glester", HTTPMethod.GET, self.glester),
            Endpoint("/put", HTTPMethod.POST, self.insert),
            Endpoint("/user", HTTPMethod.DELETE, self.remove),
        )

    def fetch_user(self, request: Request, response: ResponseState) -> User | None:
        name = request.param("name")
        log.info("Fetching user with name %s", name)
        return self.store.get(name)

    def list_users(self, request: Request, response: ResponseState) -> list[User]:
        return self.store.all()

    def glester(self, request: Request, response: ResponseState) -> User:
        return User("deglester", 32)

    def insert(self, request: Request, response: ResponseState) -> User:
        user = User(request.param("name"), int(request.param("age")))
        self.store.add(user)
        return user

    def remove(self, request: Request, response: ResponseState) -> None:
        self.store.remove(request.param("name"))


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class MaintenanceMode:
    """Cancels writes while maintenance is switched on."""

    def __init__(self) -> None:
        self.enabled = False
        self._cancelled: contextvars.ContextVar[bool] = contextvars.ContextVar(
            "maintenance_cancelled", default=False
        )

    async def handle(self, request: Request, response: ResponseState) -> None:
        self._cancelled.set(self.enabled and request.method is not HTTPMethod.GET)

    def is_cancelled(self) -> bool:
        return self._cancelled.get()


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------


def create_server(transport: Transport | None = None) -> Server:
    store = UserStore((User("Des", 32), User("Maria", 21), User("Preston", 23)))
    return (
        Server(ServerConfig(port=8080), transport=transport)
        .add_route(UserRoutes(store))
        .add_event(AccessLog())
        .add_event(MaintenanceMode())
    )


server = create_server()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    server.run()
