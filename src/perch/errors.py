"""perch exception hierarchy.

Shared across the route table, dispatcher, transport and server so every
module raises and catches the same types.

Setup and lifecycle errors propagate to the caller. ``ExchangeError`` and
its subclasses never leave an exchange: the dispatcher converts them into
a status code and a JSON envelope.
"""

from perch.http.envelope import Envelope
from perch.http.status import (
    BAD_REQUEST,
    FORBIDDEN,
    INTERNAL_SERVER_ERROR,
    METHOD_NOT_ALLOWED,
    NOT_FOUND,
    StatusCode,
)


class PerchError(Exception):
    """Base for all perch-specific errors."""


class ConfigurationError(PerchError):
    """Raised when a route group, endpoint or config value is invalid.

    Always raised during setup, before any listener is bound.
    """


class LifecycleError(PerchError):
    """Raised when the server is started or stopped out of order."""


class AlreadyRunning(LifecycleError):  # noqa: N818
    def __init__(self, detail: str = "perch already running") -> None:
        super().__init__(detail)


class NotRunning(LifecycleError):  # noqa: N818
    def __init__(self, detail: str = "perch is not running") -> None:
        super().__init__(detail)


class TransportError(PerchError):
    """Raised when the transport cannot bind or start its listener."""


class ExchangeError(PerchError):
    """A per-exchange failure that maps to a status code and envelope."""

    def __init__(
        self,
        status: StatusCode,
        detail: str | None = "",
        headers: tuple[tuple[str, str], ...] = (),
    ) -> None:
        super().__init__(detail)
        self.status = status
        self.detail = detail
        self.headers = headers

    def envelope(self) -> Envelope:
        return Envelope.failure(self.detail)

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status.code}: {self.detail}"
        return str(self.status.code)


class CancelledRequest(ExchangeError):  # noqa: N818
    """403: an event cancelled the exchange."""

    def __init__(self) -> None:
        super().__init__(FORBIDDEN, "Request has been cancelled internally")


class InvalidMethod(ExchangeError):  # noqa: N818
    """400: the request method is outside ``HTTPMethod``."""

    def __init__(self, method_name: str = "") -> None:
        super().__init__(BAD_REQUEST, "Request method is null")
        self.method_name = method_name


class MethodNotAllowed(ExchangeError):  # noqa: N818
    """405: the path exists but not for this method.

    Carries an ``Allow`` header listing the declared methods.
    """

    def __init__(self, allowed: frozenset[str]) -> None:
        allow_value = ", ".join(sorted(allowed))
        super().__init__(
            METHOD_NOT_ALLOWED,
            f"Method not allowed. Allowed methods: {allow_value}",
            headers=(("Allow", allow_value),),
        )
        self.allowed = allowed


class RouteNotFound(ExchangeError):  # noqa: N818
    """404: no route group declared this path."""

    def __init__(self, method_name: str, path: str) -> None:
        super().__init__(NOT_FOUND, f"No route matches {method_name} {path!r}")


class HandlerContractViolation(ExchangeError):  # noqa: N818
    """400: a GET handler declared that it returns nothing.

    Answered with an empty envelope.
    """

    def __init__(self, path: str) -> None:
        super().__init__(BAD_REQUEST, f"GET handler for {path!r} returned no value")

    def envelope(self) -> Envelope:
        return Envelope.empty()


class HandlerInvocationFailure(ExchangeError):  # noqa: N818
    """500: the handler (or an event) raised.

    The raised exception is chained as ``__cause__``. The dispatcher only
    applies the 500 when no earlier step changed the status.
    """

    def __init__(self, exc: BaseException) -> None:
        super().__init__(INTERNAL_SERVER_ERROR, describe_exception(exc))


def describe_exception(exc: BaseException) -> str:
    """Message of the innermost ``__cause__``, else of *exc* itself.

    Falls back to the class name when every message is empty.
    """
    innermost = exc
    while innermost.__cause__ is not None:
        innermost = innermost.__cause__
    for candidate in (innermost, exc):
        message = str(candidate)
        if message:
            return message
    return type(exc).__name__
