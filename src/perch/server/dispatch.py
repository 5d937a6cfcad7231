"""Dispatch engine: one state machine run per exchange.

    ReceivedContext -> EventsRun -> {Cancelled | MethodInvalid |
    MethodNotAllowed | Invoking} -> {Success | NoValue |
    ContractViolation | HandlerFailed} -> EnvelopeSent

Every path ends in exactly one envelope being sent. Per-exchange failures
are raised as ``ExchangeError`` subclasses inside ``_run`` and converted
to an ``Exchange`` in ``dispatch``; nothing but transport errors on the
response start message escapes an exchange.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from perch._internal.asgi import ExchangeHandler, Receive, Scope, Send
from perch._internal.invoke import invoke
from perch.codec import Codec
from perch.errors import (
    CancelledRequest,
    ExchangeError,
    HandlerContractViolation,
    HandlerInvocationFailure,
    InvalidMethod,
    MethodNotAllowed,
    RouteNotFound,
)
from perch.events.pipeline import EventPipeline
from perch.http.envelope import Envelope
from perch.http.method import HTTPMethod
from perch.http.request import Request
from perch.http.response import ResponseState
from perch.http.status import StatusCode
from perch.routing.route import NO_VALUE, BoundRoute, HandlerResult, NoValue, Value
from perch.server.sender import send_json

logger = logging.getLogger("perch.server")


class Outcome(Enum):
    """The branch an exchange finished on."""

    CANCELLED = "cancelled"
    METHOD_INVALID = "method_invalid"
    METHOD_NOT_ALLOWED = "method_not_allowed"
    NOT_FOUND = "not_found"
    SUCCESS = "success"
    NO_VALUE = "no_value"
    CONTRACT_VIOLATION = "contract_violation"
    HANDLER_FAILED = "handler_failed"


_ERROR_OUTCOMES: dict[type[ExchangeError], Outcome] = {
    CancelledRequest: Outcome.CANCELLED,
    InvalidMethod: Outcome.METHOD_INVALID,
    MethodNotAllowed: Outcome.METHOD_NOT_ALLOWED,
    RouteNotFound: Outcome.NOT_FOUND,
    HandlerContractViolation: Outcome.CONTRACT_VIOLATION,
    HandlerInvocationFailure: Outcome.HANDLER_FAILED,
}


@dataclass(frozen=True, slots=True)
class Exchange:
    """The decided result of one exchange, ready to send."""

    status: StatusCode
    envelope: Envelope
    outcome: Outcome
    headers: tuple[tuple[str, str], ...] = ()


class Dispatcher:
    """Runs events, invokes handlers and sends envelopes.

    Holds no per-exchange state: the pipeline and codec are shared and
    read-only, so one dispatcher serves every concurrent exchange.
    """

    __slots__ = ("_codec", "_pipeline")

    def __init__(self, pipeline: EventPipeline, codec: Codec) -> None:
        self._pipeline = pipeline
        self._codec = codec

    # -- Binding --

    def bind(self, routes: Mapping[HTTPMethod, BoundRoute]) -> ExchangeHandler:
        """Return the exchange closure mounted for one full path."""

        async def handle_exchange(scope: Scope, receive: Receive, send: Send) -> None:
            request = Request.from_asgi(scope)
            exchange = await self.dispatch(request, routes)
            await self.send(exchange, send)

        return handle_exchange

    async def handle_unmatched(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Answer a request whose path has no mounted routes."""
        request = Request.from_asgi(scope)
        exc = RouteNotFound(request.method_name, request.path)
        logger.debug("%s", exc)
        exchange = Exchange(exc.status, exc.envelope(), Outcome.NOT_FOUND)
        await self.send(exchange, send)

    # -- Dispatch --

    async def dispatch(
        self,
        request: Request,
        routes: Mapping[HTTPMethod, BoundRoute],
    ) -> Exchange:
        """Decide the status and envelope for *request*."""
        response = ResponseState()
        try:
            outcome, envelope = await self._run(request, response, routes)
        except HandlerInvocationFailure as exc:
            # Keep a more specific status an earlier step already chose
            if response.is_default:
                response.status = exc.status
            return Exchange(
                response.status, exc.envelope(), Outcome.HANDLER_FAILED, response.headers
            )
        except ExchangeError as exc:
            response.status = exc.status
            return Exchange(
                response.status,
                exc.envelope(),
                _ERROR_OUTCOMES.get(type(exc), Outcome.HANDLER_FAILED),
                response.headers + exc.headers,
            )
        return Exchange(response.status, envelope, outcome, response.headers)

    async def _run(
        self,
        request: Request,
        response: ResponseState,
        routes: Mapping[HTTPMethod, BoundRoute],
    ) -> tuple[Outcome, Envelope]:
        try:
            cancelled = await self._pipeline.run(request, response)
        except Exception as exc:
            logger.exception("Event failed for %s %s", request.method_name, request.uri)
            raise HandlerInvocationFailure(exc) from exc

        if cancelled:
            raise CancelledRequest()

        if request.method is None:
            raise InvalidMethod(request.method_name)

        route = routes.get(request.method)
        if route is None:
            raise MethodNotAllowed(frozenset(method.value for method in routes))

        match await self._invoke(route, request, response):
            case Value(payload=payload):
                return Outcome.SUCCESS, Envelope.ok(payload)
            case NoValue():
                if route.method is HTTPMethod.GET:
                    logger.warning(
                        "GET handler %s.%s for %r returns no value",
                        route.group_name,
                        getattr(route.handler, "__name__", "handler"),
                        route.path,
                    )
                    raise HandlerContractViolation(route.path)
                return Outcome.NO_VALUE, Envelope.empty()

    async def _invoke(
        self,
        route: BoundRoute,
        request: Request,
        response: ResponseState,
    ) -> HandlerResult:
        try:
            returned = await invoke(route.handler, request, response)
            if not route.returns_value:
                return NO_VALUE
            return Value(self._codec.to_tree(returned))
        except Exception as exc:
            logger.exception("Failed handling %s %s", request.method_name, request.uri)
            raise HandlerInvocationFailure(exc) from exc

    # -- Sending --

    async def send(self, exchange: Exchange, send: Send) -> None:
        body = self._codec.encode(exchange.envelope.to_dict())
        logger.debug("%d %s", exchange.status.code, body.decode("utf-8"))
        await send_json(send, exchange.status.code, body, exchange.headers)
