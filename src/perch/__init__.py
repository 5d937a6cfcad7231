"""perch: a minimal HTTP request-dispatch framework.

Route groups declare handlers, events run ahead of every handler and may
cancel the exchange, and every response is a small JSON envelope.

Basic usage::

    from perch import Endpoint, HTTPMethod, Server

    class HelloRoutes:
        base_path = "/v1"

        def endpoints(self):
            return (Endpoint("/hello", HTTPMethod.GET, self.hello),)

        def hello(self, request, response):
            return {"greeting": f"hello {request.param('name', 'world')}"}

    server = Server().add_route(HelloRoutes())
    server.run()
"""

import importlib

__version__ = "0.1.0.dev0"
__all__ = [
    "AccessLog",
    "AlreadyRunning",
    "AsgiTransport",
    "Cancellable",
    "ConfigurationError",
    "Endpoint",
    "Envelope",
    "Event",
    "HTTPMethod",
    "JSONCodec",
    "NotRunning",
    "PerchError",
    "Request",
    "ResponseState",
    "RouteGroup",
    "Server",
    "ServerConfig",
    "StatusCode",
    "TransportError",
    "UvicornTransport",
    "classify",
]

# Public name -> defining module
_EXPORTS: dict[str, str] = {
    "AccessLog": "perch.events.builtin",
    "AlreadyRunning": "perch.errors",
    "AsgiTransport": "perch.server.transport",
    "Cancellable": "perch.events.protocol",
    "ConfigurationError": "perch.errors",
    "Endpoint": "perch.routing.route",
    "Envelope": "perch.http.envelope",
    "Event": "perch.events.protocol",
    "HTTPMethod": "perch.http.method",
    "JSONCodec": "perch.codec",
    "NotRunning": "perch.errors",
    "PerchError": "perch.errors",
    "Request": "perch.http.request",
    "ResponseState": "perch.http.response",
    "RouteGroup": "perch.routing.route",
    "Server": "perch.app",
    "ServerConfig": "perch.config",
    "StatusCode": "perch.http.status",
    "TransportError": "perch.errors",
    "UvicornTransport": "perch.server.transport",
    "classify": "perch.http.status",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` from importing uvicorn until a server is built.
    """
    module_name = _EXPORTS.get(name)
    if module_name is None:
        msg = f"module 'perch' has no attribute {name!r}"
        raise AttributeError(msg)
    return getattr(importlib.import_module(module_name), name)
