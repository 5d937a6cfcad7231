"""Compiled route table keyed by (full path, method).

Full paths are the verbatim concatenation of a group's ``base_path`` and
an endpoint's ``path``: no normalization, no trailing-slash collapsing.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from perch.errors import ConfigurationError
from perch.http.method import HTTPMethod
from perch.routing.route import BoundRoute, Endpoint, declares_value

logger = logging.getLogger("perch.routing")


def check_route_group(group: object) -> None:
    """Raise ``ConfigurationError`` unless *group* is a usable route group."""
    name = type(group).__name__
    base_path = getattr(group, "base_path", None)
    if not isinstance(base_path, str):
        msg = f"Route group {name} does not declare a base_path string"
        raise ConfigurationError(msg)
    if not callable(getattr(group, "endpoints", None)):
        msg = f"Route group {name} does not provide endpoints()"
        raise ConfigurationError(msg)


def bind_group(group: object) -> list[BoundRoute]:
    """Resolve a route group's endpoints into bound routes."""
    check_route_group(group)
    name = type(group).__name__
    bound: list[BoundRoute] = []
    for endpoint in group.endpoints():  # type: ignore[attr-defined]
        if not isinstance(endpoint, Endpoint):
            msg = f"Route group {name} yielded {endpoint!r}, expected an Endpoint"
            raise ConfigurationError(msg)
        if not isinstance(endpoint.method, HTTPMethod):
            msg = f"Endpoint {endpoint.path!r} in {name} has no HTTPMethod"
            raise ConfigurationError(msg)
        if not callable(endpoint.handler):
            msg = f"Endpoint {endpoint.path!r} in {name} has a non-callable handler"
            raise ConfigurationError(msg)
        returns_value = endpoint.returns_value
        if returns_value is None:
            returns_value = declares_value(endpoint.handler)
        bound.append(
            BoundRoute(
                path=group.base_path + endpoint.path,  # type: ignore[attr-defined]
                method=endpoint.method,
                handler=endpoint.handler,
                group=group,
                returns_value=returns_value,
            )
        )
    return bound


class RouteTable:
    """Immutable lookup from full path to per-method bound routes.

    Usage::

        table = RouteTable.build([UserRoutes(store)])
        route = table.lookup("/v1/user", HTTPMethod.GET)
    """

    __slots__ = ("_paths",)

    def __init__(self, routes: Iterable[BoundRoute] = ()) -> None:
        paths: dict[str, dict[HTTPMethod, BoundRoute]] = {}
        for route in routes:
            by_method = paths.setdefault(route.path, {})
            existing = by_method.get(route.method)
            if existing is not None:
                msg = (
                    f"{route.method} {route.path!r} is declared by both "
                    f"{existing.group_name} and {route.group_name}"
                )
                raise ConfigurationError(msg)
            by_method[route.method] = route
        self._paths: Mapping[str, Mapping[HTTPMethod, BoundRoute]] = MappingProxyType(
            {path: MappingProxyType(by_method) for path, by_method in paths.items()}
        )

    @classmethod
    def build(cls, groups: Iterable[object]) -> RouteTable:
        """Compile route groups, logging how many routes each contributed."""
        routes: list[BoundRoute] = []
        for group in groups:
            bound = bind_group(group)
            name = type(group).__name__
            if not bound:
                logger.warning("No routes found for route group %s", name)
            else:
                logger.info("Added %d routes to %s", len(bound), name)
            routes.extend(bound)
        return cls(routes)

    def lookup(self, path: str, method: HTTPMethod) -> BoundRoute | None:
        by_method = self._paths.get(path)
        if by_method is None:
            return None
        return by_method.get(method)

    def methods_for(self, path: str) -> Mapping[HTTPMethod, BoundRoute]:
        """Return the routes declared for *path*, keyed by method."""
        return self._paths.get(path, MappingProxyType({}))

    @property
    def paths(self) -> tuple[str, ...]:
        return tuple(self._paths)

    @property
    def routes(self) -> list[BoundRoute]:
        return [route for by_method in self._paths.values() for route in by_method.values()]

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def __iter__(self) -> Iterator[str]:
        return iter(self._paths)

    def __len__(self) -> int:
        return sum(len(by_method) for by_method in self._paths.values())
