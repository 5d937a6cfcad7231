"""Routing: route groups compiled into an immutable (path, method) table.

Route groups are registered during setup and compiled into the table
when the server freezes.
"""

from perch.routing.route import BoundRoute, Endpoint, NoValue, RouteGroup, Value
from perch.routing.table import RouteTable

__all__ = ["BoundRoute", "Endpoint", "NoValue", "RouteGroup", "RouteTable", "Value"]
