"""Routing — pattern compilation, routes, and the per-method route table.

Routes are declared during setup and compiled into an immutable
``RouteTable`` when the app freezes.
"""

from wren.routing.pattern import CompiledPattern, compile_pattern
from wren.routing.route import Route, RouteMatch, RouteSpec
from wren.routing.table import METHODS, RouteDiagnostic, RouteTable, build_table

__all__ = [
    "METHODS",
    "CompiledPattern",
    "Route",
    "RouteDiagnostic",
    "RouteMatch",
    "RouteSpec",
    "RouteTable",
    "build_table",
    "compile_pattern",
]
