"""Per-request routing context.

Provides:
- ``RouteContext``: path parameters, the matched route, and the shared
  ``AppState``. Built by the dispatcher once a route matches.
- ``get_context(request)``: the context attached to a request, or
  ``None`` outside a routed request.
- ``request_var`` / ``get_request()``: the current ``Request`` for
  this task, set by the ASGI entry point.

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local under
    free-threading. ``RouteContext`` is frozen and owned by one request.
"""

from __future__ import annotations

from collections.abc import Mapping
from contextvars import ContextVar
from dataclasses import dataclass
from types import MappingProxyType

from wren.http.request import Request
from wren.routing.route import Route
from wren.state import AppState


@dataclass(frozen=True, slots=True)
class RouteContext:
    """What a handler knows about how its request was routed."""

    params: Mapping[str, str]
    route: Route
    state: AppState

    @classmethod
    def create(cls, params: dict[str, str], route: Route, state: AppState) -> RouteContext:
        """Build a context with a read-only view of *params*."""
        return cls(params=MappingProxyType(dict(params)), route=route, state=state)


def get_context(request: Request) -> RouteContext | None:
    """Return the routing context of *request*.

    ``None`` when the request has not been routed (middleware running
    before dispatch, the not-found handler, or a request built by hand).
    """
    return request.context


# -- Request context --

request_var: ContextVar[Request] = ContextVar("wren_request")
"""The current request. Set by the ASGI entry point before the middleware chain runs."""


def get_request() -> Request:
    """Return the current request.

    Raises ``LookupError`` if called outside a request.
    """
    return request_var.get()
