"""RouteSpec, Route and RouteMatch frozen dataclasses."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from wren._internal.types import Handler
from wren.routing.pattern import CompiledPattern, compile_pattern


@dataclass(frozen=True, slots=True)
class RouteSpec:
    """A route declaration, as written by the user.

    ``name`` is a label for humans and diagnostics; dispatch never reads
    it. ``handlers`` run in order (see ``wren.server.dispatch``).

    Usage::

        RouteSpec("/users/:id", [load_user, show_user], name="user")
        RouteSpec("/files/:path*", [send_file], method="GET", trailing_slash=True)
    """

    pattern: str
    handlers: Sequence[Handler]
    method: str = "GET"
    name: str = ""
    trailing_slash: bool = False
    fall_through: bool = False


@dataclass(frozen=True, slots=True)
class Route:
    """A compiled route.

    Created once from a ``RouteSpec`` when the route table is built,
    immutable afterwards and shared by every request.
    """

    name: str
    method: str
    pattern: str
    handlers: tuple[Handler, ...]
    compiled: CompiledPattern = field(repr=False)
    trailing_slash: bool = False
    fall_through: bool = False

    @classmethod
    def from_spec(cls, spec: RouteSpec) -> Route:
        """Compile a declaration. Raises ``RouteError`` subclasses."""
        return cls(
            name=spec.name,
            method=spec.method,
            pattern=spec.pattern,
            handlers=tuple(spec.handlers),
            compiled=compile_pattern(spec.pattern, spec.trailing_slash),
            trailing_slash=spec.trailing_slash,
            fall_through=spec.fall_through,
        )

    @property
    def keys(self) -> tuple[str, ...]:
        """Placeholder names in declaration order."""
        return self.compiled.keys

    def match(self, path: str) -> RouteMatch | None:
        """Match *path* against this route.

        Static patterns short-circuit on string equality before the
        regular expression is consulted.
        """
        if path == self.pattern:
            return RouteMatch(route=self, params={})
        params = self.compiled.match(path)
        if params is None:
            return None
        return RouteMatch(route=self, params=params)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    params: dict[str, str]
