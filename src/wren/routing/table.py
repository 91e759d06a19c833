"""Per-method route table.

Built once from an ordered sequence of ``RouteSpec`` declarations and
read-only afterwards. Declaration order is match priority: the first
declared route that matches a path wins, so the table never sorts,
reorders, or deduplicates routes.
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from types import MappingProxyType

from wren.errors import EmptyHandlerChainError, UnsupportedMethodError
from wren.routing.route import Route, RouteMatch, RouteSpec

logger = logging.getLogger("wren.routing")

# Supported methods, in the order they are reported in ``Allow`` headers
METHODS: tuple[str, ...] = (
    "OPTIONS",
    "HEAD",
    "GET",
    "POST",
    "PUT",
    "PATCH",
    "DELETE",
)


@dataclass(frozen=True, slots=True)
class RouteDiagnostic:
    """A non-fatal configuration smell found while building the table.

    ``kind`` is ``"duplicate-name"`` or ``"duplicate-pattern"``.
    ``route`` was declared after ``existing``; at dispatch time
    ``existing`` wins any tie.
    """

    kind: str
    route: Route
    existing: Route

    @property
    def message(self) -> str:
        if self.kind == "duplicate-name":
            return f"Duplicate route name {self.route.name!r} detected. Route names should be unique."
        return (
            f"Duplicate URI pattern detected for {self.route.method}: "
            f"{self.route.pattern!r} is already served by {self.existing.pattern!r}."
        )


class RouteTable:
    """Routes grouped by HTTP method, in declaration order.

    Usage::

        table = build_table([
            RouteSpec("/", [index]),
            RouteSpec("/users/:id", [show_user]),
        ])
        match = table.lookup("GET", "/users/42")
    """

    __slots__ = ("_by_method", "_routes", "diagnostics")

    def __init__(
        self,
        routes: tuple[Route, ...],
        diagnostics: tuple[RouteDiagnostic, ...] = (),
    ) -> None:
        by_method: dict[str, tuple[Route, ...]] = {
            method: tuple(r for r in routes if r.method == method) for method in METHODS
        }
        self._by_method = MappingProxyType(by_method)
        self._routes = routes
        self.diagnostics = diagnostics

    @property
    def routes(self) -> tuple[Route, ...]:
        """All routes, in declaration order."""
        return self._routes

    def __iter__(self) -> Iterator[Route]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def supports(self, method: str) -> bool:
        """True if *method* is one of the methods the table serves."""
        return method in self._by_method

    def for_method(self, method: str) -> tuple[Route, ...]:
        """Routes for *method*, in priority order. Empty for unknown methods."""
        return self._by_method.get(method, ())

    def lookup(self, method: str, path: str) -> RouteMatch | None:
        """Return the first route for *method* that matches *path*.

        Linear scan in declaration order. Returns ``None`` when no route
        matches or when *method* is unsupported.
        """
        for route in self.for_method(method):
            match = route.match(path)
            if match is not None:
                return match
        return None


def build_table(specs: Iterable[RouteSpec]) -> RouteTable:
    """Compile and validate route declarations into a ``RouteTable``.

    Each declaration is checked in order:

    1. Its method must be in ``METHODS`` (``UnsupportedMethodError``).
    2. It must have at least one handler (``EmptyHandlerChainError``).
    3. Its pattern must compile (``DuplicatePlaceholderError``,
       ``PatternCompileError``).
    4. It is compared with every earlier route. A repeated non-empty name, or an
       earlier route on the same method that already matches this
       route's pattern, is logged as a warning and recorded in
       ``RouteTable.diagnostics``. Neither rejects the route.

    Errors from steps 1–3 are ``ConfigurationError`` subclasses and are
    meant to stop the process before it serves anything.
    """
    accepted: list[Route] = []
    diagnostics: list[RouteDiagnostic] = []

    for spec in specs:
        if spec.method not in METHODS:
            raise UnsupportedMethodError(spec.method, spec.pattern)
        if not spec.handlers:
            raise EmptyHandlerChainError(spec.method, spec.pattern)

        route = Route.from_spec(spec)

        for existing in accepted:
            if route.name and existing.name == route.name:
                diagnostics.append(RouteDiagnostic("duplicate-name", route, existing))
            if existing.method == route.method and existing.match(route.pattern) is not None:
                diagnostics.append(RouteDiagnostic("duplicate-pattern", route, existing))

        accepted.append(route)

    for diagnostic in diagnostics:
        logger.warning(diagnostic.message)

    return RouteTable(tuple(accepted), tuple(diagnostics))
