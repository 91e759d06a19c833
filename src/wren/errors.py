"""Wren exception hierarchy.

Shared across the pattern compiler, route table, dispatcher, and
response helpers so every module raises and catches the same types.

Two tiers:

- ``ConfigurationError`` and its subclasses are startup-fatal. They are
  raised while the app freezes and must never reach request serving.
- ``HTTPError`` maps to an HTTP status and is used on the request path.
"""

from dataclasses import dataclass


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when app configuration is invalid.

    Typically raised during ``App._freeze()`` or ``AppConfig.from_file()``.
    """


class RouteError(ConfigurationError):
    """A route declaration that cannot be compiled into the route table."""

    def __init__(self, message: str, *, pattern: str, method: str = "") -> None:
        super().__init__(message)
        self.pattern = pattern
        self.method = method


class UnsupportedMethodError(RouteError):
    """The route's HTTP method is outside the supported set."""

    def __init__(self, method: str, pattern: str) -> None:
        super().__init__(
            f"Unsupported HTTP request method {method!r} for route {pattern!r}.",
            pattern=pattern,
            method=method,
        )


class EmptyHandlerChainError(RouteError):
    """The route was declared without any handlers."""

    def __init__(self, method: str, pattern: str) -> None:
        super().__init__(
            f"No handlers provided for route {pattern!r}, method {method!r}.",
            pattern=pattern,
            method=method,
        )


class DuplicatePlaceholderError(RouteError):
    """A placeholder name appears twice in the same pattern."""

    def __init__(self, pattern: str, key: str, position: int) -> None:
        super().__init__(
            f"Duplicate URI key {key!r} in pattern {pattern!r} "
            f"(first declared at position {position}).",
            pattern=pattern,
        )
        self.key = key
        self.position = position


class PatternCompileError(RouteError):
    """The generated regular expression failed to compile."""


@dataclass(frozen=True, slots=True)
class HTTPError(WrenError):
    """An error that maps directly to an HTTP status code."""

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405 — the request method is not one the router serves.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str] | tuple[str, ...], detail: str = "") -> None:
        allow_value = ", ".join(allowed)
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
