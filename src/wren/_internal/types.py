"""Shared type aliases used across wren modules."""

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from wren.http.request import Request
    from wren.http.writer import ResponseWriter

# Route handler: ``handler(writer, request)``, sync or async. A ``def``
# handler calls ``writer.write_header`` / ``writer.write`` without awaiting.
Handler: TypeAlias = Callable[["ResponseWriter", "Request"], Any]

# The serving entry point: the composed head of the middleware chain
Serve: TypeAlias = Callable[["ResponseWriter", "Request"], Awaitable[None]]
