"""Middleware protocol, Next type alias, and chain composition.

A middleware is any callable matching::

    async def my_mw(writer: ResponseWriter, request: Request, next: Next) -> None: ...

No base class required. The framework checks the shape, not the lineage.

Each middleware decides whether and when to call ``next``: before it
(interception), after it (post-processing), or not at all
(short-circuit).
"""

from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol

from wren._internal.invoke import invoke
from wren.http.request import Request
from wren.http.writer import ResponseWriter

# The next layer in the chain (another middleware or the dispatcher)
type Next = Callable[[ResponseWriter, Request], Awaitable[None]]


class Middleware(Protocol):
    """Protocol for wren middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def timing(writer: ResponseWriter, request: Request, next: Next) -> None:
            start = time.monotonic()
            await next(writer, request)
            logger.info("%s took %.3fs", request.path, time.monotonic() - start)

        # Class middleware
        class Maintenance:
            async def __call__(self, writer, request, next) -> None:
                await writer.write_header(503)
    """

    def __call__(
        self, writer: ResponseWriter, request: Request, next: Next
    ) -> Awaitable[None] | None: ...


def _wrap(middleware: Middleware, inner: Next) -> Next:
    async def layer(writer: ResponseWriter, request: Request) -> None:
        await invoke(middleware, writer, request, inner)

    return layer


def compose(middleware: Sequence[Middleware], endpoint: Next) -> Next:
    """Build the serving entry point from *middleware* around *endpoint*.

    Layers wrap in registration order, so the last registered middleware
    is the outermost and sees each request first. Called once when the
    app freezes; the result is immutable.
    """
    handler = endpoint
    for mw in middleware:
        handler = _wrap(mw, handler)
    return handler
