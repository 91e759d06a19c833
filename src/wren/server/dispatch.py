"""Request dispatch — route lookup and handler-chain execution.

The dispatcher is the innermost layer of the serving pipeline. It never
touches ASGI; it works on a ``Request`` and a ``ResponseWriter``.

Handler-chain protocol, per request::

    state = pending
    for handler in route.handlers:
        if state is committed and not route.fall_through: stop
        handler(writer, request)          # may commit
        flush queued writes               # from def handlers
        if committed: seal the writer     # later writes are discarded

Handlers run one after another in the request's own task. Exceptions
raised by handlers propagate unchanged.
"""

import logging

from wren._internal.invoke import invoke
from wren._internal.types import Handler
from wren.context import RouteContext, request_var
from wren.errors import MethodNotAllowed, NotFound
from wren.http.request import Request
from wren.http.writer import GuardedWriter, ResponseWriter
from wren.routing.route import Route, RouteMatch
from wren.routing.table import METHODS, RouteTable
from wren.server.errors import write_http_error
from wren.state import AppState

logger = logging.getLogger("wren.server")


async def default_not_found(writer: ResponseWriter, request: Request) -> None:
    """Generic 404 responder."""
    await write_http_error(writer, NotFound(), body="404 page not found")


async def run_chain(route: Route, writer: GuardedWriter, request: Request) -> None:
    """Run *route*'s handlers under write-once response semantics."""
    for handler in route.handlers:
        if writer.committed and not route.fall_through:
            break
        await invoke(handler, writer, request)
        await writer.flush()
        writer.seal()


class Dispatcher:
    """Selects a route for each request and runs its handler chain.

    Holds only read-only state (the route table, the not-found handler,
    and a reference to the shared ``AppState``), so one instance serves
    every concurrent request.
    """

    __slots__ = ("not_found", "state", "table")

    def __init__(
        self,
        table: RouteTable,
        *,
        not_found: Handler | None = None,
        state: AppState | None = None,
    ) -> None:
        self.table = table
        self.not_found: Handler = not_found or default_not_found
        self.state = state if state is not None else AppState()

    def dispatch(self, method: str, path: str) -> RouteMatch | None:
        """Return the first route matching *method* and *path*, or ``None``."""
        return self.table.lookup(method, path)

    async def __call__(self, writer: ResponseWriter, request: Request) -> None:
        if not self.table.supports(request.method):
            logger.debug("405 %s %s, unsupported method", request.method, request.path)
            await write_http_error(writer, MethodNotAllowed(METHODS))
            return

        match = self.dispatch(request.method, request.raw_path)
        if match is None:
            logger.debug("404 %s %s", request.method, request.path)
            guard = GuardedWriter(writer)
            await invoke(self.not_found, guard, request)
            await guard.flush()
            return

        routed = request.with_context(RouteContext.create(match.params, match.route, self.state))
        token = request_var.set(routed)
        try:
            await run_chain(match.route, GuardedWriter(writer), routed)
        finally:
            request_var.reset(token)
