"""Wren application class.

Mutable during setup (route registration, middleware, not-found handler,
hooks). Frozen at runtime when app.run() or __call__() is first invoked.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from kida import Environment

from wren._internal.asgi import Receive, Scope, Send
from wren._internal.invoke import invoke
from wren._internal.types import Handler, Serve
from wren.config import AppConfig
from wren.context import request_var
from wren.http.request import Request
from wren.http.writer import ASGIResponseWriter, ResponseWriter
from wren.middleware.protocol import Middleware, compose
from wren.routing.route import RouteSpec
from wren.routing.table import RouteDiagnostic, RouteTable, build_table
from wren.server.dispatch import Dispatcher, default_not_found
from wren.state import AppState
from wren.templating.integration import create_environment

logger = logging.getLogger("wren.server")


class App:
    """The wren application.

    Routes can be passed up front, as an ordered sequence of
    ``RouteSpec`` declarations, or registered one at a time::

        app = App(routes=[RouteSpec("/", [index])])

        @app.route("/users/:id", name="user")
        async def show_user(writer, request):
            await r200(writer, request.params)

        app.add_route("/admin/:page*", require_admin, admin_page, method="GET")

    Declaration order is match priority. The route table is compiled and
    validated when the app freezes; invalid routes raise a
    ``ConfigurationError`` subclass at that point, before any request is
    served.

    Thread safety:
        The setup phase is single-threaded (decorators at import time).
        The freeze transition uses a Lock + double-check so exactly one
        thread compiles the app, even when several server workers call
        ``__call__()`` concurrently on first request. Everything built by
        the freeze is read-only afterwards.
    """

    __slots__ = (
        "_custom_kida_env",
        "_dispatcher",
        "_freeze_lock",
        "_frozen",
        "_kida_env",
        "_middleware_list",
        "_not_found",
        "_pending_routes",
        "_serve",
        "_shutdown_hooks",
        "_startup_hooks",
        "_table",
        "config",
        "state",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        routes: Iterable[RouteSpec] = (),
        not_found: Handler | None = None,
        kida_env: Environment | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self.state: AppState = AppState()
        self._pending_routes: list[RouteSpec] = list(routes)
        self._middleware_list: list[Middleware] = []
        self._not_found: Handler = not_found or default_not_found
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()
        self._custom_kida_env: Environment | None = kida_env

        # Compiled state, set during _freeze()
        self._table: RouteTable | None = None
        self._dispatcher: Dispatcher | None = None
        self._serve: Serve | None = None
        self._kida_env: Environment | None = None

    # -- Route registration --

    def route(
        self,
        pattern: str,
        *,
        method: str = "GET",
        name: str = "",
        trailing_slash: bool = False,
        fall_through: bool = False,
        before: Sequence[Handler] = (),
        after: Sequence[Handler] = (),
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator.

        Args:
            pattern: URL pattern. ``:name`` captures one segment,
                ``:name*`` captures the rest of the path.
            method: HTTP method. Defaults to ``"GET"``.
            name: Informational label, reported in diagnostics.
            trailing_slash: Also match the path with a trailing ``/``.
            fall_through: Keep running the remaining handlers after the
                response is committed (their writes are discarded).
            before: Handlers that run ahead of the decorated one.
            after: Handlers that run after the decorated one.
        """

        def decorator(func: Handler) -> Handler:
            self.add_route(
                pattern,
                *before,
                func,
                *after,
                method=method,
                name=name,
                trailing_slash=trailing_slash,
                fall_through=fall_through,
            )
            return func

        return decorator

    def add_route(
        self,
        pattern: str | RouteSpec,
        *handlers: Handler,
        method: str = "GET",
        name: str = "",
        trailing_slash: bool = False,
        fall_through: bool = False,
    ) -> None:
        """Register a route with an ordered handler chain.

        Accepts either a ready ``RouteSpec`` or a pattern plus handlers.
        """
        self._check_not_frozen()
        if isinstance(pattern, RouteSpec):
            self._pending_routes.append(pattern)
            return
        self._pending_routes.append(
            RouteSpec(
                pattern=pattern,
                handlers=handlers,
                method=method.upper(),
                name=name,
                trailing_slash=trailing_slash,
                fall_through=fall_through,
            )
        )

    def not_found(self, func: Handler) -> Handler:
        """Replace the default 404 handler via decorator."""
        self._check_not_frozen()
        self._not_found = func
        return func

    # -- Middleware --

    def add_middleware(self, middleware: Middleware) -> None:
        """Add a middleware layer.

        The last middleware added is the outermost: it sees each request
        first and the response last.
        """
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync startup hook via decorator.

        Hooks run in registration order during ASGI lifespan startup,
        before the server begins accepting HTTP requests.
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync shutdown hook via decorator.

        Hooks run in registration order during ASGI lifespan shutdown and
        share one ``config.shutdown_timeout`` budget. A hook that raises or
        overruns reports ``lifespan.shutdown.failed``.
        """
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Compiled state --

    @property
    def table(self) -> RouteTable:
        """The compiled route table. Freezes the app if needed."""
        self._ensure_frozen()
        assert self._table is not None
        return self._table

    @property
    def diagnostics(self) -> tuple[RouteDiagnostic, ...]:
        """Non-fatal routing problems found while building the table."""
        return self.table.diagnostics

    @property
    def templates(self) -> Environment:
        """The kida environment used by ``wren.responses.render``."""
        self._ensure_frozen()
        assert self._kida_env is not None
        return self._kida_env

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Compile the app and serve it until interrupted."""
        from wren.server.runner import run_server

        run_server(self, host or self.config.host, port or self.config.port)

    # -- Serving --

    async def serve(self, writer: ResponseWriter, request: Request) -> None:
        """Serve one request: the head of the middleware chain."""
        self._ensure_frozen()
        assert self._serve is not None
        await self._serve(writer, request)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles lifespan scopes directly, then serves HTTP scopes through
        the middleware chain and dispatcher. Exceptions raised by handlers
        propagate to the server.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return
        if scope["type"] != "http":
            return

        request = Request.from_asgi(scope, receive)
        writer = ASGIResponseWriter(send)
        token = request_var.set(request)
        try:
            await self.serve(writer, request)
        finally:
            request_var.reset(token)
        await writer.finish()

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup, so routing errors are reported as a
        failed startup instead of on the first request.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                    for hook in self._startup_hooks:
                        await invoke(hook)
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                try:
                    async with asyncio.timeout(self.config.shutdown_timeout):
                        for hook in self._shutdown_hooks:
                            await invoke(hook)
                except TimeoutError:
                    msg = f"Shutdown hooks did not finish within {self.config.shutdown_timeout}s"
                    logger.error(msg)
                    await send({"type": "lifespan.shutdown.failed", "message": msg})
                    return
                except Exception as exc:
                    logger.exception("Shutdown hook failed")
                    await send({"type": "lifespan.shutdown.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        # 1. Compile and validate the route table (raises on fatal errors)
        table = build_table(self._pending_routes)

        # 2. Innermost layer: the dispatcher
        dispatcher = Dispatcher(table, not_found=self._not_found, state=self.state)

        # 3. Compose middleware once; the result is never rebound
        serve = compose(tuple(self._middleware_list), dispatcher)

        # 4. Template environment
        kida_env = self._custom_kida_env or create_environment(self.config)

        self._table = table
        self._dispatcher = dispatcher
        self._serve = serve
        self._kida_env = kida_env
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes, middleware, and hooks before calling app.run()."
            )
            raise RuntimeError(msg)
