"""Wren — a declarative request router for ASGI.

Routes are declared up front, compiled once, and matched in declaration
order. Each route runs an ordered chain of handlers against a write-once
response writer.

Basic usage::

    from wren import App
    from wren.responses import r200

    app = App()

    @app.route("/users/:id", name="user")
    async def show_user(writer, request):
        await r200(writer, {"id": request.params["id"]})

    app.run()
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "AppState",
    "ConfigurationError",
    "HTTPError",
    "MethodNotAllowed",
    "Middleware",
    "Next",
    "NotFound",
    "Request",
    "ResponseWriter",
    "RouteContext",
    "RouteError",
    "RouteSpec",
    "StateKey",
    "WrenError",
    "get_context",
    "get_request",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name == "App":
        from wren.app import App

        return App

    if name == "AppConfig":
        from wren.config import AppConfig

        return AppConfig

    if name in ("Request", "ResponseWriter"):
        from wren import http as _http

        return getattr(_http, name)

    if name == "RouteSpec":
        from wren.routing.route import RouteSpec

        return RouteSpec

    if name in ("AppState", "StateKey"):
        from wren import state as _state

        return getattr(_state, name)

    if name in ("Middleware", "Next"):
        from wren.middleware import protocol as _mw

        return getattr(_mw, name)

    if name in ("RouteContext", "get_context", "get_request"):
        from wren import context as _ctx

        return getattr(_ctx, name)

    if name in (
        "ConfigurationError",
        "HTTPError",
        "MethodNotAllowed",
        "NotFound",
        "RouteError",
        "WrenError",
    ):
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
