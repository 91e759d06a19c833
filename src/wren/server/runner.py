"""Process entry point — serves a wren App with pounce.

Pounce takes an import string in ``pounce.run()``, but wren has a live
``App`` object, so ``pounce.Server`` is used directly with the ASGI
callable. TLS is enabled when both ``ssl_certfile`` and ``ssl_keyfile``
are configured.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from wren.errors import ConfigurationError

if TYPE_CHECKING:
    from wren.app import App

logger = logging.getLogger("wren.server")


def run_server(
    app: App,
    host: str,
    port: int,
    *,
    app_path: str | None = None,
) -> None:
    """Start a pounce server for *app* and block until it stops.

    Args:
        app: The wren App (frozen before the server starts, so routing
            errors surface before the socket is bound).
        host: Bind host address.
        port: Bind port number. ``config.https_port`` replaces it when
            TLS is enabled.
        app_path: Optional ``"module:attribute"`` import string. When
            provided in debug mode, pounce reimports the app on reload.
    """
    config = app.config
    if (config.ssl_certfile is None) != (config.ssl_keyfile is None):
        msg = "Both ssl_certfile and ssl_keyfile are required for HTTPS"
        raise ConfigurationError(msg)

    app._ensure_frozen()

    from pounce.config import ServerConfig
    from pounce.server import Server

    if config.tls_enabled and config.https_port is not None:
        port = config.https_port

    server_config = ServerConfig(
        host=host,
        port=port,
        workers=1 if config.debug else 0,
        reload=config.debug,
        log_level=config.log_level,
        keep_alive_timeout=config.read_timeout,
        request_timeout=config.write_timeout,
        ssl_certfile=config.ssl_certfile,
        ssl_keyfile=config.ssl_keyfile,
    )
    scheme = "https" if config.tls_enabled else "http"
    logger.info("%s server listening on %s:%d", scheme.upper(), host, port)
    server = Server(server_config, app, app_path=app_path)
    server.run()
