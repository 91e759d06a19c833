"""Error responses written straight to a ``ResponseWriter``.

Used for the default not-found handler, unsupported methods, and the
``recover`` middleware. Handlers that want richer error bodies use
``wren.responses`` instead.
"""

import logging

from wren.errors import HTTPError
from wren.http.writer import ResponseWriter

logger = logging.getLogger("wren.server")


async def write_http_error(writer: ResponseWriter, exc: HTTPError, body: str | None = None) -> None:
    """Write *exc* as a plain-text response.

    Does nothing if the response has already been committed.
    """
    if writer.committed:
        logger.debug("%d not written, response already committed", exc.status)
        return
    for name, value in exc.headers:
        writer.headers.set(name, value)
    writer.headers.set("Content-Type", "text/plain; charset=utf-8")
    writer.headers.set("X-Content-Type-Options", "nosniff")
    await writer.write_header(exc.status)
    await writer.write((body if body is not None else exc.detail or str(exc.status)) + "\n")
