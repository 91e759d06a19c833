"""Built-in middleware: access logging and panic recovery.

Neither is installed by default; add them with ``app.add_middleware``.
Register ``Recover`` last so it wraps everything else, including
``AccessLog``.
"""

import logging
import time
from dataclasses import dataclass

from wren.errors import HTTPError
from wren.http.request import Request
from wren.http.writer import ResponseWriter
from wren.middleware.protocol import Next
from wren.server.errors import write_http_error

logger = logging.getLogger("wren.server")


@dataclass(frozen=True, slots=True)
class AccessLog:
    """Log one line per request: method, path, status, and duration.

    Requests that end without writing anything are logged with status
    ``-``.
    """

    logger: logging.Logger = logging.getLogger("wren.access")
    level: int = logging.INFO

    async def __call__(self, writer: ResponseWriter, request: Request, next: Next) -> None:
        start = time.perf_counter()
        try:
            await next(writer, request)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            status = writer.status if writer.status is not None else "-"
            self.logger.log(
                self.level, "%s %s %s %.1fms", request.method, request.url, status, elapsed_ms
            )


class Recover:
    """Turn an exception escaping the chain into a 500 response.

    The exception is logged with its traceback. If a handler already
    committed the response, only the log entry is produced.
    """

    __slots__ = ()

    async def __call__(self, writer: ResponseWriter, request: Request, next: Next) -> None:
        try:
            await next(writer, request)
        except Exception:
            logger.exception("500 %s %s", request.method, request.path)
            await write_http_error(writer, HTTPError(500, "Internal Server Error"))
