"""Response writers — the mutable response sink handlers write to.

``ASGIResponseWriter`` turns ``write_header`` / ``write`` calls into
ASGI ``http.response.*`` messages. ``GuardedWriter`` wraps any writer
and enforces at-most-one response per request:

- The first status line or body byte commits the response.
- Status writes after the commit are discarded.
- Once the dispatcher seals the writer (after the committing handler
  returns), every further write is discarded.

Discarded writes never raise; they are logged at debug level. Handlers
may call ``write_header`` / ``write`` without awaiting them (a plain
``def`` handler); the dispatcher flushes those writes when it returns.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Generator
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from wren._internal.asgi import Send
from wren.http.headers import MutableHeaders

logger = logging.getLogger("wren.server")

DEFAULT_CONTENT_TYPE = "text/plain; charset=utf-8"


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


class ResponseState(Enum):
    PENDING = "pending"
    COMMITTED = "committed"


@runtime_checkable
class ResponseWriter(Protocol):
    """What a handler can do to the response.

    Accepts any object with this shape; no base class required.
    """

    @property
    def headers(self) -> MutableHeaders: ...

    @property
    def status(self) -> int | None: ...

    @property
    def committed(self) -> bool: ...

    async def write_header(self, status: int) -> None: ...

    async def write(self, data: bytes | str) -> int: ...


class ASGIResponseWriter:
    """Writes a response to an ASGI ``send`` callable.

    Headers are sent with the first ``write_header`` or ``write`` call;
    body chunks are streamed with ``more_body=True`` and ``finish()``
    closes the stream.
    """

    __slots__ = ("_finished", "_send", "_status", "headers")

    def __init__(self, send: Send) -> None:
        self._send = send
        self._status: int | None = None
        self._finished = False
        self.headers = MutableHeaders()

    @property
    def status(self) -> int | None:
        return self._status

    @property
    def committed(self) -> bool:
        return self._status is not None

    async def write_header(self, status: int) -> None:
        if self._status is not None:
            logger.debug("superfluous write_header(%d) ignored", status)
            return
        self._status = status
        await self._send(
            {
                "type": "http.response.start",
                "status": status,
                "headers": self.headers.raw(),
            }
        )

    async def write(self, data: bytes | str) -> int:
        if self._finished:
            return 0
        if self._status is None:
            self.headers.setdefault("Content-Type", DEFAULT_CONTENT_TYPE)
            await self.write_header(200)
        body = data.encode("utf-8") if isinstance(data, str) else data
        if not body or not _body_allowed(self._status or 200):
            return 0
        await self._send({"type": "http.response.body", "body": body, "more_body": True})
        return len(body)

    async def finish(self) -> None:
        """Close the response.

        A request that never wrote anything gets the transport default:
        an empty ``200`` response.
        """
        if self._finished:
            return
        if self._status is None:
            self.headers.setdefault("Content-Length", "0")
            await self.write_header(200)
        self._finished = True
        await self._send({"type": "http.response.body", "body": b"", "more_body": False})


class PendingWrite:
    """Handle for a write queued on a ``GuardedWriter``.

    Awaiting it sends every queued write up to and including this one.
    A ``def`` handler can drop it; the dispatcher flushes the queue when
    the handler returns.
    """

    __slots__ = ("_result", "_writer")

    def __init__(self, writer: GuardedWriter, result: int) -> None:
        self._writer = writer
        self._result = result

    def __await__(self) -> Generator[Any, None, int]:
        yield from self._writer.flush().__await__()
        return self._result


class GuardedWriter:
    """Write-once wrapper around another ``ResponseWriter``.

    Holds the per-request response state. ``write_header`` and ``write``
    update that state immediately and queue the actual write, so a plain
    ``def`` handler commits the response just by calling them. The queue
    reaches the wrapped writer when a ``PendingWrite`` is awaited or when
    ``flush()`` runs.
    """

    __slots__ = ("_inner", "_queue", "_sealed", "_state")

    def __init__(self, inner: ResponseWriter) -> None:
        self._inner = inner
        self._queue: deque[int | bytes | str] = deque()
        # A response already started upstream (e.g. by middleware) is final
        self._sealed = inner.committed
        self._state = ResponseState.COMMITTED if inner.committed else ResponseState.PENDING

    @property
    def headers(self) -> MutableHeaders:
        return self._inner.headers

    @property
    def status(self) -> int | None:
        return self._inner.status

    @property
    def state(self) -> ResponseState:
        return self._state

    @property
    def committed(self) -> bool:
        return self._state is ResponseState.COMMITTED

    def seal(self) -> None:
        """Reject every later write if the response has been committed."""
        if self.committed:
            self._sealed = True

    def write_header(self, status: int) -> PendingWrite:
        if self.committed:
            logger.debug("write_header(%d) after commit discarded", status)
            return PendingWrite(self, 0)
        self._state = ResponseState.COMMITTED
        self._queue.append(status)
        return PendingWrite(self, 0)

    def write(self, data: bytes | str) -> PendingWrite:
        if self._sealed:
            logger.debug("write of %d bytes after commit discarded", len(data))
            return PendingWrite(self, 0)
        if not data:
            return PendingWrite(self, 0)
        self._state = ResponseState.COMMITTED
        self._queue.append(data)
        return PendingWrite(self, len(data.encode("utf-8") if isinstance(data, str) else data))

    async def flush(self) -> None:
        """Send queued writes to the wrapped writer, in call order."""
        while self._queue:
            item = self._queue.popleft()
            if isinstance(item, int):
                await self._inner.write_header(item)
            else:
                await self._inner.write(item)
