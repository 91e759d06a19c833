"""Immutable HTTP request.

Frozen metadata with async body access. The dispatcher attaches a
``RouteContext`` by creating an enriched copy, never by mutation.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from wren._internal.asgi import Receive, Scope
from wren.http.headers import Headers
from wren.http.query import QueryParams

if TYPE_CHECKING:
    from wren.context import RouteContext

# RFC 3986 sub-delims plus ":" and "@" stay literal in an escaped path
_PATH_SAFE = "/:@!$&'()*+,;=~"


async def _empty_receive() -> dict[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path`` is the decoded path; ``raw_path`` keeps percent-escapes and
    is what routes are matched against, so captured parameters arrive
    still escaped. ``context`` is ``None`` until a route has matched.
    """

    method: str
    path: str
    raw_path: str
    headers: Headers = field(default_factory=Headers)
    query: QueryParams = field(default_factory=QueryParams)
    http_version: str = "1.1"
    server: tuple[str, int] | None = None
    client: tuple[str, int] | None = None
    context: RouteContext | None = None

    # Private: ASGI receive callable for body streaming
    _receive: Receive = field(default=_empty_receive, repr=False, compare=False)

    # Private: mutable cache for the body, shared between enriched copies
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def url(self) -> str:
        """Request path plus query string."""
        if self.query.raw:
            return f"{self.path}?{self.query.raw.decode('latin-1')}"
        return self.path

    @property
    def params(self) -> dict[str, str]:
        """Path parameters of the matched route (empty before matching)."""
        if self.context is None:
            return {}
        return dict(self.context.params)

    def with_context(self, context: RouteContext) -> Request:
        """Return a copy of this request carrying *context*."""
        return replace(self, context=context)

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        The ASGI receive channel is consumed once; later calls (and
        enriched copies of this request) get the cached bytes.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def json(self) -> Any:
        """Parse the body as JSON."""
        return json_module.loads(await self.body())

    async def text(self) -> str:
        """Read the body as UTF-8 text."""
        raw = await self.body()
        return raw.decode("utf-8")

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        path = scope["path"]
        raw_path = scope.get("raw_path")
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=path,
            raw_path=raw_path.decode("latin-1") if raw_path else quote(path, safe=_PATH_SAFE),
            headers=Headers(scope.get("headers", ())),
            query=QueryParams(scope.get("query_string", b"")),
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            _receive=receive,
        )
