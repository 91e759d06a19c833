"""HTTP primitives: Request, headers, query params, and response writers."""

from wren.http.headers import Headers, MutableHeaders
from wren.http.query import QueryParams
from wren.http.request import Request
from wren.http.writer import (
    ASGIResponseWriter,
    GuardedWriter,
    PendingWrite,
    ResponseState,
    ResponseWriter,
)

__all__ = [
    "ASGIResponseWriter",
    "GuardedWriter",
    "Headers",
    "MutableHeaders",
    "PendingWrite",
    "QueryParams",
    "Request",
    "ResponseState",
    "ResponseWriter",
]
