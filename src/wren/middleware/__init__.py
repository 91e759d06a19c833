"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(writer: ResponseWriter, request: Request, next: Next) -> None

Built-in middleware:
    AccessLog -- one log line per request
    Recover -- convert escaped exceptions into 500 responses
"""

from wren.middleware.builtin import AccessLog, Recover
from wren.middleware.protocol import Middleware, Next, compose

__all__ = [
    "AccessLog",
    "Middleware",
    "Next",
    "Recover",
    "compose",
]
