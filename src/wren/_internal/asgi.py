"""Raw ASGI type aliases.

Only ``wren.app``, ``wren.http.request`` and ``wren.http.writer`` touch
ASGI messages directly; everything else works with ``Request`` and
``ResponseWriter``.
"""

from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any, TypeAlias

Message: TypeAlias = MutableMapping[str, Any]
Scope: TypeAlias = MutableMapping[str, Any]
Receive: TypeAlias = Callable[[], Awaitable[Message]]
Send: TypeAlias = Callable[[Message], Awaitable[None]]
