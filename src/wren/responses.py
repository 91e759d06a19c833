"""Response helpers — JSON envelopes, plain sends, and template rendering.

Thin functions over a ``ResponseWriter``; the router core never calls
them. JSON bodies use a fixed envelope::

    {"data": ..., "status": 200}      # send_json / r200 ...
    {"errors": ..., "status": 404}    # send_error / r403 ...

Usage::

    async def show_user(writer, request):
        user = await load(request.params["id"])
        await r200(writer, user)
"""

import json
import logging
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any, Protocol

from wren.http.writer import ResponseWriter

logger = logging.getLogger("wren.server")

JSON_CONTENT_TYPE = "application/json"
HTML_CONTENT_TYPE = "text/html; charset=utf-8"
ERR_INTERNAL_SERVER = "Internal server error"
NOT_FOUND_DESCRIPTION = "Sorry, the URL you requested was not found on this server."


class Renderable(Protocol):
    """Anything with a kida-style ``render(context)`` method."""

    def render(self, *args: Any, **kwargs: Any) -> str: ...


@dataclass(frozen=True, slots=True)
class ErrorData:
    """Template context for error pages."""

    error_code: int
    description: str


async def send_header(writer: ResponseWriter, status: int) -> None:
    """Commit the response with *status* and no body."""
    await writer.write_header(status)


async def send(writer: ResponseWriter, content_type: str, data: Any, status: int) -> None:
    """Write ``str(data)`` with an explicit content type and status."""
    writer.headers.set("Content-Type", content_type)
    await writer.write_header(status)
    await writer.write(data if isinstance(data, bytes | str) else str(data))


async def _send_envelope(writer: ResponseWriter, key: str, payload: Any, status: int) -> None:
    try:
        body = json.dumps({key: payload, "status": status})
    except (TypeError, ValueError):
        logger.exception("Could not encode %s response", key)
        body = json.dumps({"errors": ERR_INTERNAL_SERVER, "status": 500})
        status = 500
    writer.headers.set("Content-Type", JSON_CONTENT_TYPE)
    await writer.write_header(status)
    await writer.write(body + "\n")


async def send_json(writer: ResponseWriter, data: Any, status: int) -> None:
    """Write *data* in a ``{"data", "status"}`` JSON envelope.

    Falls back to a 500 error envelope if *data* cannot be encoded.
    """
    await _send_envelope(writer, "data", data, status)


async def send_error(writer: ResponseWriter, errors: Any, status: int) -> None:
    """Write *errors* in an ``{"errors", "status"}`` JSON envelope."""
    await _send_envelope(writer, "errors", errors, status)


async def render(
    writer: ResponseWriter,
    template: Renderable,
    context: Mapping[str, Any] | None = None,
    status: int = 200,
) -> None:
    """Render a kida template as an HTML response.

    The template is rendered before anything is written, so a render
    error leaves the response uncommitted.
    """
    html = template.render(dict(context or {}))
    writer.headers.set("Content-Type", HTML_CONTENT_TYPE)
    await writer.write_header(status)
    await writer.write(html)


async def render_404(writer: ResponseWriter, template: Renderable) -> None:
    """Render the not-found page with ``error_code`` and ``description``."""
    await render(writer, template, asdict(ErrorData(404, NOT_FOUND_DESCRIPTION)), 404)


# -- Status shortcuts --


async def r200(writer: ResponseWriter, data: Any) -> None:
    await send_json(writer, data, 200)


async def r201(writer: ResponseWriter, data: Any) -> None:
    await send_json(writer, data, 201)


async def r204(writer: ResponseWriter, data: Any = None) -> None:
    # 204 carries no body; the envelope is dropped by the writer
    await send_json(writer, data, 204)


async def r302(writer: ResponseWriter, data: Any) -> None:
    await send_json(writer, data, 302)


async def r400(writer: ResponseWriter, data: Any) -> None:
    await send_json(writer, data, 400)


async def r403(writer: ResponseWriter, data: Any) -> None:
    await send_error(writer, data, 403)


async def r404(writer: ResponseWriter, data: Any) -> None:
    await send_error(writer, data, 404)


async def r406(writer: ResponseWriter, data: Any) -> None:
    await send_error(writer, data, 406)


async def r451(writer: ResponseWriter, data: Any) -> None:
    await send_error(writer, data, 451)


async def r500(writer: ResponseWriter, data: Any) -> None:
    await send_error(writer, data, 500)
