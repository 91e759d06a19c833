"""Shared fixtures: an ASGI send recorder and a writer bound to it."""

from typing import Any

import pytest

from wren.http.writer import ASGIResponseWriter


class SendRecorder:
    """Collects the ASGI messages an ``ASGIResponseWriter`` emits."""

    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []

    async def __call__(self, message: dict[str, Any]) -> None:
        self.messages.append(message)

    @property
    def starts(self) -> list[dict[str, Any]]:
        return [m for m in self.messages if m["type"] == "http.response.start"]

    @property
    def status(self) -> int | None:
        starts = self.starts
        return starts[0]["status"] if starts else None

    @property
    def headers(self) -> dict[str, str]:
        starts = self.starts
        if not starts:
            return {}
        return {k.decode("latin-1"): v.decode("latin-1") for k, v in starts[0]["headers"]}

    @property
    def body(self) -> bytes:
        return b"".join(
            m.get("body", b"") for m in self.messages if m["type"] == "http.response.body"
        )


@pytest.fixture
def recorder() -> SendRecorder:
    return SendRecorder()


@pytest.fixture
def writer(recorder: SendRecorder) -> ASGIResponseWriter:
    return ASGIResponseWriter(recorder)


