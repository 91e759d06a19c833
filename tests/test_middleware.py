"""Tests for wren.middleware — composition and built-in middleware."""

import logging

from wren.app import App
from wren.http.request import Request
from wren.middleware import AccessLog, Recover, compose
from wren.testing import TestClient


class TestCompose:
    async def test_no_middleware_returns_endpoint(self) -> None:
        async def endpoint(writer, request) -> None: ...

        assert compose((), endpoint) is endpoint

    async def test_sync_middleware(self, writer, recorder) -> None:
        calls: list[str] = []

        def sync_mw(writer, request, next):
            calls.append("sync")
            return next(writer, request)

        async def endpoint(writer, request) -> None:
            calls.append("endpoint")
            await writer.write("x")

        serve = compose([sync_mw], endpoint)
        await serve(writer, Request(method="GET", path="/", raw_path="/"))
        assert calls == ["sync", "endpoint"]
        assert recorder.body == b"x"

    async def test_class_middleware(self, writer, recorder) -> None:
        class Tag:
            async def __call__(self, writer, request, next) -> None:
                writer.headers.set("X-Tag", "yes")
                await next(writer, request)

        async def endpoint(writer, request) -> None:
            await writer.write("x")

        serve = compose([Tag()], endpoint)
        await serve(writer, Request(method="GET", path="/", raw_path="/"))
        assert recorder.headers["x-tag"] == "yes"


class TestAccessLog:
    async def test_logs_request_line(self, caplog) -> None:
        app = App()
        app.add_middleware(AccessLog())

        @app.route("/hello")
        async def hello(writer, request) -> None:
            await writer.write_header(202)

        with caplog.at_level(logging.INFO, logger="wren.access"):
            async with TestClient(app) as client:
                await client.get("/hello?x=1")

        [record] = [r for r in caplog.records if r.name == "wren.access"]
        assert record.message.startswith("GET /hello?x=1 202 ")
        assert record.message.endswith("ms")

    async def test_custom_logger_and_level(self, caplog) -> None:
        app = App()
        app.add_middleware(AccessLog(logger=logging.getLogger("myapp.http"), level=logging.DEBUG))
        with caplog.at_level(logging.DEBUG, logger="myapp.http"):
            async with TestClient(app) as client:
                await client.get("/missing")
        [record] = [r for r in caplog.records if r.name == "myapp.http"]
        assert record.levelno == logging.DEBUG
        assert " 404 " in record.message

    async def test_logs_uncommitted_as_dash(self, caplog) -> None:
        app = App()
        app.add_middleware(AccessLog())
        app.add_route("/", lambda w, r: None)
        with caplog.at_level(logging.INFO, logger="wren.access"):
            async with TestClient(app) as client:
                await client.get("/")
        [record] = [r for r in caplog.records if r.name == "wren.access"]
        assert " - " in record.message


class TestRecover:
    async def test_exception_becomes_500(self, caplog) -> None:
        app = App()
        app.add_middleware(Recover())

        @app.route("/boom")
        async def boom(writer, request) -> None:
            raise RuntimeError("kaput")

        with caplog.at_level(logging.ERROR, logger="wren.server"):
            async with TestClient(app) as client:
                response = await client.get("/boom")

        assert response.status == 500
        assert response.text == "Internal Server Error\n"
        assert any("500 GET /boom" in r.message for r in caplog.records)
        assert any(r.exc_info for r in caplog.records)

    async def test_committed_response_kept(self) -> None:
        app = App()
        app.add_middleware(Recover())

        @app.route("/partial")
        async def partial(writer, request) -> None:
            await writer.write_header(200)
            await writer.write("partial")
            raise RuntimeError("late")

        async with TestClient(app) as client:
            response = await client.get("/partial")
        assert response.status == 200
        assert response.text == "partial"

    async def test_no_exception_passthrough(self) -> None:
        app = App()
        app.add_middleware(Recover())
        app.add_route("/", lambda w, r: w.write("fine"))
        async with TestClient(app) as client:
            response = await client.get("/")
        assert response.text == "fine"
