"""Tests for wren.http.writer — ASGI writer and write-once guard."""

from wren.http.writer import ASGIResponseWriter, GuardedWriter, ResponseState, ResponseWriter


class TestASGIResponseWriter:
    async def test_write_header(self, writer, recorder) -> None:
        writer.headers.set("X-Test", "1")
        await writer.write_header(201)
        assert recorder.status == 201
        assert recorder.headers["x-test"] == "1"
        assert writer.committed

    async def test_write_implies_200(self, writer, recorder) -> None:
        await writer.write("hello")
        assert recorder.status == 200
        assert recorder.headers["content-type"] == "text/plain; charset=utf-8"
        assert recorder.body == b"hello"

    async def test_explicit_content_type_kept(self, writer, recorder) -> None:
        writer.headers.set("Content-Type", "application/json")
        await writer.write(b"{}")
        assert recorder.headers["content-type"] == "application/json"

    async def test_second_header_ignored(self, writer, recorder) -> None:
        await writer.write_header(404)
        await writer.write_header(500)
        assert len(recorder.starts) == 1
        assert writer.status == 404

    async def test_no_body_for_204(self, writer, recorder) -> None:
        await writer.write_header(204)
        written = await writer.write("ignored")
        await writer.finish()
        assert written == 0
        assert recorder.body == b""

    async def test_finish_without_writes_sends_empty_200(self, writer, recorder) -> None:
        await writer.finish()
        assert recorder.status == 200
        assert recorder.body == b""
        assert recorder.messages[-1] == {
            "type": "http.response.body",
            "body": b"",
            "more_body": False,
        }

    async def test_finish_once(self, writer, recorder) -> None:
        await writer.write("x")
        await writer.finish()
        await writer.finish()
        closing = [m for m in recorder.messages if m.get("more_body") is False]
        assert len(closing) == 1

    def test_satisfies_protocol(self, writer) -> None:
        assert isinstance(writer, ResponseWriter)


class TestGuardedWriter:
    async def test_starts_pending(self, writer) -> None:
        guard = GuardedWriter(writer)
        assert guard.state is ResponseState.PENDING
        assert not guard.committed

    async def test_header_commits(self, writer, recorder) -> None:
        guard = GuardedWriter(writer)
        await guard.write_header(418)
        assert guard.state is ResponseState.COMMITTED
        assert recorder.status == 418

    async def test_body_commits(self, writer) -> None:
        guard = GuardedWriter(writer)
        await guard.write("hi")
        assert guard.committed

    async def test_empty_write_does_not_commit(self, writer, recorder) -> None:
        guard = GuardedWriter(writer)
        assert await guard.write(b"") == 0
        assert not guard.committed
        assert recorder.messages == []

    async def test_header_after_commit_discarded(self, writer, recorder) -> None:
        guard = GuardedWriter(writer)
        await guard.write_header(200)
        await guard.write_header(500)
        assert len(recorder.starts) == 1
        assert guard.status == 200

    async def test_committing_handler_keeps_writing(self, writer, recorder) -> None:
        guard = GuardedWriter(writer)
        await guard.write_header(200)
        await guard.write("a")
        await guard.write("b")
        assert recorder.body == b"ab"

    async def test_sealed_discards_writes(self, writer, recorder) -> None:
        guard = GuardedWriter(writer)
        await guard.write("first")
        guard.seal()
        assert await guard.write("second") == 0
        assert recorder.body == b"first"

    async def test_seal_while_pending_is_noop(self, writer, recorder) -> None:
        guard = GuardedWriter(writer)
        guard.seal()
        await guard.write("late but first")
        assert recorder.body == b"late but first"

    async def test_already_committed_inner(self, writer, recorder) -> None:
        await writer.write_header(503)
        guard = GuardedWriter(writer)
        assert guard.committed
        await guard.write("nope")
        assert recorder.body == b""

    async def test_headers_shared_with_inner(self, writer) -> None:
        guard = GuardedWriter(writer)
        guard.headers.set("X-A", "1")
        assert writer.headers.get("x-a") == "1"

    async def test_unawaited_writes_queue_until_flush(self, writer, recorder) -> None:
        guard = GuardedWriter(writer)
        guard.write_header(202)
        guard.write("queued")
        assert guard.committed
        assert recorder.messages == []
        await guard.flush()
        assert recorder.status == 202
        assert recorder.body == b"queued"

    async def test_awaiting_flushes_earlier_writes(self, writer, recorder) -> None:
        guard = GuardedWriter(writer)
        guard.write_header(200)
        assert await guard.write("ab") == 2
        assert recorder.status == 200
        assert recorder.body == b"ab"

    def test_satisfies_protocol(self) -> None:
        guard = GuardedWriter(ASGIResponseWriter(lambda message: None))  # type: ignore[arg-type]
        assert isinstance(guard, ResponseWriter)
