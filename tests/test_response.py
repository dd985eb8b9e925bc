"""Tests for sparrow.http.response — status/json/send helpers."""

import asyncio
import json

import pytest

from sparrow.errors import ResponseAlreadySent
from sparrow.http.response import Response


class _Recorder:
    def __init__(self) -> None:
        self.messages: list[dict] = []

    async def __call__(self, message: dict) -> None:
        self.messages.append(message)


class TestStatus:
    def test_default_200(self) -> None:
        assert Response().status_code == 200

    def test_chaining_returns_same_object(self) -> None:
        res = Response()
        assert res.status(201) is res
        assert res.status_code == 201


class TestJson:
    def test_sets_content_type_and_body(self) -> None:
        res = Response()
        res.json({"message": "Hello World!"})

        assert res.finished
        assert res.status_code == 200
        assert res.content_type == "application/json"
        assert json.loads(res.body) == {"message": "Hello World!"}

    def test_status_then_json(self) -> None:
        res = Response()
        res.status(500).json({"error": "x"})

        assert res.status_code == 500
        assert res.body == b'{"error":"x"}'

    def test_non_ascii_unescaped(self) -> None:
        res = Response()
        res.json({"name": "Jürgen"})
        assert res.body == '{"name":"Jürgen"}'.encode()

    def test_list_payload(self) -> None:
        res = Response()
        res.json([{"id": 1}, {"id": 2}])
        assert res.body == b'[{"id":1},{"id":2}]'

    def test_unserializable_raises(self) -> None:
        res = Response()
        with pytest.raises(TypeError):
            res.json({"when": object()})
        assert not res.finished


class TestSend:
    def test_text(self) -> None:
        res = Response()
        res.send("Route not found")

        assert res.content_type == "text/plain"
        assert res.body == b"Route not found"

    def test_number_stringified(self) -> None:
        res = Response()
        res.send(42)
        assert res.body == b"42"

    def test_booleans_lowercase(self) -> None:
        res = Response()
        res.send(True)
        assert res.body == b"true"

        res = Response()
        res.send(False)
        assert res.body == b"false"

    def test_bytes_passthrough(self) -> None:
        res = Response()
        res.send(b"\x00raw")
        assert res.body == b"\x00raw"

    def test_none_rejected(self) -> None:
        res = Response()
        with pytest.raises(TypeError):
            res.send(None)  # type: ignore[arg-type]


class TestSingleCommit:
    def test_second_json_raises(self) -> None:
        res = Response()
        res.json({"a": 1})
        with pytest.raises(ResponseAlreadySent):
            res.json({"a": 2})
        assert res.body == b'{"a":1}'

    def test_send_after_json_raises(self) -> None:
        res = Response()
        res.json({"a": 1})
        with pytest.raises(ResponseAlreadySent):
            res.send("late")

    def test_header_after_finish_raises(self) -> None:
        res = Response()
        res.send("done")
        with pytest.raises(ResponseAlreadySent):
            res.header("x-late", "1")


class TestFlush:
    async def test_writes_asgi_messages(self) -> None:
        send = _Recorder()
        res = Response(send)
        res.header("X-Request-Id", "abc").status(201).json({"id": 7})
        await res.flush()

        start, body = send.messages
        assert start["type"] == "http.response.start"
        assert start["status"] == 201
        headers = dict(start["headers"])
        assert headers[b"content-type"] == b"application/json"
        assert headers[b"x-request-id"] == b"abc"
        assert body == {"type": "http.response.body", "body": b'{"id":7}'}

    async def test_flush_is_idempotent(self) -> None:
        send = _Recorder()
        res = Response(send)
        res.send("once")
        await res.flush()
        await res.flush()
        assert len(send.messages) == 2

    async def test_unfinished_flushes_empty(self) -> None:
        send = _Recorder()
        res = Response(send)
        res.status(202)
        await res.flush()

        start, body = send.messages
        assert start["status"] == 202
        assert b"content-type" not in dict(start["headers"])
        assert body["body"] == b""

    async def test_json_starts_writing_without_flush(self) -> None:
        send = _Recorder()
        res = Response(send)
        res.json({"ok": True})
        await asyncio.sleep(0)

        assert [m["type"] for m in send.messages] == [
            "http.response.start",
            "http.response.body",
        ]
        await res.flush()
        assert len(send.messages) == 2
