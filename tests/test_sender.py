"""Tests for sparrow.server.sender response emission rules."""

from sparrow.server.sender import send_response


class TestSendResponse:
    async def test_content_length_matches_body(self) -> None:
        messages: list[dict] = []

        async def send(message: dict) -> None:
            messages.append(message)

        await send_response(send, status=200, content_type="text/plain", body=b"ok")

        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"2"
        assert headers[b"content-type"] == b"text/plain"
        assert messages[1]["body"] == b"ok"

    async def test_204_drops_body(self) -> None:
        messages: list[dict] = []

        async def send(message: dict) -> None:
            messages.append(message)

        await send_response(send, status=204, content_type="text/plain", body=b"unexpected")

        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"0"
        assert messages[1]["body"] == b""

    async def test_header_names_lowercased(self) -> None:
        messages: list[dict] = []

        async def send(message: dict) -> None:
            messages.append(message)

        await send_response(
            send, status=200, content_type=None, body=b"", headers=[("X-Trace", "1")]
        )

        assert (b"x-trace", b"1") in messages[0]["headers"]
