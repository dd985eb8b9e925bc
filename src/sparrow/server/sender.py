"""ASGI response sending — turns a committed response into ASGI messages."""

from collections.abc import Iterable

from sparrow._internal.asgi import Send


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


async def send_response(
    send: Send,
    *,
    status: int,
    content_type: str | None,
    body: bytes,
    headers: Iterable[tuple[str, str]] = (),
) -> None:
    """Emit ``http.response.start`` and a single ``http.response.body``."""
    raw_headers: list[tuple[bytes, bytes]] = []
    if content_type is not None:
        raw_headers.append((b"content-type", content_type.encode("latin-1")))
    for name, value in headers:
        raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))

    if not _body_allowed(status):
        body = b""
    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": body,
        }
    )
