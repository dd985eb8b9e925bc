"""Request body parsing.

Reads the whole body stream, then decodes it as JSON or as URL-encoded
form data depending on the request's Content-Type.
"""

import json
from collections.abc import AsyncIterable
from typing import Any

from sparrow.http.query import parse_urlencoded

JSON_CONTENT_TYPE = "application/json"


def _reject_constant(name: str) -> Any:
    # json.loads accepts NaN/Infinity by default; strict JSON does not
    msg = f"Invalid JSON constant: {name}"
    raise ValueError(msg)


def decode_body(raw: bytes, content_type: str | None) -> Any:
    """Decode an already-read body.

    - ``application/json`` (exact match, no parameters): strict JSON. A
      payload that fails to decode is returned as the raw text, unchanged.
    - anything else: URL-encoded form data as a ``dict``.
    """
    text = raw.decode("utf-8", errors="replace")
    if content_type == JSON_CONTENT_TYPE:
        try:
            return json.loads(text, parse_constant=_reject_constant)
        except ValueError:
            return text
    return parse_urlencoded(text)


async def parse_body(chunks: AsyncIterable[bytes], content_type: str | None) -> Any:
    """Consume every chunk of *chunks* and decode the result.

    There is no size cap and no timeout: the whole body is buffered, and a
    stalled stream keeps this coroutine waiting. Errors raised by the
    stream (e.g. ``ClientDisconnect``) propagate to the caller.
    """
    buffer = bytearray()
    async for chunk in chunks:
        buffer += chunk
    return decode_body(bytes(buffer), content_type)
