"""HTTP response view.

Wraps the ASGI ``send`` channel of one connection with ``status()``,
``json()``, and ``send()`` helpers. ``json()`` and ``send()`` commit the
response and start writing it to the wire at once, so the client gets
its answer even while the handler keeps running. The dispatcher awaits
that write once the handler returns.
"""

from __future__ import annotations

import asyncio
import json as json_module
from typing import Any

from sparrow._internal.asgi import Send
from sparrow.errors import ResponseAlreadySent
from sparrow.server.sender import send_response

JSON_CONTENT_TYPE = "application/json"
TEXT_CONTENT_TYPE = "text/plain"


class Response:
    """A writable HTTP response, as seen by a handler.

    ``status()`` returns the response itself, so calls chain::

        res.status(201).json({"id": 7})
        res.status(404).send("No such user")

    Exactly one of ``json()``/``send()`` may commit the response; a second
    call raises ``ResponseAlreadySent``.
    """

    __slots__ = (
        "_body",
        "_content_type",
        "_finished",
        "_flush_task",
        "_headers",
        "_send",
        "_sent",
        "_status",
    )

    def __init__(self, send: Send | None = None) -> None:
        self._send = send
        self._status = 200
        self._content_type: str | None = None
        self._headers: list[tuple[str, str]] = []
        self._body = b""
        self._finished = False
        self._sent = False
        self._flush_task: asyncio.Task[None] | None = None

    def __repr__(self) -> str:
        state = "finished" if self._finished else "open"
        return f"<Response {self._status} {self._content_type or '-'} {state}>"

    # -- Handler API --

    def status(self, code: int) -> Response:
        """Set the status code and return this response for chaining."""
        self._status = int(code)
        return self

    def header(self, name: str, value: str) -> Response:
        """Add a response header and return this response for chaining."""
        self._check_open()
        self._headers.append((name, value))
        return self

    def json(self, data: Any) -> None:
        """Serialize *data* as compact JSON and finish the response."""
        self._check_open()
        payload = json_module.dumps(data, separators=(",", ":"), ensure_ascii=False)
        self._finish(JSON_CONTENT_TYPE, payload.encode("utf-8"))

    def send(self, data: str | bytes | int | float) -> None:
        """Send *data* as plain text and finish the response.

        ``bytes`` are written as-is and booleans as ``true``/``false``;
        anything else is converted with ``str()``. ``None`` is rejected.
        """
        self._check_open()
        if data is None:
            msg = "send() requires data, got None"
            raise TypeError(msg)
        if isinstance(data, bytes):
            body = data
        elif isinstance(data, bool):
            body = b"true" if data else b"false"
        else:
            body = str(data).encode("utf-8")
        self._finish(TEXT_CONTENT_TYPE, body)

    # -- Inspection --

    @property
    def status_code(self) -> int:
        return self._status

    @property
    def content_type(self) -> str | None:
        return self._content_type

    @property
    def headers(self) -> tuple[tuple[str, str], ...]:
        return tuple(self._headers)

    @property
    def body(self) -> bytes:
        return self._body

    @property
    def finished(self) -> bool:
        """True once ``json()`` or ``send()`` has committed the response."""
        return self._finished

    # -- Transport --

    async def flush(self) -> None:
        """Make sure the response has reached the ASGI channel.

        Waits for the write started by ``json()``/``send()`` and re-raises
        its error, if any. An uncommitted response is written as-is.
        Later calls are no-ops.
        """
        if self._flush_task is not None:
            await self._flush_task
            return
        await self._write()

    async def _write(self) -> None:
        if self._sent or self._send is None:
            return
        self._sent = True
        await send_response(
            self._send,
            status=self._status,
            content_type=self._content_type,
            body=self._body,
            headers=self._headers,
        )

    def _finish(self, content_type: str, body: bytes) -> None:
        self._content_type = content_type
        self._body = body
        self._finished = True
        if self._send is not None and self._flush_task is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                # No loop (built outside a request): flush() writes it later
                return
            self._flush_task = loop.create_task(self._write())

    def _check_open(self) -> None:
        if self._finished:
            msg = "Response already finished; json()/send() may only be called once."
            raise ResponseAlreadySent(msg)
