"""HTTP request view.

A frozen, composed view over one ASGI connection: the protocol fields
copied from the scope, plus the routing and parsing results the
dispatcher fills in (``params``, ``body``) and the database query
capability bound to the owning app.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from sparrow._internal.asgi import Receive, Scope
from sparrow.errors import ClientDisconnect, DatabaseNotConfigured
from sparrow.http.headers import Headers
from sparrow.http.query import QueryDict, parse_urlencoded

# Bound query capability: (sql, params) -> rows
QueryFn = Callable[[str, Sequence[Any] | None], Awaitable[list[dict[str, Any]]]]


@dataclass(frozen=True, slots=True)
class Request:
    """An incoming HTTP request, as seen by a handler.

    The dispatcher derives a new instance with ``dataclasses.replace()``
    at each step (params, body, query capability) instead of mutating.
    """

    method: str
    path: str
    query: QueryDict
    headers: Headers
    http_version: str
    server: tuple[str, int] | None
    client: tuple[str, int] | None
    params: dict[str, str] = field(default_factory=dict)
    body: Any = None

    # Raw ASGI scope, kept for anything not copied above
    scope: Scope = field(default_factory=dict, repr=False, compare=False)

    # Private: ASGI receive callable for body streaming
    _receive: Receive | None = field(default=None, repr=False, compare=False)

    # Private: database query capability bound by the dispatcher
    _query: QueryFn | None = field(default=None, repr=False, compare=False)

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value, verbatim."""
        return self.headers.get("content-type")

    @property
    def query_string(self) -> str:
        """The raw query string, without the leading ``?``."""
        return self.scope.get("query_string", b"").decode("latin-1")

    @property
    def url(self) -> str:
        """Path plus query string, as requested."""
        qs = self.query_string
        return f"{self.path}?{qs}" if qs else self.path

    # -- Body --

    async def stream(self) -> AsyncGenerator[bytes]:
        """Yield the request body in chunks as the server receives them.

        Raises ``ClientDisconnect`` if the client goes away mid-body.
        """
        if self._receive is None:
            return
        while True:
            message = await self._receive()
            if message["type"] == "http.disconnect":
                raise ClientDisconnect("Client disconnected while sending the request body")
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    # -- Database --

    async def db_query(
        self, sql: str, params: Sequence[Any] | None = None
    ) -> list[dict[str, Any]]:
        """Run *sql* with positional *params* on the app's database pool.

        Usage::

            rows = await req.db_query("SELECT * FROM users WHERE id = $1", [user_id])

        Raises ``DatabaseNotConfigured`` when the app has no database.
        Driver errors propagate unchanged.
        """
        if self._query is None:
            raise DatabaseNotConfigured
        return await self._query(sql, params)

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive | None = None) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            query=parse_urlencoded(scope.get("query_string", b"").decode("latin-1")),
            headers=Headers(tuple(scope.get("headers", ()))),
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            scope=scope,
            _receive=receive,
        )
