"""Build the request/response view pair for one ASGI connection."""

from sparrow._internal.asgi import Receive, Scope, Send
from sparrow.http.request import Request
from sparrow.http.response import Response


def create_req_res(scope: Scope, receive: Receive, send: Send) -> tuple[Request, Response]:
    """Wrap a raw ASGI connection in a ``Request`` and a ``Response``.

    The request starts with empty ``params`` and ``body=None``; the
    dispatcher fills those in once the route is known.
    """
    return Request.from_asgi(scope, receive), Response(send)
