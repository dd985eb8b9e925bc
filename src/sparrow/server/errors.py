"""Fallback responses for requests the handler could not answer.

Two outcomes live here: no route matched (404, plain text), and an
uncaught exception escaped matching, body parsing, or the handler (500,
generic JSON). Error detail goes to the log, never to the client.
"""

import logging

from sparrow._internal.asgi import Send
from sparrow.http.request import Request
from sparrow.http.response import Response

logger = logging.getLogger("sparrow.server")

NOT_FOUND_BODY = "Route not found"
INTERNAL_ERROR_BODY = {"error": "Internal server error"}


def not_found(request: Request, response: Response) -> None:
    """Commit the 404 response for an unmatched route."""
    logger.debug("404 %s %s", request.method, request.path)
    response.status(404).send(NOT_FOUND_BODY)


def internal_error(request: Request, response: Response, send: Send) -> Response:
    """Log the active exception and return the response to emit.

    If the handler already committed a response before failing, that
    response stands, since it cannot be replaced. Otherwise a fresh 500
    response is built on the same channel.
    """
    logger.exception("500 %s %s", request.method, request.path)
    if response.finished:
        return response
    fallback = Response(send)
    fallback.status(500).json(INTERNAL_ERROR_BODY)
    return fallback
