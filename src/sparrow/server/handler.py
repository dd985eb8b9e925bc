"""ASGI dispatcher — runs one HTTP request through match, parse, and invoke.

The only component that sees a raw ASGI connection end to end. Builds the
request/response views, resolves the route, parses POST bodies, binds the
database query capability, calls the handler, and writes whatever
response results: the handler's own, a 404, or the catch-all 500.
"""

import logging
from dataclasses import replace

from sparrow._internal.asgi import Receive, Scope, Send
from sparrow._internal.invoke import invoke
from sparrow.http.adapter import create_req_res
from sparrow.http.body import parse_body
from sparrow.http.request import QueryFn
from sparrow.routing.router import Router
from sparrow.server.errors import internal_error, not_found

logger = logging.getLogger("sparrow.server")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    query: QueryFn,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request, response = create_req_res(scope, receive, send)

    try:
        match = router.match(request.method, request.path)
        if match is None:
            not_found(request, response)
        else:
            request = replace(request, params=match.params)

            if request.method == "POST":
                body = await parse_body(request.stream(), request.content_type)
                request = replace(request, body=body)

            request = replace(request, _query=query)

            await invoke(match.handler, request, response)

            if not response.finished:
                logger.warning(
                    "Handler for %s %s returned without calling json() or send()",
                    request.method,
                    match.route.path,
                )
    except Exception:
        response = internal_error(request, response, send)

    await response.flush()
