"""ASGI handler: translates ASGI scope/messages to goodie types.

Builds a Request from the scope, resolves the registered page for the
path, renders it, and sends the Response back through ASGI ``send()``.
"""

import logging
import traceback

from goodie._internal.asgi import Receive, Scope, Send
from goodie.http.request import Request
from goodie.http.response import Response
from goodie.routing.registry import Registry
from goodie.server.render import render_request
from goodie.server.sender import send_response

logger = logging.getLogger("goodie.server")

FAVICON_PATH = "/favicon.ico"


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    registry: Registry,
    favicon: bytes | None = None,
    debug: bool = False,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    logger.debug("Request: %s %s", request.method, request.path)

    try:
        response = await dispatch(request, registry=registry, favicon=favicon)
    except Exception as exc:
        response = handle_internal_error(exc, request, debug)

    await send_response(response, send)


async def dispatch(
    request: Request,
    *,
    registry: Registry,
    favicon: bytes | None = None,
) -> Response:
    """Resolve *request* to a page and render it.

    A miss serves the favicon when one is configured for
    ``/favicon.ico``; anything else is a bare 404.
    """
    registration = registry.lookup(request.path)
    if registration is None:
        if favicon is not None and request.path == FAVICON_PATH:
            return Response(body=favicon, content_type="image/x-icon")
        logger.info("404 %s %r", request.method, request.path)
        return Response(body=b"", status=404)

    handler = registration.factory()
    return await render_request(handler, request, registration.app)


def handle_internal_error(exc: Exception, request: Request, debug: bool) -> Response:
    """Unexpected failures become a logged plain-text 500."""
    logger.exception("500 %s %s", request.method, request.path)
    if debug:
        body = "".join(traceback.format_exception(exc))
        return Response(body=body, status=500, content_type="text/plain; charset=utf-8")
    return Response(body="Internal Server Error", status=500, content_type="text/plain; charset=utf-8")
