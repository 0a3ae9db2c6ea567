"""Render engine: drives one page handler through one request.

State machine::

    init ──> error ───────────────> render_error ──> flush
      │ ──> raw bytes / Response ─> write as-is
      │ ──> status sentinel ──────> bare status
      v
    action check ──(?action=name)──> action()
      │                                 │ ──> error ─────> render_error ──> flush
      │                                 │ ──> Location ──> meta refresh ──> flush
      v                                 v
    body: header(stack), display(), footer(stack) ──────────────────────> flush

The refresh step is what keeps a browser reload from repeating a side
effect: the client is sent to the same page with ``action`` stripped
from the query.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from goodie._internal.invoke import invoke
from goodie.errors import HTTPError
from goodie.html.document import Document, default_css
from goodie.html.elements import MetaRefresh
from goodie.http.forms import FormData
from goodie.http.request import Request
from goodie.http.response import Response
from goodie.location import Location
from goodie.page import Handler

if TYPE_CHECKING:
    from goodie.app import App

logger = logging.getLogger("goodie.server")

# Query parameter that triggers Handler.action()
ACTION_PARAM = "action"

# Class names applied to the document body
BODY_CLASS = "goodiebody"


@dataclass(slots=True)
class RenderContext:
    """Per-request render state. Never shared between requests."""

    request: Request
    doc: Document
    form: FormData
    app: App | None = None
    default_location: Location | None = None

    @property
    def base_path(self) -> str:
        """Path prefix of the owning application (``""`` for none)."""
        return self.app.base_path if self.app is not None else ""


async def create_context(request: Request, app: App | None = None) -> RenderContext:
    """Parse the form body and build a fresh document shell."""
    form = await request.form()
    doc = Document()
    doc.add_css(default_css())
    return RenderContext(request=request, doc=doc, form=form, app=app)


async def render_request(handler: Handler, request: Request, app: App | None = None) -> Response:
    """Render *handler* for *request*. Entry point for the dispatcher."""
    ctx = await create_context(request, app)
    return await render_page(handler, ctx)


async def render_page(handler: Handler, ctx: RenderContext) -> Response:
    """Run the page lifecycle and return the response to send.

    Every response produced here carries no-cache headers.
    """
    handler.bind(ctx)

    try:
        result = await invoke(handler.init)
    except HTTPError as exc:
        return _status_response(exc)
    except Exception as exc:
        return await _error_page(handler, ctx, exc)

    if isinstance(result, Response):
        return result.without_caching()
    if isinstance(result, (bytes, bytearray)):
        return Response(body=bytes(result), content_type="application/octet-stream").without_caching()

    stack: Sequence[Location] = list(result) if result is not None else []
    topurl = stack[-1] if stack else None
    ctx.default_location = topurl if topurl is not None else Location.from_request(ctx.request)

    name = ctx.default_location.get_query(ACTION_PARAM)
    if name:
        try:
            refresh = await invoke(handler.action, name)
        except HTTPError as exc:
            return _status_response(exc)
        except Exception as exc:
            return await _error_page(handler, ctx, exc)
        if refresh is not None:
            return _refresh_response(ctx, refresh)

    ctx.doc.body().add_class_name(BODY_CLASS)

    if not ctx.doc.head.title and topurl is not None:
        ctx.doc.head.add_title(topurl.name)

    try:
        await invoke(handler.header, stack)
        await invoke(handler.display)
        await invoke(handler.footer, stack)
    except HTTPError as exc:
        return _status_response(exc)

    return _document_response(ctx.doc)


async def _error_page(handler: Handler, ctx: RenderContext, exc: Exception) -> Response:
    """Terminal error path: the handler renders *exc* into a fresh body."""
    logger.info("%s %s failed: %s", ctx.request.method, ctx.request.path, exc)
    ctx.doc.body().add_class_name(BODY_CLASS)
    try:
        await invoke(handler.render_error, exc)
    except HTTPError as status:
        return _status_response(status)
    return _document_response(ctx.doc)


def _refresh_response(ctx: RenderContext, refresh: Location) -> Response:
    """A bodyless document that reloads *refresh* without the action."""
    target = refresh.copy().del_query(ACTION_PARAM)
    logger.debug("refresh %s -> %s", ctx.request.url, target.link())
    ctx.doc.head.add(MetaRefresh(0, target.link()))
    return _document_response(ctx.doc)


def _status_response(exc: HTTPError) -> Response:
    return Response(body=b"", status=exc.status).without_caching()


def _document_response(doc: Document) -> Response:
    return Response(body=doc.to_bytes()).without_caching()
