"""Page handlers: the lifecycle every registered page goes through.

One handler instance serves exactly one request. The render engine
calls, in order::

    init()              -> breadcrumb stack, raw bytes/Response, or None
    action(name)        -> only when the query carries ?action=<name>
    header(stack)
    display()
    footer(stack)

``render_error(exc)`` replaces the last three when ``init`` or
``action`` raises.

Subclass ``Page`` and override only what you need::

    class UserList(Page):
        async def init(self):
            users = self.default_location()
            users.name = "Users"
            return [self.home_location(), users]

        async def action(self, name):
            if name == "delete":
                await crud.delete(self.db, User, int(self.request.query["id"]))
                return self.default_location()
            return None

        async def display(self):
            for user in await crud.find_by_order(self.db, User, "name"):
                self.body.add(Paragraph(user.name))

Every lifecycle method may be ``def`` or ``async def``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

from goodie.binding import bind_query
from goodie.html.elements import Div, Form, Hidden
from goodie.location import Location, breadcrumb_block

if TYPE_CHECKING:
    from goodie.app import App
    from goodie.data.database import Database
    from goodie.html.document import Body, Document
    from goodie.http.forms import FormData
    from goodie.http.request import Request
    from goodie.http.response import Response
    from goodie.server.render import RenderContext

R = TypeVar("R")

# What init() may hand back to the engine
type InitResult = Sequence[Location] | bytes | Response | None


@runtime_checkable
class Handler(Protocol):
    """The lifecycle surface the render engine drives.

    ``Page`` implements all of it; anything else with the same shape
    can be registered too.
    """

    def bind(self, ctx: RenderContext) -> None: ...
    def init(self) -> Any: ...
    def action(self, name: str) -> Any: ...
    def header(self, stack: Sequence[Location]) -> Any: ...
    def display(self) -> Any: ...
    def footer(self, stack: Sequence[Location]) -> Any: ...
    def render_error(self, exc: Exception) -> Any: ...


class Page:
    """Default page implementation.

    The engine attaches the per-request ``RenderContext`` via ``bind()``
    before calling ``init()``; the properties below read from it.
    """

    ctx: RenderContext

    def bind(self, ctx: RenderContext) -> None:
        self.ctx = ctx

    # -- Context access --

    @property
    def request(self) -> Request:
        return self.ctx.request

    @property
    def doc(self) -> Document:
        return self.ctx.doc

    @property
    def body(self) -> Body:
        """The document body. Created on first access."""
        return self.ctx.doc.body()

    @property
    def form(self) -> FormData:
        """Parsed POST form fields (empty for GET requests)."""
        return self.ctx.form

    @property
    def app(self) -> App | None:
        return self.ctx.app

    @property
    def db(self) -> Database:
        """The owning application's database.

        Raises ``RuntimeError`` when the application has none.
        """
        if self.ctx.app is None:
            msg = "Page is not attached to an application"
            raise RuntimeError(msg)
        return self.ctx.app.db

    # -- Helpers --

    def default_location(self) -> Location:
        """A Location for the current request, named after its path."""
        return Location.from_request(self.request)

    def home_location(self) -> Location:
        return self.default_location().home()

    def new_form(self, action: str = "") -> Form:
        """A GET form back to this page.

        Current query parameters are carried as hidden inputs. Any existing
        ``action`` is dropped; pass *action* to have submitting the form
        trigger that action.
        """
        form = Form(self.request.path)
        for key, value in self.request.query.items_list():
            if key == "action":
                continue
            form.add(Hidden(key, value))
        if action:
            form.add(Hidden("action", action))
        return form

    def bind_query(self, record: R, data: Mapping[str, str] | None = None) -> R:
        """Bind the request query (or *data*) onto *record*."""
        return bind_query(record, self.request.query if data is None else data)

    # -- Lifecycle (override any subset) --

    def init(self) -> InitResult:
        """Establish page identity before any HTML exists.

        Return the breadcrumb stack (outermost first). Return ``bytes``
        or a ``Response`` to send that instead of an HTML page.
        """
        return [self.default_location()]

    def action(self, name: str) -> Location | None:
        """Perform the side effect named by ``?action=<name>``.

        Return a Location to make the browser reload it (with ``action``
        removed) instead of rendering, so a manual refresh cannot repeat
        the side effect. Return ``None`` to render normally.
        """
        return None

    def header(self, stack: Sequence[Location]) -> None:
        self.body.add(breadcrumb_block("header", stack))

    def display(self) -> None:
        """Render the page content between header and footer."""

    def footer(self, stack: Sequence[Location]) -> None:
        self.body.add(breadcrumb_block("footer", stack))

    def render_error(self, exc: Exception) -> None:
        """Show *exc*'s message in place of the page content."""
        self.body.add(Div(str(exc), class_name="goodieerror"))
