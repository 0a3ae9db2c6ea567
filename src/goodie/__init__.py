"""Goodie: server-rendered pages with breadcrumbs and reload-safe actions.

Every request runs one page handler through a fixed lifecycle:
``init`` builds the breadcrumb stack, an optional ``?action=`` runs a
side effect and redirects to the same page without it, then
``header``, ``display`` and ``footer`` fill the document.

Basic usage::

    from goodie import Page, Server
    from goodie.html import Paragraph

    server = Server()
    hello = server.app("hello")

    @hello.page("world")
    class World(Page):
        async def display(self):
            self.body.add(Paragraph("Hello, World!"))

    server.run()
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "ConfigurationError",
    "GoodieError",
    "HTTPError",
    "Handler",
    "Location",
    "NotFound",
    "Page",
    "Request",
    "Response",
    "Server",
    "ServerConfig",
    "ServerError",
    "bind_query",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import goodie`` fast while providing a clean top-level API.
    """
    if name in ("App", "Server"):
        from goodie import app as _app

        return getattr(_app, name)

    if name == "ServerConfig":
        from goodie.config import ServerConfig

        return ServerConfig

    if name in ("Handler", "Page"):
        from goodie import page as _page

        return getattr(_page, name)

    if name == "Location":
        from goodie.location import Location

        return Location

    if name == "bind_query":
        from goodie.binding import bind_query

        return bind_query

    if name == "Request":
        from goodie.http.request import Request

        return Request

    if name == "Response":
        from goodie.http.response import Response

        return Response

    if name in ("ConfigurationError", "GoodieError", "HTTPError", "NotFound", "ServerError"):
        from goodie import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
