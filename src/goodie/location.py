"""Locations and breadcrumb trails.

A ``Location`` is a navigable URL with a display name. Pages return a
stack of them from ``init()`` (site index first, current page last);
the stack drives the header/footer breadcrumb and the action/refresh
redirect target.

Path layout::

    /<app>/<page...>?<query>#<anchor>

The first path segment names the application, the rest is the page.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING
from urllib.parse import parse_qsl, quote, urlencode

from kida.utils.html import Markup

from goodie.html.elements import Anchor, Div, Heading

if TYPE_CHECKING:
    from goodie.http.request import Request

# Separator between breadcrumb entries
BREADCRUMB_SEPARATOR = " › "


def split_path(path: str) -> tuple[str, str]:
    """Split a request path into ``(app, page)``.

    ``/users/edit`` -> ``("users", "/edit")``; ``/users/`` -> ``("users", "/")``;
    ``/users`` -> ``("users", "")``; ``/`` -> ``("", "/")``. The page keeps
    any trailing slash so ``path`` reproduces the request path exactly.
    """
    if not path or path == "/":
        return "", "/"
    app, sep, rest = path.lstrip("/").partition("/")
    return app, sep + rest


class Location:
    """A named, mutable URL.

    Query parameters are an ordered list of ``(key, value)`` pairs.
    Keys are case-sensitive. Treat a Location as a value: use ``copy()``
    before changing one that someone else holds.
    """

    __slots__ = ("anchor", "app", "name", "page", "query")

    def __init__(
        self,
        name: str = "",
        app: str = "",
        page: str = "",
        query: Iterable[tuple[str, str]] = (),
        anchor: str = "",
    ) -> None:
        self.name = name
        self.app = app.strip("/")
        self.page = page if not page or page.startswith("/") else "/" + page
        self.query: list[tuple[str, str]] = [(k, v) for k, v in query if k]
        self.anchor = anchor

    # -- Construction --

    @classmethod
    def parse(cls, link: str, *, name: str = "") -> Location:
        """Build a Location from a relative link such as ``/app/page?a=1#top``.

        Query pairs without a key are dropped.
        """
        rest, _, anchor = link.partition("#")
        path, _, qs = rest.partition("?")
        app, page = split_path(path or "/")
        pairs = parse_qsl(qs, keep_blank_values=True)
        return cls(name=name, app=app, page=page, query=pairs, anchor=anchor)

    @classmethod
    def from_request(cls, request: Request, *, name: str | None = None) -> Location:
        """Build a Location for the request path and query.

        The name defaults to the raw request path.
        """
        app, page = split_path(request.path)
        return cls(
            name=request.path if name is None else name,
            app=app,
            page=page,
            query=request.query.items_list(),
        )

    def copy(self) -> Location:
        return Location(self.name, self.app, self.page, list(self.query), self.anchor)

    def home(self) -> Location:
        """A Location for the site root, named ``Home``."""
        return Location(name="Home", app="", page="/")

    # -- Query access --

    def get_query(self, key: str) -> str:
        """First value for *key*, or ``""`` when absent."""
        for k, v in self.query:
            if k == key:
                return v
        return ""

    def has_query(self, key: str) -> bool:
        return any(k == key for k, _ in self.query)

    def set_query(self, key: str, value: str) -> Location:
        """Set *key* to *value*.

        Replaces the first occurrence in place and drops any later
        duplicates; appends when the key is new.
        """
        result: list[tuple[str, str]] = []
        replaced = False
        for k, v in self.query:
            if k != key:
                result.append((k, v))
            elif not replaced:
                result.append((key, value))
                replaced = True
        if not replaced:
            result.append((key, value))
        self.query = result
        return self

    def del_query(self, key: str) -> Location:
        """Remove every occurrence of *key*; other pairs keep their order."""
        self.query = [(k, v) for k, v in self.query if k != key]
        return self

    # -- Serialization --

    @property
    def path(self) -> str:
        if not self.app:
            return self.page or "/"
        return f"/{self.app}{self.page}"

    def link(self) -> str:
        """Relative link: path, encoded query and anchor."""
        result = quote(self.path, safe="/")
        if self.query:
            result += "?" + urlencode(self.query)
        if self.anchor:
            result += "#" + quote(self.anchor, safe="")
        return result

    def render(self) -> Markup:
        return Anchor(self.link(), self.name).render()

    def __html__(self) -> str:
        return str(self.render())

    def __str__(self) -> str:
        return self.link()

    def __repr__(self) -> str:
        return f"Location({self.name!r}, {self.link()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Location):
            return NotImplemented
        return (self.name, self.link()) == (other.name, other.link())

    __hash__ = None  # type: ignore[assignment]


def breadcrumb_trail(stack: Sequence[Location]) -> Div:
    """Render a breadcrumb chain: every Location linked but the last.

    Entries are joined with ``›``; the final entry is plain text.
    """
    trail = Div()
    last = len(stack) - 1
    for i, location in enumerate(stack):
        if i == last:
            trail.add(location.name)
        else:
            trail.add(location, BREADCRUMB_SEPARATOR)
    return trail


def breadcrumb_block(which: str, stack: Sequence[Location]) -> Div:
    """The page header or footer: ``<div class="goodie{which}"><h3>trail</h3></div>``."""
    return Div(Heading(3, breadcrumb_trail(stack)), class_name=f"goodie{which}")
