"""HTML document shell.

A ``Document`` owns a head (title, meta, stylesheets) and an optional
body. The body is created on demand: a refresh response is serialized
with a head only.
"""

from functools import cache
from importlib.resources import files

from kida import Environment
from kida.utils.html import Markup

from goodie.html.elements import Element, Node, Style, Title, render_node

# Shell template. Head and body arrive pre-rendered as Markup.
_DOCUMENT_SOURCE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
{{ head }}
</head>
{{ body }}
</html>
"""


@cache
def _document_template():
    return Environment(autoescape=True).from_string(_DOCUMENT_SOURCE)


@cache
def default_css() -> str:
    """The stylesheet shipped with goodie (``default.css``)."""
    return files("goodie.html").joinpath("default.css").read_text(encoding="utf-8")


class Head:
    """The ``<head>`` region: an optional title plus any number of nodes."""

    __slots__ = ("_nodes", "_title")

    def __init__(self) -> None:
        self._title: Title | None = None
        self._nodes: list[Node] = []

    @property
    def title(self) -> str:
        """Current title text, ``""`` when none was set."""
        return self._title.text if self._title is not None else ""

    def add_title(self, text: str) -> None:
        self._title = Title(text)

    def add(self, *nodes: Node) -> None:
        self._nodes.extend(nodes)

    def render(self) -> Markup:
        parts = [self._title, *self._nodes] if self._title is not None else self._nodes
        return Markup("\n".join(render_node(node) for node in parts))


class Body(Element):
    def __init__(self) -> None:
        super().__init__("body")


class Document:
    """An HTML document under construction."""

    __slots__ = ("_body", "head")

    def __init__(self) -> None:
        self.head = Head()
        self._body: Body | None = None

    def add_css(self, css: str) -> None:
        self.head.add(Style(css))

    def body(self) -> Body:
        """Return the body, creating it on first use."""
        if self._body is None:
            self._body = Body()
        return self._body

    @property
    def has_body(self) -> bool:
        return self._body is not None

    def render(self) -> str:
        body = self._body.render() if self._body is not None else Markup("")
        return _document_template().render({"head": self.head.render(), "body": body})

    def to_bytes(self) -> bytes:
        return self.render().encode("utf-8")
