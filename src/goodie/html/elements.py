"""HTML element tree.

Every node renders to kida ``Markup``. Plain strings are escaped text;
anything exposing ``__html__`` (``Markup``, ``Location``) is trusted.
"""

import html
from collections.abc import Iterable, Mapping
from typing import Any, TypeAlias

from kida.utils.html import Markup

Node: TypeAlias = Any

_VOID_TAGS = frozenset({"br", "hr", "img", "input", "link", "meta"})


def render_node(node: Node) -> Markup:
    """Render one child node to Markup."""
    if isinstance(node, Markup):
        return node
    render = getattr(node, "render", None)
    if callable(render):
        return render()
    to_html = getattr(node, "__html__", None)
    if callable(to_html):
        return Markup(to_html())
    return Markup(html.escape(str(node), quote=False))


def _render_attrs(attrs: Mapping[str, str]) -> str:
    return "".join(f' {name}="{html.escape(str(value), quote=True)}"' for name, value in attrs.items())


class Element:
    """A tag with attributes and child nodes.

    Containers are filled with ``add()``; class names accumulate with
    ``add_class_name()`` and are emitted in insertion order.
    """

    __slots__ = ("attrs", "children", "class_names", "tag")

    def __init__(
        self,
        tag: str,
        *children: Node,
        class_name: str | None = None,
        attrs: Mapping[str, str] | None = None,
    ) -> None:
        self.tag = tag
        self.children: list[Node] = list(children)
        self.class_names: list[str] = [class_name] if class_name else []
        self.attrs: dict[str, str] = dict(attrs or {})

    def add(self, *children: Node) -> Element:
        self.children.extend(children)
        return self

    def extend(self, children: Iterable[Node]) -> Element:
        self.children.extend(children)
        return self

    def add_class_name(self, name: str) -> Element:
        if name not in self.class_names:
            self.class_names.append(name)
        return self

    def render(self) -> Markup:
        attrs: dict[str, str] = {}
        if self.class_names:
            attrs["class"] = " ".join(self.class_names)
        attrs.update(self.attrs)
        opening = f"<{self.tag}{_render_attrs(attrs)}>"
        if self.tag in _VOID_TAGS:
            return Markup(opening)
        inner = "".join(render_node(child) for child in self.children)
        return Markup(f"{opening}{inner}</{self.tag}>")

    def __html__(self) -> str:
        return str(self.render())

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.tag} children={len(self.children)}>"


class Div(Element):
    def __init__(self, *children: Node, class_name: str | None = None) -> None:
        super().__init__("div", *children, class_name=class_name)


class Paragraph(Element):
    def __init__(self, *children: Node, class_name: str | None = None) -> None:
        super().__init__("p", *children, class_name=class_name)


class Heading(Element):
    def __init__(self, level: int, *children: Node, class_name: str | None = None) -> None:
        if not 1 <= level <= 6:
            msg = f"heading level must be 1-6, got {level}"
            raise ValueError(msg)
        super().__init__(f"h{level}", *children, class_name=class_name)


class Anchor(Element):
    def __init__(self, href: str, *children: Node, class_name: str | None = None) -> None:
        super().__init__("a", *children, class_name=class_name, attrs={"href": href})


class Form(Element):
    def __init__(self, action: str, *children: Node, method: str = "get") -> None:
        super().__init__("form", *children, attrs={"action": action, "method": method})


class Hidden(Element):
    def __init__(self, name: str, value: str) -> None:
        super().__init__("input", attrs={"type": "hidden", "name": name, "value": value})


class MetaRefresh(Element):
    """``<meta http-equiv="refresh">`` pointing the browser at *url*."""

    def __init__(self, seconds: int, url: str) -> None:
        super().__init__(
            "meta",
            attrs={"http-equiv": "refresh", "content": f"{seconds}; url={url}"},
        )


class Style(Element):
    """An embedded stylesheet. CSS text is trusted, not escaped."""

    def __init__(self, css: str) -> None:
        super().__init__("style", Markup(css))


class Title(Element):
    def __init__(self, text: str) -> None:
        super().__init__("title", text)

    @property
    def text(self) -> str:
        return "".join(str(child) for child in self.children)
