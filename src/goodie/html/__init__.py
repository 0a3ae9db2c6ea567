"""Minimal HTML document builder.

Pages add elements to a ``Document``'s head and body; the render engine
serializes the finished tree once per request::

    doc = Document()
    doc.head.add_title("Users")
    doc.body().add(Div(Heading(1, "Users"), class_name="users"))
    html = doc.render()
"""

from goodie.html.document import Body, Document, Head, default_css
from goodie.html.elements import (
    Anchor,
    Div,
    Element,
    Form,
    Heading,
    Hidden,
    MetaRefresh,
    Node,
    Paragraph,
    Style,
    Title,
    render_node,
)

__all__ = [
    "Anchor",
    "Body",
    "Div",
    "Document",
    "Element",
    "Form",
    "Head",
    "Heading",
    "Hidden",
    "MetaRefresh",
    "Node",
    "Paragraph",
    "Style",
    "Title",
    "default_css",
    "render_node",
]
