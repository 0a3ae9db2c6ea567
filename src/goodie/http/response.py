"""Outgoing HTTP response.

A ``Response`` is a frozen value; each ``with_*`` call returns a copy.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace

HTML = "text/html; charset=utf-8"

# Sent with every engine-rendered page so browsers and proxies refetch it
NO_CACHE_HEADERS: tuple[tuple[str, str], ...] = (
    ("Expires", "Thu, 01 Jan 1970 00:00:00 GMT"),
    ("Cache-Control", "no-cache, no-store, must-revalidate"),
    ("Pragma", "no-cache"),
)


@dataclass(frozen=True, slots=True)
class Response:
    body: str | bytes = ""
    status: int = 200
    content_type: str = HTML
    headers: tuple[tuple[str, str], ...] = ()

    def with_status(self, status: int) -> Response:
        return replace(self, status=status)

    def with_content_type(self, content_type: str) -> Response:
        return replace(self, content_type=content_type)

    def with_header(self, name: str, value: str) -> Response:
        return self.with_headers(((name, value),))

    def with_headers(self, headers: Mapping[str, str] | Iterable[tuple[str, str]]) -> Response:
        """Append *headers*; existing ones with the same name are kept."""
        pairs = headers.items() if isinstance(headers, Mapping) else headers
        return replace(self, headers=(*self.headers, *pairs))

    def without_caching(self) -> Response:
        return self.with_headers(NO_CACHE_HEADERS)

    def header(self, name: str) -> str | None:
        """First value sent under *name*, compared case-insensitively."""
        wanted = name.lower()
        return next((value for key, value in self.headers if key.lower() == wanted), None)

    @property
    def body_bytes(self) -> bytes:
        return self.body.encode("utf-8") if isinstance(self.body, str) else self.body

    @property
    def text(self) -> str:
        return self.body.decode("utf-8") if isinstance(self.body, bytes) else self.body
