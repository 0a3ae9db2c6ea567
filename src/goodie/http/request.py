"""The incoming request as page handlers see it."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from typing import Any

from goodie._internal.asgi import Receive, Scope
from goodie.http.forms import FormData, is_form_content_type, parse_form_data
from goodie.http.headers import Headers
from goodie.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """One HTTP request.

    Everything from the ASGI scope is fixed at construction. The body is
    pulled from ``receive`` on first use and cached, so ``body()`` and
    ``form()`` may be awaited any number of times.
    """

    method: str
    path: str
    headers: Headers
    query: QueryParams
    http_version: str
    server: tuple[str, int] | None
    client: tuple[str, int] | None
    _receive: Receive
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        server, client = scope.get("server"), scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(scope.get("headers", ())),
            query=QueryParams(scope.get("query_string", b"")),
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            _receive=receive,
        )

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def url(self) -> str:
        """Path and query string as sent by the client."""
        if not self.query.raw:
            return self.path
        return f"{self.path}?{self.query.raw.decode('latin-1')}"

    async def stream(self) -> AsyncGenerator[bytes]:
        """Body chunks straight from ``receive``, bypassing the cache."""
        more = True
        while more:
            message = await self._receive()
            if chunk := message.get("body", b""):
                yield chunk
            more = message.get("more_body", False)

    async def body(self) -> bytes:
        if "body" not in self._cache:
            self._cache["body"] = b"".join([chunk async for chunk in self.stream()])
        return self._cache["body"]

    async def form(self) -> FormData:
        """The body parsed as a form.

        Any request without a form content type, GETs included, gets an
        empty ``FormData``.
        """
        if "form" not in self._cache:
            content_type = self.content_type
            if content_type is not None and is_form_content_type(content_type):
                self._cache["form"] = parse_form_data(await self.body(), content_type)
            else:
                self._cache["form"] = FormData()
        return self._cache["form"]
