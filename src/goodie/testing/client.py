"""In-process client that drives a ``Server`` through its ASGI interface."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

from goodie.app import Server
from goodie.http.response import HTML, Response


def _scope(method: str, target: str, headers: Mapping[str, str]) -> dict[str, Any]:
    path, _, query = target.partition("?")
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method.upper(),
        "path": path,
        "raw_path": path.encode("latin-1"),
        "query_string": query.encode("latin-1"),
        "root_path": "",
        "headers": [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in headers.items()
        ],
        "server": ("testserver", 80),
        "client": ("127.0.0.1", 0),
    }


class _Capture:
    """ASGI ``send`` target that rebuilds a ``Response`` from the messages."""

    def __init__(self) -> None:
        self.status = 0
        self.headers: list[tuple[bytes, bytes]] = []
        self.body = bytearray()

    async def __call__(self, message: dict[str, Any]) -> None:
        if message["type"] == "http.response.start":
            self.status = message["status"]
            self.headers = list(message.get("headers", ()))
        elif message["type"] == "http.response.body":
            self.body.extend(message.get("body", b""))

    def response(self) -> Response:
        content_type = HTML
        extra: list[tuple[str, str]] = []
        for raw_name, raw_value in self.headers:
            name, value = raw_name.decode("latin-1"), raw_value.decode("latin-1")
            if name == "content-type":
                content_type = value
            elif name != "content-length":
                extra.append((name, value))
        return Response(bytes(self.body), self.status, content_type, tuple(extra))


class TestClient:
    """Sends requests to a server without a listener or socket.

    Entering the client freezes the server and connects its databases,
    the same steps the lifespan startup performs.

    Usage::

        async with TestClient(server) as client:
            response = await client.get("/notes/list")
            assert response.status == 200
    """

    __test__ = False
    __slots__ = ("server",)

    def __init__(self, server: Server) -> None:
        self.server = server

    async def __aenter__(self) -> TestClient:
        self.server._ensure_frozen()
        await self.server.connect_databases()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.server.disconnect_databases()

    async def get(
        self,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        query: Mapping[str, str] | None = None,
    ) -> Response:
        if query:
            path += ("&" if "?" in path else "?") + urlencode(query)
        return await self.request("GET", path, headers=headers)

    async def post(
        self,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes = b"",
        data: Mapping[str, str] | None = None,
    ) -> Response:
        """POST *body* as given, or *data* as a url-encoded form."""
        sent = dict(headers or {})
        if data is not None:
            body = urlencode(data).encode("utf-8")
            sent.setdefault("content-type", "application/x-www-form-urlencoded")
        return await self.request("POST", path, headers=sent, body=body)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes = b"",
    ) -> Response:
        pending = [{"type": "http.request", "body": body, "more_body": False}]

        async def receive() -> dict[str, Any]:
            return pending.pop() if pending else {"type": "http.disconnect"}

        capture = _Capture()
        await self.server(_scope(method, path, headers or {}), receive, capture)
        return capture.response()
