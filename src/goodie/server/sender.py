"""Writes a finished Response to the ASGI ``send`` channel."""

from goodie._internal.asgi import Send
from goodie.http.response import Response

# Informational, No Content and Not Modified never carry a body.
_BODYLESS = frozenset({204, 304})


def _encode_headers(response: Response, length: int) -> list[tuple[bytes, bytes]]:
    pairs = [("content-type", response.content_type)]
    pairs.extend((name.lower(), value) for name, value in response.headers)
    pairs.append(("content-length", str(length)))
    return [(name.encode("latin-1"), value.encode("latin-1")) for name, value in pairs]


async def send_response(response: Response, send: Send) -> None:
    """Emit *response* as a start message followed by a single body message."""
    status = response.status
    body = b"" if status < 200 or status in _BODYLESS else response.body_bytes
    await send(
        {
            "type": "http.response.start",
            "status": status,
            "headers": _encode_headers(response, len(body)),
        }
    )
    await send({"type": "http.response.body", "body": body})
