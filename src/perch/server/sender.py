"""Write a ``Response`` to ASGI as one start message and one body message."""

from perch._internal.asgi import Send
from perch.http.response import Response

_BODILESS = frozenset({204, 304})


def _latin1(name: str, value: str) -> tuple[bytes, bytes]:
    return name.lower().encode("latin-1"), value.encode("latin-1")


async def send_response(response: Response, send: Send, *, head: bool = False) -> None:
    """Send *response*; with *head* the length is announced but no bytes follow.

    1xx, 204 and 304 responses always go out with an empty body.
    """
    status = response.status
    body = b"" if status < 200 or status in _BODILESS else response.body_bytes
    headers = [
        _latin1("content-type", response.content_type),
        *(_latin1(name, value) for name, value in response.headers),
        _latin1("content-length", str(len(body))),
    ]
    await send({"type": "http.response.start", "status": status, "headers": headers})
    await send({"type": "http.response.body", "body": b"" if head else body})
