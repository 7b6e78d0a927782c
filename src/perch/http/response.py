"""Response values returned by handlers, middleware and error handlers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace

TEXT_PLAIN = "text/plain; charset=utf-8"
TEXT_HTML = "text/html; charset=utf-8"


@dataclass(frozen=True, slots=True)
class Response:
    """A status, a content type, extra headers and a body.

    Never mutated: each ``with_*`` method returns a modified copy, so a
    middleware can decorate the response it got from ``next`` without
    affecting anyone else holding it::

        response = await next(request)
        return response.with_header("X-Served-By", "perch")

    ``Content-Type`` and ``Content-Length`` are sent from ``content_type``
    and the body; ``headers`` holds everything else, repeats allowed.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = TEXT_HTML
    headers: tuple[tuple[str, str], ...] = ()

    def with_status(self, status: int) -> Response:
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        return replace(self, headers=(*self.headers, *headers.items()))

    def with_content_type(self, content_type: str) -> Response:
        return replace(self, content_type=content_type)

    @property
    def body_bytes(self) -> bytes:
        """The body, UTF-8 encoded if it is text."""
        return self.body.encode("utf-8") if isinstance(self.body, str) else self.body

    @property
    def text(self) -> str:
        """The body, UTF-8 decoded if it is bytes."""
        return self.body.decode("utf-8") if isinstance(self.body, bytes) else self.body

    def header(self, name: str, default: str | None = None) -> str | None:
        """First value of header *name*, compared case-insensitively."""
        wanted = name.lower()
        return next((value for key, value in self.headers if key.lower() == wanted), default)


def plain_text(body: str, status: int = 200) -> Response:
    """A ``text/plain`` response, the shape of ``fmt.Fprintln``-style handlers."""
    return Response(body=body, status=status, content_type=TEXT_PLAIN)


@dataclass(frozen=True, slots=True)
class Redirect:
    """Handler return value for a redirect to *url* (302 unless given)."""

    url: str
    status: int = 302
    headers: tuple[tuple[str, str], ...] = ()
