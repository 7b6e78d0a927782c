"""The request object handed to handlers and wrappers.

Everything known when the request line and headers arrive is a frozen
field. The body is read lazily through the ASGI ``receive`` callable
and kept in a per-request cache, so ``body()``, ``form()`` and
``form_value()`` can be called in any order and any number of times.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from perch._internal.asgi import Receive, Scope
from perch.http.headers import Headers
from perch.http.query import QueryParams

if TYPE_CHECKING:
    from perch.http.forms import FormData

logger = logging.getLogger("perch.server")

# form_value only looks for fields in the body of these methods
_BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


@dataclass(frozen=True, slots=True)
class Request:
    """One HTTP request.

    ``path_params`` is empty until the router has matched the request;
    the routed copy (see ``with_path_params``) carries the captured
    placeholder values as strings.
    """

    method: str
    path: str
    headers: Headers
    query: QueryParams
    path_params: dict[str, str]
    http_version: str
    server: tuple[str, int] | None
    client: tuple[str, int] | None

    _receive: Receive = field(repr=False, compare=False)
    # Shared by every copy of this request: body bytes and parsed form
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"].upper(),
            path=scope["path"],
            headers=Headers(scope.get("headers", ())),
            query=QueryParams(scope.get("query_string", b"")),
            path_params={},
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            _receive=receive,
        )

    def with_path_params(self, path_params: dict[str, str]) -> Request:
        """Copy of this request carrying the router's captured parameters."""
        return replace(self, path_params=path_params, _cache=self._cache)

    # -- Header shortcuts --

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def content_length(self) -> int | None:
        """Declared body size, or ``None`` if absent or not a number."""
        value = self.headers.get("content-length")
        if value is None or not value.strip().isdigit():
            return None
        return int(value)

    @property
    def url(self) -> str:
        """Path plus query string, as requested."""
        if self.query.raw:
            return f"{self.path}?{self.query.raw.decode('latin-1')}"
        return self.path

    # -- Body --

    async def stream(self) -> AsyncIterator[bytes]:
        """Yield body chunks straight from the server. Not cached."""
        more_body = True
        while more_body:
            message = await self._receive()
            chunk = message.get("body", b"")
            if chunk:
                yield chunk
            more_body = message.get("more_body", False)

    async def body(self) -> bytes:
        """The whole body. Read from the server once, then cached."""
        if "body" not in self._cache:
            self._cache["body"] = b"".join([chunk async for chunk in self.stream()])
        return self._cache["body"]

    async def text(self) -> str:
        return (await self.body()).decode("utf-8")

    async def json(self) -> Any:
        return json.loads(await self.body())

    async def form(self) -> FormData:
        """The body parsed as a form; a missing Content-Type counts as URL-encoded.

        Raises:
            ValueError: If the Content-Type is not a form encoding or the
                body cannot be decoded.
        """
        if "form" not in self._cache:
            from perch.http.forms import FORM_URLENCODED, parse_form_data

            self._cache["form"] = await parse_form_data(
                await self.body(), self.content_type or FORM_URLENCODED
            )
        return self._cache["form"]

    async def form_value(self, key: str, default: str = "") -> str:
        """First value of form field *key*, never raising.

        Looks in the body (POST, PUT and PATCH with a form body or no
        Content-Type), then in the query string. Returns *default* when
        the field is in neither, or when the body cannot be parsed.
        """
        if self.method in _BODY_METHODS and self._has_form_body and "form_error" not in self._cache:
            try:
                form = await self.form()
            except ValueError as exc:
                # remembered so later fields skip the body without re-parsing
                self._cache["form_error"] = exc
                logger.debug("Ignoring unparseable form body on %s %s", self.method, self.path)
            else:
                if key in form:
                    return form[key]
        return self.query.get(key, default)

    @property
    def _has_form_body(self) -> bool:
        from perch.http.forms import is_form_content_type

        return self.content_type is None or is_form_content_type(self.content_type)
