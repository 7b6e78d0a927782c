"""In-process client that drives a perch app through its ASGI callable."""

from __future__ import annotations

import json as json_module
from typing import Any
from urllib.parse import urlencode

from perch._internal.asgi import Scope
from perch._internal.invoke import invoke
from perch.app import App
from perch.http.response import TEXT_HTML, Response

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"


def _build_scope(method: str, target: str, headers: dict[str, str], body: bytes) -> Scope:
    path, _, query = target.partition("?")
    raw_headers = [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in headers.items()
    ]
    if body and not any(name == b"content-length" for name, _ in raw_headers):
        raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method.upper(),
        "scheme": "http",
        "path": path,
        "raw_path": path.encode("latin-1"),
        "query_string": query.encode("latin-1"),
        "root_path": "",
        "headers": raw_headers,
        "server": ("testserver", 80),
        "client": ("127.0.0.1", 0),
    }


class _Exchange:
    """One request body going in, response messages collected coming out."""

    def __init__(self, body: bytes) -> None:
        self._pending: bytes | None = body
        self.status = 500
        self.headers: list[tuple[bytes, bytes]] = []
        self.chunks: list[bytes] = []

    async def receive(self) -> dict[str, Any]:
        if self._pending is None:
            return {"type": "http.disconnect"}
        body, self._pending = self._pending, None
        return {"type": "http.request", "body": body, "more_body": False}

    async def send(self, message: dict[str, Any]) -> None:
        if message["type"] == "http.response.start":
            self.status = message["status"]
            self.headers = list(message.get("headers", ()))
        elif message["type"] == "http.response.body":
            self.chunks.append(message.get("body", b""))

    def to_response(self) -> Response:
        content_type = TEXT_HTML
        headers: list[tuple[str, str]] = []
        for raw_name, raw_value in self.headers:
            name = raw_name.decode("latin-1")
            value = raw_value.decode("latin-1")
            if name == "content-type":
                content_type = value
            elif name != "content-length":
                headers.append((name, value))
        return Response(
            body=b"".join(self.chunks),
            status=self.status,
            content_type=content_type,
            headers=tuple(headers),
        )


class TestClient:
    """Sends requests straight into ``app(scope, receive, send)``.

    Entering the client freezes the app and runs its startup hooks; leaving
    runs the shutdown hooks. Responses come back as ordinary ``Response``
    objects, with ``Content-Type`` folded into ``content_type`` and
    ``Content-Length`` dropped::

        async with TestClient(app) as client:
            response = await client.post("/", form={"email": "a@b.c"})
            assert response.status == 200
    """

    __test__ = False

    __slots__ = ("app",)

    def __init__(self, app: App) -> None:
        self.app = app

    async def __aenter__(self) -> TestClient:
        self.app._ensure_frozen()
        for hook in self.app._startup_hooks:
            await invoke(hook)
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        for hook in self.app._shutdown_hooks:
            await invoke(hook)

    async def get(self, path: str, *, headers: dict[str, str] | None = None) -> Response:
        return await self.request("GET", path, headers=headers)

    async def delete(self, path: str, *, headers: dict[str, str] | None = None) -> Response:
        return await self.request("DELETE", path, headers=headers)

    async def put(
        self, path: str, *, headers: dict[str, str] | None = None, body: bytes | None = None
    ) -> Response:
        return await self.request("PUT", path, headers=headers, body=body)

    async def post(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
        form: dict[str, str] | None = None,
        json: Any = None,
    ) -> Response:
        """POST raw *body*, a URL-encoded *form*, or a *json* document.

        *form* and *json* set their Content-Type; an explicit one in
        *headers* wins.
        """
        defaults: dict[str, str] = {}
        if form is not None:
            body = urlencode(form).encode("utf-8")
            defaults["content-type"] = FORM_CONTENT_TYPE
        elif json is not None:
            body = json_module.dumps(json).encode("utf-8")
            defaults["content-type"] = JSON_CONTENT_TYPE
        return await self.request("POST", path, headers={**defaults, **(headers or {})}, body=body)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> Response:
        """Run one request of any method; *path* may carry a query string."""
        payload = body or b""
        exchange = _Exchange(payload)
        scope = _build_scope(method, path, headers or {}, payload)
        await self.app(scope, exchange.receive, exchange.send)
        return exchange.to_response()
