"""Tests for perch.http.request — Request body access and form_value."""

import logging
from typing import Any

import pytest

from perch.http.request import Request


def _make_request(
    method: str = "GET",
    path: str = "/",
    *,
    query: bytes = b"",
    headers: list[tuple[bytes, bytes]] | None = None,
    body: bytes = b"",
    chunks: list[bytes] | None = None,
) -> Request:
    messages = [{"type": "http.request", "body": c, "more_body": True} for c in chunks or []]
    messages.append({"type": "http.request", "body": body, "more_body": False})
    receive_calls = iter(messages)

    async def receive() -> dict[str, Any]:
        return next(receive_calls)

    scope = {
        "type": "http",
        "method": method,
        "path": path,
        "query_string": query,
        "headers": headers or [],
        "http_version": "1.1",
        "server": ("testserver", 80),
        "client": ("127.0.0.1", 5000),
    }
    return Request.from_asgi(scope, receive)


_FORM = [(b"content-type", b"application/x-www-form-urlencoded")]


class TestMetadata:
    def test_from_asgi(self) -> None:
        request = _make_request("POST", "/books", query=b"q=1")
        assert request.method == "POST"
        assert request.path == "/books"
        assert request.query["q"] == "1"
        assert request.server == ("testserver", 80)
        assert request.client == ("127.0.0.1", 5000)
        assert request.path_params == {}

    def test_url(self) -> None:
        assert _make_request(path="/a", query=b"x=1").url == "/a?x=1"
        assert _make_request(path="/a").url == "/a"

    def test_content_length(self) -> None:
        assert _make_request(headers=[(b"content-length", b"12")]).content_length == 12
        assert _make_request(headers=[(b"content-length", b"abc")]).content_length is None
        assert _make_request().content_length is None

    def test_frozen(self) -> None:
        request = _make_request()
        with pytest.raises(AttributeError):
            request.path = "/other"  # type: ignore[misc]


class TestBody:
    async def test_body_cached(self) -> None:
        request = _make_request("POST", body=b"hello")
        assert await request.body() == b"hello"
        # receive is exhausted; the cached value is returned
        assert await request.body() == b"hello"

    async def test_chunked_body(self) -> None:
        request = _make_request("POST", chunks=[b"he", b"ll"], body=b"o")
        assert await request.text() == "hello"

    async def test_json(self) -> None:
        request = _make_request("POST", body=b'{"title": "dune"}')
        assert await request.json() == {"title": "dune"}

    async def test_with_path_params_shares_cache(self) -> None:
        request = _make_request("POST", body=b"hello")
        assert await request.body() == b"hello"
        routed = request.with_path_params({"title": "dune"})
        assert routed.path_params == {"title": "dune"}
        assert await routed.body() == b"hello"
        assert request.path_params == {}


class TestForm:
    async def test_form_defaults_to_urlencoded(self) -> None:
        request = _make_request("POST", body=b"a=1")
        form = await request.form()
        assert form["a"] == "1"

    async def test_form_cached(self) -> None:
        request = _make_request("POST", headers=_FORM, body=b"a=1")
        assert await request.form() is await request.form()

    async def test_form_rejects_json(self) -> None:
        request = _make_request("POST", headers=[(b"content-type", b"application/json")], body=b"{}")
        with pytest.raises(ValueError):
            await request.form()


class TestFormValue:
    async def test_body_field(self) -> None:
        request = _make_request("POST", headers=_FORM, body=b"email=a%40b.c")
        assert await request.form_value("email") == "a@b.c"

    async def test_missing_field_is_empty(self) -> None:
        request = _make_request("POST", headers=_FORM, body=b"email=a")
        assert await request.form_value("subject") == ""
        assert await request.form_value("subject", "none") == "none"

    async def test_body_wins_over_query(self) -> None:
        request = _make_request("POST", query=b"email=query", headers=_FORM, body=b"email=body")
        assert await request.form_value("email") == "body"

    async def test_query_fallback(self) -> None:
        request = _make_request("POST", query=b"subject=hi", headers=_FORM, body=b"email=a")
        assert await request.form_value("subject") == "hi"

    async def test_get_reads_query_only(self) -> None:
        request = _make_request("GET", query=b"email=a")
        assert await request.form_value("email") == "a"

    async def test_no_content_type_parsed_as_urlencoded(self) -> None:
        request = _make_request("POST", body=b"email=a")
        assert await request.form_value("email") == "a"

    async def test_json_body_ignored(self) -> None:
        request = _make_request(
            "POST",
            headers=[(b"content-type", b"application/json")],
            body=b'{"email": "a"}',
        )
        assert await request.form_value("email") == ""

    async def test_unparseable_body_is_empty(self) -> None:
        request = _make_request(
            "POST",
            headers=[(b"content-type", b"multipart/form-data")],
            body=b"garbage",
        )
        assert await request.form_value("email") == ""

    async def test_invalid_utf8_is_empty(self) -> None:
        request = _make_request("POST", headers=_FORM, body=b"email=\xff")
        assert await request.form_value("email") == ""

    async def test_several_fields_read_body_once(self) -> None:
        request = _make_request("POST", headers=_FORM, body=b"email=a&subject=b&message=c")
        values = [await request.form_value(k) for k in ("email", "subject", "message")]
        assert values == ["a", "b", "c"]

    async def test_unparseable_body_parsed_once(self, caplog, monkeypatch) -> None:
        import perch.http.forms as forms

        calls: list[str] = []
        real_parse = forms.parse_form_data

        async def counting_parse(body: bytes, content_type: str):
            calls.append(content_type)
            return await real_parse(body, content_type)

        monkeypatch.setattr(forms, "parse_form_data", counting_parse)
        request = _make_request(
            "POST",
            query=b"subject=hi",
            headers=[(b"content-type", b"multipart/form-data")],
            body=b"garbage",
        )

        with caplog.at_level(logging.DEBUG, logger="perch.server"):
            values = [await request.form_value(k) for k in ("email", "subject", "message")]

        assert values == ["", "hi", ""]
        assert len(calls) == 1
        assert len([r for r in caplog.records if "unparseable" in r.getMessage()]) == 1
