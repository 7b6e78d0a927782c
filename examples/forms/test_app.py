"""Tests for the forms example."""

import logging
from dataclasses import replace

import pytest

from perch import ConfigurationError
from perch.testing import TestClient


class TestContactForm:
    """The form page, the success page, and lenient field handling."""

    async def test_get_renders_form(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/")
            assert response.status == 200
            assert "text/html" in response.content_type
            assert '<form method="POST">' in response.text
            assert "Thanks for your message!" not in response.text

    @pytest.mark.parametrize("method", ["PUT", "DELETE", "PATCH", "OPTIONS"])
    async def test_other_methods_render_form(self, example_app, method: str) -> None:
        async with TestClient(example_app) as client:
            response = await client.request(method, "/")
            assert response.status == 200
            assert '<form method="POST">' in response.text

    async def test_post_renders_success(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post(
                "/",
                form={"email": "a@example.com", "subject": "Hi", "message": "Hello"},
            )
            assert response.status == 200
            assert "Thanks for your message!" in response.text
            assert "<form" not in response.text

    async def test_post_without_fields_still_succeeds(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post("/")
            assert response.status == 200
            assert "Thanks for your message!" in response.text

    async def test_post_multipart_without_boundary_still_succeeds(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post(
                "/",
                body=b"not a multipart body",
                headers={"content-type": "multipart/form-data"},
            )
            assert response.status == 200
            assert "Thanks for your message!" in response.text

    async def test_post_undecodable_body_still_succeeds(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post(
                "/",
                body=b"email=\xff\xfe",
                headers={"content-type": "application/x-www-form-urlencoded"},
            )
            assert response.status == 200
            assert "Thanks for your message!" in response.text

    async def test_post_logs_contact_details(self, example_app, caplog) -> None:
        caplog.set_level(logging.DEBUG, logger="perch.app")
        async with TestClient(example_app) as client:
            await client.post("/", form={"email": "a@example.com", "subject": "Hi"})

        records = [r for r in caplog.records if r.name == "perch.app"]
        assert len(records) == 1
        assert records[0].levelno == logging.DEBUG
        message = records[0].getMessage()
        assert "email='a@example.com'" in message
        assert "subject='Hi'" in message
        assert "message=''" in message

    async def test_get_does_not_log(self, example_app, caplog) -> None:
        caplog.set_level(logging.DEBUG, logger="perch.app")
        async with TestClient(example_app) as client:
            await client.get("/?email=a@example.com")

        assert not [r for r in caplog.records if r.name == "perch.app"]


class TestStartup:
    def test_route_declares_template(self, example_app) -> None:
        (route,) = example_app.routes
        assert route.path == "/"
        assert route.template == "forms.html"
        assert route.methods == frozenset({"*"})

    def test_missing_template_fails_before_serving(self, example_app, tmp_path) -> None:
        example_app.config = replace(example_app.config, template_dir=tmp_path)

        with pytest.raises(ConfigurationError, match="forms.html"):
            example_app._ensure_frozen()
