"""Tests for perch.templating — environment setup and startup checks."""

import pytest

from perch.config import AppConfig
from perch.errors import ConfigurationError
from perch.templating.integration import create_environment, verify_templates
from perch.templating.returns import Template


@pytest.fixture
def template_dir(tmp_path):
    (tmp_path / "hello.html").write_text("Hello {{ name | shout }} from {{ site() }}")
    (tmp_path / "broken.html").write_text("{% if %}")
    return tmp_path


def _env(template_dir):
    return create_environment(
        AppConfig(template_dir=template_dir),
        {"shout": lambda v: v.upper()},
        {"site": lambda: "perch"},
    )


class TestCreateEnvironment:
    def test_filters_and_globals(self, template_dir) -> None:
        html = Template("hello.html", name="ada").render(_env(template_dir))
        assert "Hello ADA from perch" in html

    def test_autoescape(self, tmp_path) -> None:
        (tmp_path / "x.html").write_text("{{ v }}")
        env = create_environment(AppConfig(template_dir=tmp_path), {}, {})
        html = Template("x.html", v="<b>").render(env)
        assert "<b>" not in html


class TestVerifyTemplates:
    def test_present(self, template_dir) -> None:
        verify_templates(_env(template_dir), ["hello.html"])

    def test_missing(self, template_dir) -> None:
        with pytest.raises(ConfigurationError, match="'missing.html'"):
            verify_templates(_env(template_dir), ["hello.html", "missing.html"])

    def test_syntax_error(self, template_dir) -> None:
        with pytest.raises(ConfigurationError, match="'broken.html'"):
            verify_templates(_env(template_dir), ["broken.html"])

    def test_nothing_to_check(self, template_dir) -> None:
        verify_templates(_env(template_dir), [])


class TestTemplateReturn:
    def test_context(self) -> None:
        tpl = Template("forms.html", success=True)
        assert tpl.name == "forms.html"
        assert tpl.context == {"success": True}

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            Template("a.html").name = "b.html"  # type: ignore[misc]
