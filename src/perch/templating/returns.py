"""Handler return values that render a kida template.

::

    @app.route("/", template="forms.html")
    def contact():
        return Template("forms.html", success=False)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from kida import Environment


@dataclass(frozen=True, slots=True, init=False)
class Template:
    """Template *name*, loaded from ``AppConfig.template_dir``, with keyword context."""

    name: str
    context: dict[str, Any]

    def __init__(self, name: str, /, **context: Any) -> None:
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "context", context)

    @staticmethod
    def inline(source: str, /, **context: Any) -> InlineTemplate:
        return InlineTemplate(source, **context)

    def render(self, env: Environment) -> str:
        return env.get_template(self.name).render(self.context)


@dataclass(frozen=True, slots=True, init=False)
class InlineTemplate:
    """Template source given as a string; handy in tests and one-off pages."""

    source: str
    context: dict[str, Any]

    def __init__(self, source: str, /, **context: Any) -> None:
        object.__setattr__(self, "source", source)
        object.__setattr__(self, "context", context)

    def render(self, env: Environment) -> str:
        return env.from_string(self.source).render(self.context)
