"""Building the app's kida environment and checking its templates."""

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from kida import Environment, FileSystemLoader

from perch.config import AppConfig
from perch.errors import ConfigurationError


def create_environment(
    config: AppConfig,
    filters: Mapping[str, Callable[..., Any]],
    globals_: Mapping[str, Any],
) -> Environment:
    """The one environment an app renders with, built when it compiles.

    Templates load from ``config.template_dir``; in debug mode kida
    re-reads changed files.
    """
    env = Environment(
        loader=FileSystemLoader(str(config.template_dir)),
        autoescape=config.autoescape,
        auto_reload=config.debug,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
    )
    if filters:
        env.update_filters(dict(filters))
    for name, value in globals_.items():
        env.add_global(name, value)
    return env


def verify_templates(env: Environment, names: Iterable[str]) -> None:
    """Load and parse each template in *names*.

    Raises:
        ConfigurationError: For the first template that is missing or
            does not parse.
    """
    for name in names:
        try:
            env.get_template(name)
        except Exception as exc:
            msg = f"Template {name!r} could not be loaded: {exc}"
            raise ConfigurationError(msg) from exc
