"""Find the ``App`` an import string points at."""

import importlib
import sys

from perch.app import App
from perch.errors import ConfigurationError


def resolve_app(import_string: str) -> App:
    """Import ``module[:attribute]`` and return the ``App`` it names.

    A callable that is not itself an ``App`` is taken to be a factory
    and called without arguments.

    Raises:
        ModuleNotFoundError: The module does not exist.
        AttributeError: The module has no such attribute.
        TypeError: The factory failed or the result is not an ``App``.
    """
    module_name, _, attribute = import_string.partition(":")
    target = getattr(importlib.import_module(module_name), attribute or "app")

    if callable(target) and not isinstance(target, App):
        try:
            target = target()
        except Exception as exc:
            msg = f"Factory {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(target, App):
        msg = f"{import_string!r} is a {type(target).__name__}, not a perch.App instance"
        raise TypeError(msg)
    return target


def load_app_or_exit(import_string: str) -> App:
    """Resolve and compile the app; report any failure on stderr and exit 1."""
    try:
        app = resolve_app(import_string)
        app._ensure_frozen()
    except (ModuleNotFoundError, AttributeError, TypeError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    return app
