"""Callable shapes shared by the app, groups and wrappers."""

from collections.abc import Callable
from typing import Any

type Handler = Callable[..., Any]
"""A route handler. Arguments are injected by name, so any signature goes."""

type HandlerWrapper = Callable[[Handler], Handler]
"""Wraps one handler; the result must keep the wrapped signature."""

type ErrorHandler = Callable[..., Any]
"""Takes nothing, ``(request)`` or ``(request, exc)``."""
