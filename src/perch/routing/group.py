"""Route groups: register routes under a shared path prefix.

A group is a thin view over the owning ``App``: it joins its prefix
onto every path and applies its handler wrappers before handing the
route to the app. Groups nest::

    books = app.group("/books")

    @books.route("/{title}/page/{page}")
    def page(title: str, page: str): ...
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from perch._internal.types import Handler, HandlerWrapper
from perch.middleware.wrap import wrap

if TYPE_CHECKING:
    from perch.app import App


def join_paths(prefix: str, path: str) -> str:
    """Join a group prefix and a route path with exactly one slash between."""
    head = prefix.rstrip("/")
    tail = path.strip("/")
    if not tail:
        return head or "/"
    return f"{head}/{tail}"


class RouteGroup:
    """A set of routes sharing a path prefix and handler wrappers."""

    __slots__ = ("_app", "prefix", "wrappers")

    def __init__(
        self,
        app: App,
        prefix: str,
        wrappers: tuple[HandlerWrapper, ...] = (),
    ) -> None:
        self._app = app
        self.prefix = "/" + prefix.strip("/")
        self.wrappers = wrappers

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
        name: str | None = None,
        template: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a route under this group's prefix.

        The decorated function is returned unwrapped, so it stays
        callable directly (and testable) without the group's wrappers.
        """
        register = self._app.route(
            join_paths(self.prefix, path),
            methods=methods,
            name=name,
            template=template,
        )

        def decorator(func: Handler) -> Handler:
            register(wrap(func, *self.wrappers))
            return func

        return decorator

    def group(self, prefix: str, *, wrappers: tuple[HandlerWrapper, ...] = ()) -> RouteGroup:
        """Create a nested group; outer wrappers run before inner ones."""
        return RouteGroup(
            self._app,
            join_paths(self.prefix, prefix),
            (*self.wrappers, *wrappers),
        )

    def __repr__(self) -> str:
        return f"RouteGroup({self.prefix!r}, wrappers={len(self.wrappers)})"
