"""Values describing routes: templates as segments, routes, matches."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

ANY_METHOD = "*"


@dataclass(frozen=True, slots=True)
class PathSegment:
    """One ``/``-separated piece of a path template.

    Literal segments only have ``value``. Placeholders also carry the
    parameter name and converter: ``{page:int}`` parses to
    ``PathSegment("{page:int}", "page", "int")``.
    """

    value: str
    param_name: str | None = None
    param_type: str | None = None

    @property
    def is_param(self) -> bool:
        return self.param_name is not None


@dataclass(frozen=True, slots=True)
class Route:
    """*handler* serving *methods* on *path*.

    ``methods`` may contain ``"*"`` for every method. ``template`` is
    checked to exist when the app compiles.
    """

    path: str
    handler: Callable[..., Any]
    methods: frozenset[str]
    name: str | None = None
    template: str | None = None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    route: Route
    path_params: dict[str, str]
