"""The route table: a trie over path segments.

At every depth a request segment is tried against, in order:

1. the literal child with the same text (``/books/new``)
2. ``int`` placeholders, then ``float``, then ``str``
3. the ``path`` catch-all, which takes the rest of the path

Placeholders of the same converter are tried in registration order.
Matching is a depth-first search, so when the most specific branch
leads nowhere (no route at its end, or none for the method) the next
branch is tried. A path that matches only under other methods is a 405
whose ``Allow`` header is the union of every method seen.
"""

import re
from collections.abc import Iterator

from perch.errors import ConfigurationError, MethodNotAllowed, NotFound
from perch.routing.params import CATCH_ALL, CONVERTERS, Converter
from perch.routing.route import ANY_METHOD, PathSegment, Route, RouteMatch

_PLACEHOLDER = re.compile(r"\{(?P<name>[^{}:]*)(?::(?P<converter>[^{}]*))?\}")


def _parse_segment(part: str, path: str) -> PathSegment:
    if part.startswith("<") and part.endswith(">"):
        msg = f"Route path {path!r} uses <param> placeholders; write them as {{param}}."
        raise ConfigurationError(msg)

    placeholder = _PLACEHOLDER.fullmatch(part)
    if placeholder is None:
        if "{" in part or "}" in part:
            msg = f"Unbalanced braces in segment {part!r} of route path {path!r}"
            raise ConfigurationError(msg)
        return PathSegment(part)

    name = placeholder["name"]
    converter = placeholder["converter"] or "str"
    if not name.isidentifier():
        msg = f"Invalid parameter name {name!r} in route path {path!r}"
        raise ConfigurationError(msg)
    if converter not in CONVERTERS:
        msg = (
            f"Unknown converter {converter!r} in route path {path!r}; "
            f"use one of {', '.join(sorted(CONVERTERS))}"
        )
        raise ConfigurationError(msg)
    return PathSegment(part, name, converter)


def parse_path(path: str) -> list[PathSegment]:
    """Split a path template into segments, validating each one.

    Empty segments are dropped, so leading, trailing and doubled slashes
    do not matter: ``parse_path("/books/{title}/")`` has two segments.

    Raises:
        ConfigurationError: For ``<param>`` placeholders, unbalanced
            braces, names that are not identifiers, or unknown
            converters.
    """
    return [_parse_segment(part, path) for part in path.split("/") if part]


class _Endpoint:
    """Routes ending at one trie position, by method."""

    __slots__ = ("by_method",)

    def __init__(self) -> None:
        self.by_method: dict[str, Route] = {}

    def __bool__(self) -> bool:
        return bool(self.by_method)

    def register(self, route: Route) -> None:
        for method in route.methods:
            taken = self.by_method.get(method)
            if taken is not None:
                msg = (
                    f"Route {route.path!r} ({method}) conflicts with "
                    f"already registered route {taken.path!r}"
                )
                raise ConfigurationError(msg)
        self.by_method.update(dict.fromkeys(route.methods, route))

    def select(self, method: str) -> Route | None:
        """Exact method, then ``*``, then GET when asked for HEAD."""
        for candidate in (method, ANY_METHOD, "GET" if method == "HEAD" else None):
            if candidate in self.by_method:
                return self.by_method[candidate]
        return None


class _Node:
    __slots__ = ("catch_all", "endpoint", "literals", "placeholders")

    def __init__(self) -> None:
        self.endpoint = _Endpoint()
        self.literals: dict[str, _Node] = {}
        # (converter, name, child), kept ordered by converter rank
        self.placeholders: list[tuple[Converter, str, _Node]] = []
        # (name, endpoint) for a trailing {name:path}
        self.catch_all: tuple[str, _Endpoint] | None = None

    def literal(self, text: str) -> "_Node":
        return self.literals.setdefault(text, _Node())

    def placeholder(self, name: str, converter: Converter) -> "_Node":
        for existing, existing_name, child in self.placeholders:
            if existing is converter and existing_name == name:
                return child
        child = _Node()
        position = sum(1 for other, _, _ in self.placeholders if other.rank <= converter.rank)
        self.placeholders.insert(position, (converter, name, child))
        return child

    def catch_all_endpoint(self, name: str, path: str) -> _Endpoint:
        if self.catch_all is None:
            self.catch_all = (name, _Endpoint())
        elif self.catch_all[0] != name:
            msg = (
                f"Route {path!r} declares catch-all {name!r} where "
                f"catch-all {self.catch_all[0]!r} is already registered"
            )
            raise ConfigurationError(msg)
        return self.catch_all[1]


type _Candidate = tuple[_Endpoint, dict[str, str]]


class Router:
    """Routes are added, then ``compile()`` closes the table for matching.

    ::

        router = Router()
        router.add(Route("/books/{title}/page/{page}", show_page, frozenset({"GET"})))
        router.compile()
        router.match("GET", "/books/dune/page/7").path_params
        # {'title': 'dune', 'page': '7'}
    """

    __slots__ = ("_closed", "_root", "_routes")

    def __init__(self) -> None:
        self._root = _Node()
        self._routes: list[Route] = []
        self._closed = False

    @property
    def routes(self) -> list[Route]:
        """Registered routes, oldest first."""
        return list(self._routes)

    def add(self, route: Route) -> None:
        """Insert *route*.

        Raises:
            RuntimeError: The router is already compiled.
            ConfigurationError: The template is malformed, a catch-all is
                not last, or a method is already taken for this path.
        """
        if self._closed:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        segments = parse_path(route.path)
        node = self._root
        for depth, segment in enumerate(segments):
            if segment.param_type == CATCH_ALL:
                if depth != len(segments) - 1:
                    msg = f"A catch-all parameter must be the last segment of {route.path!r}"
                    raise ConfigurationError(msg)
                endpoint = node.catch_all_endpoint(segment.param_name or CATCH_ALL, route.path)
                break
            if segment.is_param:
                converter = CONVERTERS[segment.param_type or "str"]
                node = node.placeholder(segment.param_name or "", converter)
            else:
                node = node.literal(segment.value)
        else:
            endpoint = node.endpoint

        endpoint.register(route)
        self._routes.append(route)

    def compile(self) -> None:
        self._closed = True

    def match(self, method: str, path: str) -> RouteMatch:
        """The route serving *method* on *path*.

        Raises:
            MethodNotAllowed: Some candidate paths matched, none for *method*.
            NotFound: Nothing matched the path.
        """
        method = method.upper()
        parts = [part for part in path.split("/") if part]
        allowed: set[str] = set()

        for endpoint, params in _candidates(self._root, parts, 0, {}):
            route = endpoint.select(method)
            if route is not None:
                return RouteMatch(route=route, path_params=params)
            allowed.update(endpoint.by_method)

        if allowed:
            raise MethodNotAllowed(frozenset(allowed))
        raise NotFound(f"No route matches {method} {path!r}")


def _candidates(
    node: _Node, parts: list[str], depth: int, params: dict[str, str]
) -> Iterator[_Candidate]:
    """Every endpoint matching ``parts[depth:]`` below *node*, best first."""
    if depth == len(parts):
        if node.endpoint:
            yield node.endpoint, params
        return

    part = parts[depth]
    if part in node.literals:
        yield from _candidates(node.literals[part], parts, depth + 1, params)

    for converter, name, child in node.placeholders:
        if converter.accepts(part):
            yield from _candidates(child, parts, depth + 1, {**params, name: part})

    if node.catch_all is not None:
        name, endpoint = node.catch_all
        yield endpoint, {**params, name: "/".join(parts[depth:])}
