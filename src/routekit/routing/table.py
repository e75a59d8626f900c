"""Route table — the default binder.

``bind()`` compiles a finished route list into a trie keyed by path
segment. The trie only narrows the search to routes whose shape fits the
request path; among those, registration order decides. The first
registered route whose verb accepts the method wins, whether it is a
static path, a ``:param`` path, a ``*`` catch-all, or an ``ALL`` route.

Parameter names live on each route, not on the trie, so two routes may
name the same position differently (``/photo/:photo_id`` and
``/photo/:id/comments``).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from routekit.errors import ConfigurationError, MethodNotAllowed, NotFound
from routekit.routing.route import PathSegment, Route, RouteList, RouteMatch, Verb

logger = logging.getLogger("routekit.binding")

CATCH_ALL_PARAM = "wildcard"


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/users"          -> [PathSegment("users")]
        "/users/:id"      -> [PathSegment("users"), PathSegment(":id", is_param=True, param_name="id")]
        "/files/*"        -> [PathSegment("files"), PathSegment("*", is_param=True, catch_all=True)]
    """
    segments: list[PathSegment] = []
    parts = [part for part in path.strip("/").split("/") if part]
    for index, part in enumerate(parts):
        if part == "*":
            if index != len(parts) - 1:
                msg = f"Catch-all '*' must be the last segment of {path!r}."
                raise ConfigurationError(msg)
            segments.append(
                PathSegment(value=part, is_param=True, param_name=CATCH_ALL_PARAM, catch_all=True)
            )
        elif part.startswith(":"):
            name = part[1:]
            if not name:
                msg = f"Empty parameter name in route path {path!r}."
                raise ConfigurationError(msg)
            segments.append(PathSegment(value=part, is_param=True, param_name=name))
        else:
            segments.append(PathSegment(value=part))
    return segments


@dataclass(frozen=True, slots=True)
class _Entry:
    """A route in the table, with its registration index and parsed path."""

    order: int
    route: Route
    segments: tuple[PathSegment, ...]

    def accepts(self, method: str) -> bool:
        return self.route.verb == method or self.route.verb is Verb.ALL

    def params(self, parts: list[str]) -> dict[str, str]:
        """Path parameters of *parts* under this route's own names."""
        params: dict[str, str] = {}
        for index, seg in enumerate(self.segments):
            if seg.catch_all:
                params[CATCH_ALL_PARAM] = "/".join(parts[index:])
            elif seg.is_param and seg.param_name is not None:
                params[seg.param_name] = parts[index]
        return params


@dataclass(slots=True)
class _TrieNode:
    """A node in the route trie. Mutable during compilation only."""

    # Static segment children: "users" -> node
    children: dict[str, _TrieNode] = field(default_factory=dict)
    # Shared by every route with a parameter at this level, whatever its name
    param_child: _TrieNode | None = None
    # Routes consuming the rest of the path
    catch_all: list[_Entry] = field(default_factory=list)
    # Routes ending at this node
    entries: list[_Entry] = field(default_factory=list)


class RouteTable:
    """Compiled route table with trie-based path matching.

    Usage::

        table = RouteTable()
        table.add(route)
        table.compile()
        match = table.match("GET", "/users/42")
    """

    __slots__ = ("_compiled", "_root", "_routes")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._routes: list[Route] = []
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route to the table. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise ConfigurationError(msg)

        segments = tuple(parse_path(route.path))
        entry = _Entry(order=len(self._routes), route=route, segments=segments)

        node = self._root
        for seg in segments:
            if seg.catch_all:
                node.catch_all.append(entry)
                break
            if seg.is_param:
                if node.param_child is None:
                    node.param_child = _TrieNode()
                node = node.param_child
            else:
                node = node.children.setdefault(seg.value, _TrieNode())
        else:
            node.entries.append(entry)

        self._routes.append(route)

    @property
    def routes(self) -> list[Route]:
        """All routes, in the order they were added."""
        return list(self._routes)

    def compile(self) -> None:
        """Freeze the table. No more routes can be added."""
        self._compiled = True

    @property
    def compiled(self) -> bool:
        return self._compiled

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request method and path.

        Returns a ``RouteMatch`` for the first registered route that fits.
        ``HEAD`` falls back to ``GET`` routes only when no route accepts
        ``HEAD`` itself.

        Raises ``NotFound`` if no route matches the path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        method = method.upper()
        parts = [p for p in path.strip("/").split("/") if p]
        candidates: list[_Entry] = []
        self._collect(self._root, parts, 0, candidates)

        if not candidates:
            raise NotFound(f"No route matches {method} {path!r}")

        candidates.sort(key=lambda entry: entry.order)
        chosen = next((entry for entry in candidates if entry.accepts(method)), None)
        if chosen is None and method == Verb.HEAD:
            chosen = next((entry for entry in candidates if entry.route.verb is Verb.GET), None)
        if chosen is not None:
            return RouteMatch(route=chosen.route, path_params=chosen.params(parts))

        raise MethodNotAllowed(frozenset(str(entry.route.verb) for entry in candidates))

    def _collect(self, node: _TrieNode, parts: list[str], index: int, out: list[_Entry]) -> None:
        """Collect every entry whose path shape fits *parts*."""
        if index == len(parts):
            out.extend(node.entries)
        else:
            part = parts[index]
            if part in node.children:
                self._collect(node.children[part], parts, index + 1, out)
            if node.param_child is not None:
                self._collect(node.param_child, parts, index + 1, out)

        # A catch-all may also match an empty remainder
        out.extend(node.catch_all)


def bind(routes: RouteList | Iterable[Route] | object) -> RouteTable:
    """Compile routes into a ``RouteTable``.

    Accepts a ``RouteList``, any iterable of ``Route``, or an object with a
    ``routes`` attribute holding one (such as a ``RouteBuilder``).
    """
    source = routes.routes if hasattr(routes, "routes") else routes
    table = RouteTable()
    for route in source:  # type: ignore[union-attr]
        if not isinstance(route, Route):
            msg = f"bind() expects Route objects, got {type(route).__name__}."
            raise ConfigurationError(msg)
        table.add(route)
    table.compile()

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("*" * 60)
        logger.debug("All registered routes:")
        for route in table.routes:
            logger.debug("%s %s", route.verb, route.path)
        logger.debug("*" * 60)
    return table
