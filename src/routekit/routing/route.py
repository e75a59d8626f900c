"""Route, RouteList, and RouteMatch definitions."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from routekit._internal.types import Handler
from routekit.routing.stack import EffectiveConfig


class Verb(StrEnum):
    """HTTP verb a route is registered for. ``ALL`` matches any method."""

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    ALL = "ALL"


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:    ``/users``  (is_param=False)
    Param:     ``/:id``    (is_param=True, param_name="id")
    Catch-all: ``/*``      (is_param=True, catch_all=True, param_name="wildcard")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    catch_all: bool = False


@dataclass(frozen=True, slots=True)
class Route:
    """A fully resolved route.

    Created once at registration time, never mutated afterwards.
    """

    verb: Verb
    path: str
    handler: Handler
    config: EffectiveConfig = field(default_factory=EffectiveConfig)

    @property
    def alias(self) -> str:
        return self.config.alias

    @property
    def middlewares(self) -> tuple[Callable[..., Any], ...]:
        return self.config.middlewares

    def to_dict(self) -> dict[str, Any]:
        """Plain-mapping view for binders that prefer dicts."""
        return {
            "verb": str(self.verb),
            "path": self.path,
            "handler": self.handler,
            "config": {
                "middlewares": list(self.config.middlewares),
                "alias": self.config.alias,
            },
        }


class RouteList:
    """Append-only, registration-ordered list of routes.

    Order is binding priority: the first registered route wins.
    """

    __slots__ = ("_routes",)

    def __init__(self) -> None:
        self._routes: list[Route] = []

    def append(self, route: Route) -> None:
        self._routes.append(route)

    def to_array(self) -> list[Route]:
        """Return a copy of the routes in registration order."""
        return list(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def __iter__(self) -> Iterator[Route]:
        return iter(self._routes)

    def __getitem__(self, index: int) -> Route:
        return self._routes[index]


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path_params: dict[str, str]
