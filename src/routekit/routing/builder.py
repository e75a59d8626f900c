"""RouteBuilder — the declarative routing DSL.

Routes are declared with per-verb methods, nested ``group()`` scopes, and
``resource()`` CRUD shorthand::

    router = RouteBuilder(loader.resolve)

    def api(r: RouteBuilder) -> None:
        r.get("/users", "UserController.index")
        r.post("/users", {"middleware": ["Auth"], "alias": "users.store"}, "UserController.store")
        r.resource("/photo", "PhotoController")

    router.group("/api", {"middleware": "Throttle", "alias": "api."}, api)

Each scope snapshots the prefix and the config stack, runs its composer
synchronously, and restores both on the way out, even when the composer
raises. Registered routes accumulate in ``router.routes`` in declaration
order.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any, TypeAlias

from routekit._internal.types import Resolve
from routekit.config import RouterConfig
from routekit.errors import InvalidArgumentError
from routekit.routing.resolve import Resolver
from routekit.routing.resource import (
    RESOURCE_ACTIONS,
    RESOURCE_MEMBERS,
    action_alias,
    action_path,
    collapse_separators,
    resource_id_param,
)
from routekit.routing.route import Route, RouteList, Verb
from routekit.routing.stack import EMPTY_FRAGMENT, ConfigFragment, ConfigStack, EffectiveConfig

logger = logging.getLogger("routekit.routing")

Composer: TypeAlias = Callable[["RouteBuilder"], Any]


def _is_config(value: Any) -> bool:
    return isinstance(value, (Mapping, ConfigFragment))


class RouteBuilder:
    """Accumulates fully resolved routes from nested declarations.

    Args:
        resolve: Namespace resolution capability. Defaults to a fresh
            ``routekit.loader.Loader``.
        config: Naming and lookup conventions.
        prefix: Prefix applied to every route this builder registers.
    """

    __slots__ = ("_prefix", "_resolver", "_routes", "_stack", "config")

    def __init__(
        self,
        resolve: Resolve | None = None,
        config: RouterConfig | None = None,
        *,
        prefix: str = "",
    ) -> None:
        self.config: RouterConfig = config or RouterConfig()
        if resolve is None:
            from routekit.loader import Loader

            resolve = Loader().resolve
        self._resolver = Resolver(resolve, self.config)
        self._prefix = prefix
        self._stack = ConfigStack()
        self._routes = RouteList()

    # -- Introspection --

    @property
    def prefix(self) -> str:
        """Prefix of the scope currently being declared."""
        return self._prefix

    @property
    def stack(self) -> ConfigStack:
        """Config fragments of the enclosing scopes, outermost first."""
        return self._stack

    @property
    def routes(self) -> RouteList:
        return self._routes

    def map(self) -> list[Route]:
        """All registered routes in registration order."""
        return self._routes.to_array()

    def effective_config(self, fragment: ConfigFragment | Mapping[str, Any] | None = None) -> EffectiveConfig:
        """Config a route registered here would get, optionally with *fragment* on top."""
        stack = self._stack if fragment is None else self._stack.push(fragment)
        return stack.merge(self._resolver.resolve_middleware)

    # -- Verbs --

    def get(self, uri: str, config_or_handler: Any, handler: Any = None) -> Route:
        return self._register(Verb.GET, self._prefix + uri, config_or_handler, handler)

    def head(self, uri: str, config_or_handler: Any, handler: Any = None) -> Route:
        return self._register(Verb.HEAD, self._prefix + uri, config_or_handler, handler)

    def post(self, uri: str, config_or_handler: Any, handler: Any = None) -> Route:
        return self._register(Verb.POST, self._prefix + uri, config_or_handler, handler)

    def put(self, uri: str, config_or_handler: Any, handler: Any = None) -> Route:
        return self._register(Verb.PUT, self._prefix + uri, config_or_handler, handler)

    def patch(self, uri: str, config_or_handler: Any, handler: Any = None) -> Route:
        return self._register(Verb.PATCH, self._prefix + uri, config_or_handler, handler)

    def delete(self, uri: str, config_or_handler: Any, handler: Any = None) -> Route:
        return self._register(Verb.DELETE, self._prefix + uri, config_or_handler, handler)

    def all(self, uri: str, config_or_handler: Any, handler: Any = None) -> Route:
        """Register a route that matches any HTTP method."""
        return self._register(Verb.ALL, self._prefix + uri, config_or_handler, handler)

    def add(self, verb: Verb | str, uri: str, config_or_handler: Any, handler: Any = None) -> Route:
        """Register a route for a verb given by name (``"GET"``, ``"all"``, ...)."""
        try:
            tag = Verb(str(verb).upper())
        except ValueError as exc:
            msg = f"Unknown HTTP verb {verb!r}. Expected one of {', '.join(Verb)}."
            raise InvalidArgumentError(msg) from exc
        return self._register(tag, self._prefix + uri, config_or_handler, handler)

    def _register(self, verb: Verb, path: str, config_or_handler: Any, handler: Any) -> Route:
        path = collapse_separators(path)

        if _is_config(config_or_handler):
            if handler is None:
                msg = f"{verb} {path!r}: a handler is required after the config argument."
                raise InvalidArgumentError(msg)
            stack = self._stack.push(config_or_handler)
            target = handler
        elif callable(config_or_handler) or isinstance(config_or_handler, str):
            stack = self._stack
            target = config_or_handler
        else:
            msg = (
                f"{verb} {path!r}: second argument must be a config mapping, a handler "
                f"callable, or a controller reference, got {type(config_or_handler).__name__}."
            )
            raise InvalidArgumentError(msg)

        route = Route(
            verb=verb,
            path=path,
            handler=self._resolver.resolve_handler(target),
            config=stack.merge(self._resolver.resolve_middleware),
        )
        self._routes.append(route)

        level = logging.INFO if self.config.log_registrations else logging.DEBUG
        logger.log(level, "registered %s %s (alias=%r)", route.verb, route.path, route.alias)
        return route

    # -- Scopes --

    @contextmanager
    def _scope(self, prefix: str, fragment: ConfigFragment | Mapping[str, Any] | None) -> Iterator[None]:
        """Extend prefix and stack for the duration of the block, then restore them."""
        saved_prefix, saved_stack = self._prefix, self._stack
        try:
            self._prefix = saved_prefix + prefix
            if fragment is not None:
                self._stack = saved_stack.push(fragment)
            yield
        finally:
            self._prefix, self._stack = saved_prefix, saved_stack

    def group(self, prefix: str, config: Any, composer: Composer | None = None) -> None:
        """Declare routes under a shared prefix and config.

        Call shapes::

            router.group("/admin", lambda r: ...)
            router.group("/admin", {"middleware": "Auth", "alias": "admin."}, lambda r: ...)
        """
        if callable(config) and composer is None:
            fragment: ConfigFragment | Mapping[str, Any] = EMPTY_FRAGMENT
            body: Composer = config
        elif _is_config(config) and callable(composer):
            fragment = config
            body = composer
        else:
            msg = (
                f"group({prefix!r}): second argument must be a composer callable, or a config "
                f"mapping followed by a composer callable; got {type(config).__name__}."
            )
            raise InvalidArgumentError(msg)

        with self._scope(prefix, fragment):
            body(self)

    def resource(
        self,
        prefix: str,
        config: Any,
        controller: Any = None,
        extra: Composer | None = None,
    ) -> list[Route]:
        """Register the conventional CRUD routes a controller implements.

        Call shapes::

            router.resource("/photo", "PhotoController")
            router.resource("/photo", "PhotoController", lambda r: ...)
            router.resource("/photo", {"middleware": "Auth"}, "PhotoController")
            router.resource("/photo", {"middleware": "Auth"}, "PhotoController", lambda r: ...)

        Actions the controller does not implement are skipped. The optional
        *extra* composer runs inside the resource scope after expansion.
        """
        fragment: ConfigFragment | Mapping[str, Any] | None
        if isinstance(config, str):
            if extra is not None:
                msg = f"resource({prefix!r}): too many arguments for the controller-name form."
                raise InvalidArgumentError(msg)
            fragment, controller_name, body = None, config, controller
        elif _is_config(config) and isinstance(controller, str):
            fragment, controller_name, body = config, controller, extra
        else:
            msg = (
                f"resource({prefix!r}): second argument must be a controller name, or a config "
                f"mapping followed by a controller name; got {type(config).__name__}."
            )
            raise InvalidArgumentError(msg)

        if body is not None and not callable(body):
            msg = f"resource({prefix!r}): extra composer must be callable, got {type(body).__name__}."
            raise InvalidArgumentError(msg)

        with self._scope(prefix, fragment):
            routes = self._expand_resource(controller_name)
            if body is not None:
                body(self)
        return routes

    def _expand_resource(self, controller_name: str) -> list[Route]:
        prefix = self._prefix
        id_param = resource_id_param(prefix, self.config.default_id_param)
        supported = self._resolver.supported_members(controller_name, RESOURCE_MEMBERS)
        separator = self.config.reference_separator

        routes: list[Route] = []
        for action in RESOURCE_ACTIONS:
            if action.member not in supported:
                continue
            route = self._register(
                action.verb,
                action_path(prefix, action, id_param),
                ConfigFragment(alias=action_alias(prefix, action)),
                f"{controller_name}{separator}{action.member}",
            )
            routes.append(route)

        logger.debug(
            "resource %r -> %s: %d of %d actions",
            prefix,
            controller_name,
            len(routes),
            len(RESOURCE_ACTIONS),
        )
        return routes
