"""routekit — declarative route registration for Python web servers.

Describe endpoints with nested groups and resource shorthand; routekit
resolves them into a flat, ordered list of fully specified routes.

Basic usage::

    from routekit import Loader, RouteBuilder, bind

    loader = Loader()
    router = RouteBuilder(loader.resolve)

    def api(r):
        r.get("/users", {"alias": "users"}, "UserController.index")
        r.resource("/photo", "PhotoController")

    router.group("/api", {"middleware": "Auth", "alias": "api."}, api)

    table = bind(router)
    match = table.match("GET", "/api/photo/7")
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigFragment",
    "ConfigStack",
    "ConfigurationError",
    "EffectiveConfig",
    "HTTPError",
    "InvalidArgumentError",
    "Loader",
    "MalformedReferenceError",
    "MemberNotFoundError",
    "MethodNotAllowed",
    "MiddlewareHandleNotFoundError",
    "NotFound",
    "ResolutionError",
    "Route",
    "RouteBuilder",
    "RouteList",
    "RouteTable",
    "RouterConfig",
    "RoutekitError",
    "Verb",
    "bind",
    "dispatch",
]

_ERRORS = (
    "ConfigurationError",
    "HTTPError",
    "InvalidArgumentError",
    "MalformedReferenceError",
    "MemberNotFoundError",
    "MethodNotAllowed",
    "MiddlewareHandleNotFoundError",
    "NotFound",
    "ResolutionError",
    "RoutekitError",
)


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import routekit`` fast and avoids importing anyio unless
    dispatch is actually used.
    """
    if name == "RouteBuilder":
        from routekit.routing.builder import RouteBuilder

        return RouteBuilder

    if name == "Loader":
        from routekit.loader import Loader

        return Loader

    if name == "RouterConfig":
        from routekit.config import RouterConfig

        return RouterConfig

    if name in ("ConfigFragment", "ConfigStack", "EffectiveConfig"):
        from routekit.routing import stack as _stack

        return getattr(_stack, name)

    if name in ("Route", "RouteList", "Verb"):
        from routekit.routing import route as _route

        return getattr(_route, name)

    if name in ("RouteTable", "bind"):
        from routekit.routing import table as _table

        return getattr(_table, name)

    if name == "dispatch":
        from routekit.routing.dispatch import dispatch

        return dispatch

    if name in _ERRORS:
        from routekit import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
