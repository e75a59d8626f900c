"""routekit exception hierarchy.

Shared across the builder, the loader, and the route table so every
module raises and catches the same types. Construction errors also
inherit from the closest builtin so callers can catch them generically.
"""

from __future__ import annotations

from dataclasses import dataclass


class RoutekitError(Exception):
    """Base for all routekit-specific errors."""


class ConfigurationError(RoutekitError):
    """Raised when router configuration is invalid.

    Also raised when routes are added to an already compiled table.
    """


class InvalidArgumentError(RoutekitError, TypeError):
    """An argument has the wrong shape for its position.

    Example: the second argument to ``group()`` is neither a config
    mapping nor a callable.
    """


class MalformedReferenceError(RoutekitError, ValueError):
    """A string handler reference lacks the controller/member separator."""


class ResolutionError(RoutekitError, LookupError):
    """A namespace could not be resolved to an object."""


class MemberNotFoundError(RoutekitError, AttributeError):
    """A resolved controller has neither an instance nor a static member of that name."""


class MiddlewareHandleNotFoundError(MemberNotFoundError):
    """A named middleware resolved to an object without a ``handle`` entry point."""


@dataclass(frozen=True, slots=True)
class HTTPError(RoutekitError):
    """An error that maps directly to an HTTP status code.

    Raised by ``RouteTable.match()`` so a binder can translate it into a
    response.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """405 — route exists but not for this HTTP method.

    Carries an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
