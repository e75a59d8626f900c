"""Handler and middleware resolution.

A route handler is either an inline callable or a ``"Controller.member"``
reference. References are resolved through an external capability
(``resolve(namespace) -> object``) and the member is found by probing
the controller, never by checking its type:

- an instance-level member (a plain method on a class) is bound to a
  fresh instance of the controller;
- a type-level member (static method, class method, or a callable
  attribute of a non-class object such as a module) is used as-is.

Named middleware goes through a separate namespace and must expose a
``handle`` entry point, probed the same way.
"""

from __future__ import annotations

import enum
import inspect
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any, TypeAlias

from routekit._internal.types import MiddlewareRef, Resolve
from routekit.config import RouterConfig
from routekit.errors import (
    InvalidArgumentError,
    MalformedReferenceError,
    MemberNotFoundError,
    MiddlewareHandleNotFoundError,
    ResolutionError,
)


class MemberKind(enum.Enum):
    """How a probed member has to be invoked."""

    INSTANCE = "instance"
    STATIC = "static"


def probe_member(obj: Any, name: str) -> MemberKind | None:
    """Report whether *obj* exposes a callable member called *name*.

    Instance-level membership is checked first, then type-level.
    Private names and anything only inherited from ``object`` never count.
    """
    if not name or name.startswith("_"):
        return None

    if inspect.isclass(obj):
        for klass in obj.__mro__:
            if klass is object:
                return None
            if name in vars(klass):
                attr = vars(klass)[name]
                break
        else:
            return None

        if isinstance(attr, (staticmethod, classmethod)):
            return MemberKind.STATIC
        if inspect.isfunction(attr):
            return MemberKind.INSTANCE
        return MemberKind.STATIC if callable(attr) else None

    attr = getattr(obj, name, None)
    return MemberKind.STATIC if callable(attr) else None


def probe_members(obj: Any, names: Iterable[str]) -> dict[str, MemberKind]:
    """Capability descriptor: the subset of *names* that *obj* supports."""
    supported: dict[str, MemberKind] = {}
    for name in names:
        kind = probe_member(obj, name)
        if kind is not None:
            supported[name] = kind
    return supported


def bind_member(obj: Any, name: str, kind: MemberKind) -> Callable[..., Any]:
    """Return the callable for a probed member."""
    if kind is MemberKind.INSTANCE:
        return getattr(obj(), name)
    return getattr(obj, name)


@dataclass(frozen=True, slots=True)
class InlineCallable:
    """A handler given directly as a callable."""

    func: Callable[..., Any]


@dataclass(frozen=True, slots=True)
class ControllerReference:
    """A handler given as ``"Controller.member"``."""

    controller: str
    member: str

    def __str__(self) -> str:
        return f"{self.controller}.{self.member}"


HandlerTarget: TypeAlias = InlineCallable | ControllerReference


def parse_target(target: Any, separator: str = ".") -> HandlerTarget:
    """Classify a handler argument.

    The reference is split at the last *separator*, so the controller part
    may itself be dotted (``"admin.UserController.index"``).
    """
    if callable(target):
        return InlineCallable(target)
    if isinstance(target, str):
        controller, sep, member = target.rpartition(separator)
        if not sep or not controller or not member:
            msg = (
                f"Handler reference {target!r} must be written as "
                f"'Controller{separator}member'."
            )
            raise MalformedReferenceError(msg)
        return ControllerReference(controller, member)
    msg = f"Handler must be a callable or a controller reference string, got {type(target).__name__}."
    raise InvalidArgumentError(msg)


class Resolver:
    """Turns handler targets and middleware references into callables.

    Usage::

        resolver = Resolver(loader.resolve, RouterConfig())
        handler = resolver.resolve_handler("UserController.index")
        middlewares = resolver.resolve_middlewares(["Auth", audit])
    """

    __slots__ = ("_config", "_resolve")

    def __init__(self, resolve: Resolve, config: RouterConfig | None = None) -> None:
        self._resolve = resolve
        self._config = config or RouterConfig()

    @property
    def config(self) -> RouterConfig:
        return self._config

    # -- Namespace lookup --

    def _lookup(self, namespace: str) -> Any:
        try:
            return self._resolve(namespace)
        except ResolutionError:
            raise
        except (ImportError, LookupError, AttributeError) as exc:
            msg = f"Cannot resolve {namespace!r}: {exc}"
            raise ResolutionError(msg) from exc

    def controller(self, name: str) -> Any:
        """Resolve a controller name through the controller namespace."""
        return self._lookup(self._config.controller_namespace(name))

    def middleware(self, name: str) -> Any:
        """Resolve a middleware name through the middleware namespace."""
        return self._lookup(self._config.middleware_namespace(name))

    # -- Handlers --

    def resolve_handler(self, target: Any) -> Callable[..., Any]:
        """Resolve a callable or ``"Controller.member"`` to a callable."""
        parsed = parse_target(target, self._config.reference_separator)
        if isinstance(parsed, InlineCallable):
            return parsed.func

        controller = self.controller(parsed.controller)
        kind = probe_member(controller, parsed.member)
        if kind is None:
            msg = (
                f"Member {parsed.member!r} does not exist on controller "
                f"{self._config.controller_namespace(parsed.controller)!r}."
            )
            raise MemberNotFoundError(msg)
        return bind_member(controller, parsed.member, kind)

    def supported_members(self, controller_name: str, names: Iterable[str]) -> dict[str, MemberKind]:
        """Resolve a controller and report which of *names* it supports."""
        return probe_members(self.controller(controller_name), names)

    # -- Middleware --

    def resolve_middleware(self, ref: MiddlewareRef) -> Callable[..., Any]:
        """Resolve one middleware reference to its callable entry point."""
        if callable(ref):
            return ref
        if isinstance(ref, str):
            entry = self._config.middleware_entry
            middleware = self.middleware(ref)
            kind = probe_member(middleware, entry)
            if kind is None:
                msg = (
                    f"Middleware {self._config.middleware_namespace(ref)!r} "
                    f"has no {entry!r} entry point."
                )
                raise MiddlewareHandleNotFoundError(msg)
            return bind_member(middleware, entry, kind)
        msg = f"Middleware must be a name or a callable, got {type(ref).__name__}."
        raise InvalidArgumentError(msg)

    def resolve_middlewares(
        self, refs: MiddlewareRef | Sequence[MiddlewareRef]
    ) -> tuple[Callable[..., Any], ...]:
        """Resolve a single reference or a sequence of them, keeping order."""
        if isinstance(refs, str) or callable(refs):
            return (self.resolve_middleware(refs),)
        return tuple(self.resolve_middleware(ref) for ref in refs)
