"""Config fragments and the scope stack they accumulate in.

Every ``group()``/``resource()`` scope contributes one ConfigFragment.
The fragments enclosing a registration point form a ConfigStack,
outermost first, which folds into one EffectiveConfig per route.

Both types are immutable: ``push()`` returns a new stack, so the builder
can restore a scope by simply keeping the previous value around.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from routekit._internal.types import MiddlewareRef, MiddlewareSpec
from routekit.errors import InvalidArgumentError


@dataclass(frozen=True, slots=True)
class ConfigFragment:
    """One scope's contribution: middleware plus an alias piece.

    ``alias=None`` means the fragment carries no alias at all, which is
    not the same as ``alias=""``. See ``ConfigStack.merge()``.
    """

    middleware: tuple[MiddlewareRef, ...] = ()
    alias: str | None = None

    @classmethod
    def coerce(cls, value: ConfigFragment | Mapping[str, Any]) -> ConfigFragment:
        """Build a fragment from a caller-supplied mapping.

        Recognised keys are ``middleware`` and ``alias`` (``as`` is accepted
        as a synonym). Other keys have no effect.
        """
        if isinstance(value, ConfigFragment):
            return value
        if not isinstance(value, Mapping):
            msg = f"Config must be a mapping or ConfigFragment, got {type(value).__name__}."
            raise InvalidArgumentError(msg)

        alias: str | None = None
        if "alias" in value:
            alias = value["alias"]
        elif "as" in value:
            alias = value["as"]
        if alias is not None and not isinstance(alias, str):
            msg = f"Config alias must be a string, got {type(alias).__name__}."
            raise InvalidArgumentError(msg)

        return cls(middleware=_normalize_middleware(value.get("middleware")), alias=alias)


def _normalize_middleware(spec: MiddlewareSpec | None) -> tuple[MiddlewareRef, ...]:
    """Flatten a middleware spec into a tuple of single references."""
    if spec is None:
        return ()
    if isinstance(spec, str):
        # An empty name is the same as no middleware
        return (spec,) if spec else ()
    if callable(spec):
        return (spec,)
    if isinstance(spec, (list, tuple)):
        refs: list[MiddlewareRef] = []
        for ref in spec:
            if isinstance(ref, str) or callable(ref):
                refs.append(ref)
            else:
                msg = f"Middleware entries must be names or callables, got {type(ref).__name__}."
                raise InvalidArgumentError(msg)
        return tuple(refs)
    msg = f"Middleware must be a name, a callable, or a list of them, got {type(spec).__name__}."
    raise InvalidArgumentError(msg)


EMPTY_FRAGMENT = ConfigFragment()


@dataclass(frozen=True, slots=True)
class EffectiveConfig:
    """The folded configuration a route is registered with."""

    middlewares: tuple[Callable[..., Any], ...] = ()
    alias: str = ""


@dataclass(frozen=True, slots=True)
class ConfigStack:
    """Immutable, outermost-first sequence of config fragments."""

    fragments: tuple[ConfigFragment, ...] = ()

    def push(self, fragment: ConfigFragment | Mapping[str, Any]) -> ConfigStack:
        """Return a new stack with *fragment* appended as the innermost scope."""
        return ConfigStack((*self.fragments, ConfigFragment.coerce(fragment)))

    def merge(
        self,
        resolve_middleware: Callable[[MiddlewareRef], Callable[..., Any]] | None = None,
    ) -> EffectiveConfig:
        """Fold the stack into one EffectiveConfig, outer to inner.

        Middlewares concatenate in stack order; named references go through
        *resolve_middleware* (left as-is when it is None). Aliases concatenate
        too, except that a last fragment without an alias clears the result:
        the innermost, route-specific config has the final say over naming.
        """
        middlewares: list[Callable[..., Any]] = []
        alias = ""
        for fragment in self.fragments:
            for ref in fragment.middleware:
                if resolve_middleware is not None:
                    middlewares.append(resolve_middleware(ref))
                else:
                    middlewares.append(ref)  # type: ignore[arg-type]
            if fragment.alias is not None:
                alias += fragment.alias

        if self.fragments and self.fragments[-1].alias is None:
            alias = ""

        return EffectiveConfig(middlewares=tuple(middlewares), alias=alias)

    @property
    def last(self) -> ConfigFragment | None:
        return self.fragments[-1] if self.fragments else None

    def __len__(self) -> int:
        return len(self.fragments)

    def __iter__(self) -> Iterator[ConfigFragment]:
        return iter(self.fragments)
