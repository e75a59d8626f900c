"""Loader — default namespace resolution for controllers and middleware.

Resolves namespace strings such as ``"app.http.controllers.UserController"``
to Python objects. Lookups are tried in this order:

1. Objects registered in-memory with ``provide()``.
2. ``"module:attribute"`` import strings.
3. Dotted paths as ``module.attribute`` (import the parent, take the
   attribute), then as a whole module. A module works as a controller
   whose functions are its static members.

Results are memoized per loader, so each namespace is imported once.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Mapping
from types import ModuleType
from typing import Any

from routekit.errors import ResolutionError

logger = logging.getLogger("routekit.loader")


class Loader:
    """Namespace-to-object resolver.

    Usage::

        loader = Loader()
        loader.provide("app.http.controllers.HomeController", HomeController)
        router = RouteBuilder(loader.resolve)
    """

    __slots__ = ("_cache", "_providers")

    def __init__(self, providers: Mapping[str, Any] | None = None) -> None:
        self._providers: dict[str, Any] = dict(providers or {})
        self._cache: dict[str, Any] = {}

    def provide(self, namespace: str, obj: Any) -> None:
        """Register *obj* under *namespace*, shadowing any importable module."""
        self._providers[namespace] = obj
        self._cache.pop(namespace, None)

    def clear(self) -> None:
        """Forget memoized resolutions. Providers are kept."""
        self._cache.clear()

    def __contains__(self, namespace: str) -> bool:
        return namespace in self._providers or namespace in self._cache

    def resolve(self, namespace: str) -> Any:
        """Resolve *namespace* to an object.

        Raises:
            ResolutionError: If nothing importable matches *namespace*.
        """
        if namespace in self._providers:
            return self._providers[namespace]
        if namespace in self._cache:
            return self._cache[namespace]

        obj = self._import(namespace)
        self._cache[namespace] = obj
        return obj

    def _import(self, namespace: str) -> Any:
        if not namespace:
            msg = "Cannot resolve an empty namespace."
            raise ResolutionError(msg)

        module_path, colon, attr_name = namespace.partition(":")
        if colon:
            module = _import_module(module_path, namespace)
            return _get_attribute(module, attr_name, namespace)

        parent, dot, attr_name = namespace.rpartition(".")
        if dot:
            try:
                module = importlib.import_module(parent)
            except ImportError:
                module = None
            if module is not None and hasattr(module, attr_name):
                logger.debug("Loaded %s from module %s", attr_name, parent)
                return getattr(module, attr_name)

        return _import_module(namespace, namespace)


def _import_module(module_path: str, namespace: str) -> ModuleType:
    try:
        module = importlib.import_module(module_path)
    except ImportError as exc:
        msg = f"Cannot resolve {namespace!r}: {exc}"
        raise ResolutionError(msg) from exc
    logger.debug("Loaded module %s", module_path)
    return module


def _get_attribute(module: ModuleType, attr_name: str, namespace: str) -> Any:
    try:
        return getattr(module, attr_name)
    except AttributeError as exc:
        msg = f"Cannot resolve {namespace!r}: module {module.__name__!r} has no attribute {attr_name!r}"
        raise ResolutionError(msg) from exc
