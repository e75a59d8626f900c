"""Shared type aliases used across routekit modules."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, TypeAlias

# Route handler — user-defined function with variable signature
Handler: TypeAlias = Callable[..., Any]

# Middleware: inline callable or the name of a middleware module/class
MiddlewareRef: TypeAlias = str | Callable[..., Any]
MiddlewareSpec: TypeAlias = MiddlewareRef | Sequence[MiddlewareRef]

# Resolution capability: namespace string in, controller/middleware object out
Resolve: TypeAlias = Callable[[str], Any]
