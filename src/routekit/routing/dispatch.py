"""Dispatch — run a matched route's middleware chain and handler.

Middleware uses the ``mw(request, next)`` shape; ``next(request)`` runs
the rest of the chain. Handlers receive the request plus the matched
path parameters as keyword arguments::

    async def auth(request, next):
        if not request.user:
            return "denied"
        return await next(request)

    def audit(request, next):
        response = next(request)
        log.info("served %s", response)
        return response

    def show(request, photo_id):
        return f"photo {photo_id}"

Callables may be ``def`` or ``async def``. Sync callables run on a
worker thread so they never block the event loop; a sync middleware gets
a blocking ``next`` that hands the rest of the chain back to the loop.
"""

from __future__ import annotations

import functools
import inspect
from collections.abc import Awaitable, Callable
from typing import Any, TypeAlias

import anyio.from_thread
import anyio.to_thread

from routekit.routing.table import RouteTable

Next: TypeAlias = Callable[[Any], Awaitable[Any]]


async def call(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Call *func*, awaiting coroutine functions and offloading sync ones."""
    if inspect.iscoroutinefunction(func):
        return await func(*args, **kwargs)
    result = await anyio.to_thread.run_sync(functools.partial(func, *args, **kwargs))
    if inspect.isawaitable(result):
        result = await result
    return result


def blocking_next(next_step: Next) -> Callable[[Any], Any]:
    """Wrap an async ``next`` for middleware running on a worker thread."""

    def run(request: Any) -> Any:
        return anyio.from_thread.run(next_step, request)

    return run


def build_chain(
    middlewares: tuple[Callable[..., Any], ...],
    endpoint: Next,
) -> Next:
    """Wrap *endpoint* so the first middleware runs outermost."""
    handler = endpoint
    for mw in reversed(middlewares):

        async def step(request: Any, _mw: Callable[..., Any] = mw, _next: Next = handler) -> Any:
            if inspect.iscoroutinefunction(_mw):
                return await _mw(request, _next)
            return await call(_mw, request, blocking_next(_next))

        handler = step
    return handler


async def dispatch(table: RouteTable, method: str, path: str, request: Any = None) -> Any:
    """Match *method* and *path*, then run the route's pipeline on *request*.

    Raises ``NotFound`` / ``MethodNotAllowed`` from matching unchanged.
    """
    match = table.match(method, path)
    route = match.route

    async def endpoint(req: Any) -> Any:
        return await call(route.handler, req, **match.path_params)

    return await build_chain(route.middlewares, endpoint)(request)
