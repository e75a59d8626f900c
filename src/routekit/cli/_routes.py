"""``routekit routes`` — list declared routes.

Loads a RouteBuilder through the same ``Loader`` that resolves
controllers, then prints every route with verb, path, handler, and alias.
"""

from __future__ import annotations

import argparse
import logging
import sys

from routekit.errors import InvalidArgumentError, RoutekitError
from routekit.loader import Loader
from routekit.routing.builder import RouteBuilder
from routekit.routing.route import Route

DEFAULT_ATTRIBUTE = "router"


def load_builder(target: str, loader: Loader | None = None) -> RouteBuilder:
    """Load the RouteBuilder named by ``"module:attribute"``.

    A bare module path means ``module:router``. A zero-argument factory
    returning a builder is called.

    Raises:
        ResolutionError: If the module or attribute cannot be found.
        InvalidArgumentError: If *target* does not yield a RouteBuilder.
    """
    if ":" not in target:
        target = f"{target}:{DEFAULT_ATTRIBUTE}"
    obj = (loader or Loader()).resolve(target)

    if callable(obj) and not isinstance(obj, RouteBuilder):
        obj = obj()
    if not isinstance(obj, RouteBuilder):
        msg = f"{target!r} resolved to {type(obj).__name__}, not a routekit.RouteBuilder"
        raise InvalidArgumentError(msg)
    return obj


def _handler_name(route: Route) -> str:
    handler = route.handler
    return getattr(handler, "__qualname__", None) or getattr(handler, "__name__", None) or repr(handler)


def format_table(routes: list[Route]) -> list[str]:
    """Render routes as aligned VERB / PATH / HANDLER / ALIAS lines."""
    rows = [(str(r.verb), r.path, _handler_name(r), r.alias) for r in routes]

    max_verb = max([len(r[0]) for r in rows] + [4])  # "VERB" header
    max_path = max([len(r[1]) for r in rows] + [4])  # "PATH" header
    max_handler = max([len(r[2]) for r in rows] + [7])  # "HANDLER" header

    fmt = f"{{:<{max_verb}}}  {{:<{max_path}}}  {{:<{max_handler}}}  {{}}"
    lines = [fmt.format("VERB", "PATH", "HANDLER", "ALIAS").rstrip()]
    sep_len = max_verb + max_path + max_handler + 6 + max((len(r[3]) for r in rows), default=0)
    lines.append("-" * min(sep_len, 80))
    lines.extend(fmt.format(*row).rstrip() for row in rows)
    return lines


def run_routes(args: argparse.Namespace) -> None:
    """Print the routes declared on ``args.builder``."""
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        builder = load_builder(args.builder)
    except RoutekitError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    routes = builder.map()
    if not routes:
        print("No routes registered.")
        return

    for line in format_table(routes):
        print(line)
