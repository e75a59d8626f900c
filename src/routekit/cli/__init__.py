"""routekit CLI — inspect declared routes.

Entry point registered as ``routekit`` in ``pyproject.toml``::

    [project.scripts]
    routekit = "routekit.cli:main"
"""

from __future__ import annotations

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``routekit`` command."""
    parser = argparse.ArgumentParser(
        prog="routekit",
        description="routekit — declarative route registration.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- routekit routes --------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List declared routes")
    routes_parser.add_argument(
        "builder",
        help="Import string (e.g. myapp.routes:router)",
    )
    routes_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every registration while the routes module is imported",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from routekit.cli._routes import run_routes

        run_routes(args)
