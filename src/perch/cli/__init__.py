"""Perch CLI — inspect, resolve, and validate route tables.

Entry point registered as ``perch`` in ``pyproject.toml``::

    [project.scripts]
    perch = "perch.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``perch`` command."""
    parser = argparse.ArgumentParser(
        prog="perch",
        description="Perch — declarative location-to-page-stack routing.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- perch routes -----------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List routes in declaration order")
    routes_parser.add_argument(
        "routes",
        help="Import string of a route table or builder (e.g. myapp.routes:build_routes)",
    )

    # -- perch resolve ----------------------------------------------------
    resolve_parser = subparsers.add_parser("resolve", help="Resolve a location to a page stack")
    resolve_parser.add_argument(
        "routes",
        help="Import string of a route table or builder (e.g. myapp.routes:build_routes)",
    )
    resolve_parser.add_argument("location", help="Location to resolve (e.g. /family/f1)")
    resolve_parser.add_argument(
        "--max-redirects",
        type=int,
        default=None,
        help="Redirects allowed before reporting a loop",
    )

    # -- perch check ------------------------------------------------------
    check_parser = subparsers.add_parser("check", help="Validate a route table")
    check_parser.add_argument(
        "routes",
        help="Import string of a route table or builder (e.g. myapp.routes:build_routes)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from perch.cli._routes import run_routes

        run_routes(args)
    elif args.command == "resolve":
        from perch.cli._show import run_resolve

        run_resolve(args)
    elif args.command == "check":
        from perch.cli._check import run_check

        run_check(args)
