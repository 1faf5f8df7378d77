"""``perch resolve`` — resolve a location and print the resulting stack.

Exits with code 1 when resolution produces an error stack.
"""

import argparse
import sys

from perch.cli._resolve import resolve_routes
from perch.config import NavigatorConfig
from perch.errors import ConfigurationError
from perch.navigator import resolve
from perch.stack import ErrorStack


def run_resolve(args: argparse.Namespace) -> None:
    """Resolve ``args.location`` against ``args.routes`` and print each entry."""
    try:
        source = resolve_routes(args.routes)
        config = NavigatorConfig()
        if args.max_redirects is not None:
            config = NavigatorConfig(max_redirects=args.max_redirects)
        stack = resolve(args.location, source, config=config)
    except (ModuleNotFoundError, AttributeError, TypeError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if isinstance(stack, ErrorStack):
        diagnostic = stack.diagnostic
        print(f"{diagnostic.kind}: {diagnostic.message}", file=sys.stderr)
        raise SystemExit(1)

    max_key = max(max(len(entry.key) for entry in stack), 3)  # "KEY" header
    max_route = max(max(len(entry.route.path) if entry.route else 0 for entry in stack), 5)

    fmt = f"{{:<{max_key}}}  {{:<{max_route}}}  {{}}"
    print(fmt.format("KEY", "ROUTE", "PAYLOAD"))
    print("-" * min(max_key + max_route + 11, 80))
    for entry in stack:
        route_path = entry.route.path if entry.route else ""
        print(fmt.format(entry.key, route_path, repr(entry.payload)))
