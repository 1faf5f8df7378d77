"""``perch routes`` — list routes in declaration order."""

import argparse
import sys

from perch.cli._resolve import resolve_routes
from perch.errors import ConfigurationError
from perch.navigator import build_table


def run_routes(args: argparse.Namespace) -> None:
    """Print a table of #, PATTERN, and builder name for ``args.routes``."""
    try:
        table = build_table(resolve_routes(args.routes))
    except (ModuleNotFoundError, AttributeError, TypeError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if not len(table):
        print("No routes declared.")
        return

    # Build rows: (index, pattern, builder_name)
    rows: list[tuple[str, str, str]] = []
    for route in table:
        builder_name = getattr(route.builder, "__name__", str(route.builder))
        if route.name:
            builder_name = f"{builder_name} ({route.name})"
        rows.append((str(route.index), route.path, builder_name))

    max_index = max(max(len(r[0]) for r in rows), 1)  # "#" header
    max_path = max(max(len(r[1]) for r in rows), 7)  # "PATTERN" header

    fmt = f"{{:>{max_index}}}  {{:<{max_path}}}  {{}}"
    print(fmt.format("#", "PATTERN", "BUILDER"))
    sep_len = max_index + max_path + 4 + max((len(r[2]) for r in rows), default=0)
    print("-" * min(sep_len, 80))
    for index, path, builder_name in rows:
        print(fmt.format(index, path, builder_name))
