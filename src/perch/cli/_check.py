"""``perch check`` — route table validation command.

Prints the check summary to stdout.  Exits with code 1 if errors are
found.
"""

import argparse
import sys

from perch.checks import check_routes
from perch.cli._resolve import resolve_routes


def run_check(args: argparse.Namespace) -> None:
    """Validate the route table named by ``args.routes``."""
    try:
        source = resolve_routes(args.routes)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    result = check_routes(source)
    print(result.summary())
    if not result.ok:
        raise SystemExit(1)
