"""Route source import resolution — ``"module:attribute"`` to a route table source.

Shared utility used by every ``perch`` subcommand to locate the route
table (or route table builder) named on the command line.
"""

import importlib
from collections.abc import Iterable
from typing import Any


def resolve_routes(import_string: str) -> Any:
    """Resolve an import string to a route table source.

    Accepts ``"module:attribute"`` format.  When the attribute portion
    is omitted, defaults to ``"routes"`` (e.g. ``"myapp"`` resolves to
    ``myapp.routes``).

    The resolved object may be a ``RouteTable``, a list of ``Route``,
    a ``pattern -> builder`` mapping, or a callable returning one of
    those; it is not called here.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object cannot produce a route table.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "routes"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if isinstance(obj, (str, bytes)) or not (callable(obj) or isinstance(obj, Iterable)):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a route table or builder"
        raise TypeError(msg)

    return obj
