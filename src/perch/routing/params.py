r"""Named parameter constraints.

Shorthands for common segment constraints, so patterns can read
``/users/:id(int)`` instead of ``/users/:id(\d+)``.  Any constraint
text that is not a registered name is compiled as a regular expression.
"""

import re

# (regex_pattern, python_type) for each named constraint
CONSTRAINTS: dict[str, tuple[str, type]] = {
    "int": (r"-?\d+", int),
    "float": (r"-?\d+(?:\.\d+)?", float),
    "alpha": (r"[A-Za-z]+", str),
    "slug": (r"[a-z0-9]+(?:-[a-z0-9]+)*", str),
    "uuid": (r"[0-9a-fA-F]{8}-(?:[0-9a-fA-F]{4}-){3}[0-9a-fA-F]{12}", str),
}


def constraint_regex(constraint: str) -> re.Pattern[str]:
    """Compile a constraint into a regex matched against a whole segment.

    Registered names expand to their pattern.  Raises ``re.error`` if
    the constraint is neither a registered name nor a valid regex.
    """
    pattern, _ = CONSTRAINTS.get(constraint, (constraint, str))
    return re.compile(pattern)


def convert_param(value: str, constraint: str | None) -> str | int | float:
    """Convert a captured value to the type its named constraint implies.

    Unnamed (regex) constraints and unconstrained params stay strings.
    """
    if constraint is None or constraint not in CONSTRAINTS:
        return value
    _, target_type = CONSTRAINTS[constraint]
    return target_type(value)
