"""Route table checks — static validation of route declarations.

First-match-wins is a documented property, not a defect, so a route
that can never be reached because an earlier route already accounts
for every location it matches is *reported*, not rejected::

    Route("/:id", show_anything)
    Route("/:id(\\d+)", show_number)   # WARNING: shadowed by '/:id'

Usage::

    result = check_routes(build_routes)
    print(result.summary())

    # Or via CLI:
    #   perch check myapp.routes:build_routes
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from perch.errors import ConfigurationError
from perch.resolver import RESERVED_NAMES

if TYPE_CHECKING:
    from perch.navigator import RouteSource
    from perch.routing.pattern import PatternSegment, RoutePattern

# ---------------------------------------------------------------------------
# Issue types
# ---------------------------------------------------------------------------


class Severity(Enum):
    """Severity of a route table issue."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True, slots=True)
class Issue:
    """A single problem found in a route table."""

    severity: Severity
    category: str
    message: str
    route: str | None = None
    details: str | None = None


@dataclass(slots=True)
class CheckResult:
    """Result of checking a route table."""

    issues: list[Issue] = field(default_factory=list)
    routes_checked: int = 0

    @property
    def errors(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def ok(self) -> bool:
        return not self.errors

    def summary(self) -> str:
        """Human-readable summary."""
        lines = [f"Checked {self.routes_checked} routes."]
        if self.ok and not self.warnings:
            lines.append("No issues found.")
        elif self.ok:
            lines.append(f"No errors. {len(self.warnings)} warning(s).")
        else:
            lines.append(f"{len(self.errors)} error(s), {len(self.warnings)} warning(s).")
        for issue in self.issues:
            prefix = issue.severity.value.upper()
            loc = f" ({issue.route})" if issue.route else ""
            lines.append(f"  [{prefix}] {issue.message}{loc}")
            if issue.details:
                lines.append(f"           {issue.details}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Shadowing
# ---------------------------------------------------------------------------


def _segment_covers(earlier: PatternSegment, later: PatternSegment) -> bool:
    """True if every value *later* accepts is also accepted by *earlier*."""
    if not earlier.is_param:
        return not later.is_param and earlier.value == later.value
    if earlier.regex is None:
        return True
    if not later.is_param:
        return earlier.regex.fullmatch(quote(later.value, safe="")) is not None
    return later.constraint == earlier.constraint


def covers(earlier: RoutePattern, later: RoutePattern) -> bool:
    """True if *earlier* matches every location *later* matches.

    Conservative: constrained parameters only cover each other when
    their constraints are identical.
    """
    early = earlier.segments
    late = later.segments
    early_fixed = early[:-1] if earlier.has_wildcard else early
    late_fixed = late[:-1] if later.has_wildcard else late

    if earlier.has_wildcard:
        if len(early_fixed) > len(late_fixed):
            return False
    elif later.has_wildcard or len(early_fixed) != len(late_fixed):
        return False

    return all(
        _segment_covers(a, b) for a, b in zip(early_fixed, late_fixed, strict=False)
    )


def check_routes(routes: RouteSource, context: Any = None) -> CheckResult:
    """Validate a route table (or route table builder).

    Checks:
    1. **Build**: the table builds and every pattern compiles.
    2. **Reserved names**: no pattern binds ``route`` or ``context``,
       which builders can only read through ``route.args``.
    3. **Shadowing**: no route is unreachable because an earlier route
       matches everything it matches.
    4. **Root**: a ``/`` route exists (informational; stacks for nested
       locations simply start deeper without one).
    """
    from perch.navigator import build_table

    result = CheckResult()
    try:
        table = build_table(routes, context)
    except ConfigurationError as exc:
        result.issues.append(
            Issue(severity=Severity.ERROR, category="build", message=str(exc))
        )
        return result

    result.routes_checked = len(table)
    for route in table:
        reserved = sorted(RESERVED_NAMES.intersection(route.pattern.param_names))
        if reserved:
            names = ", ".join(repr(name) for name in reserved)
            result.issues.append(
                Issue(
                    severity=Severity.WARNING,
                    category="reserved",
                    message=f"Route {route.path!r} binds reserved parameter name(s) {names}",
                    route=route.path,
                    details="Builders receive RouteData and the host context under these names; read the value from route.args",
                )
            )

    for index, route in enumerate(table):
        for earlier in table.routes[:index]:
            if covers(earlier.pattern, route.pattern):
                result.issues.append(
                    Issue(
                        severity=Severity.WARNING,
                        category="shadowed",
                        message=f"Route {route.path!r} is never matched",
                        route=route.path,
                        details=f"Shadowed by earlier route {earlier.path!r} (first match wins)",
                    )
                )
                break

    if not any(route.pattern.try_match(()) is not None for route in table):
        result.issues.append(
            Issue(
                severity=Severity.INFO,
                category="root",
                message="No route for '/'; stacks will not have a root entry",
            )
        )

    return result
