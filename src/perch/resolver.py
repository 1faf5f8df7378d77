"""Location resolver — from a location string to an ordered page stack.

Resolution walks the location's path from the root to the leaf.  Every
prefix (``/``, ``/family``, ``/family/f1``, ...) is looked up in the
route table; prefixes without a route are skipped, but the full
location must match or the whole resolution fails.  Matched entries
are built root first, each builder receiving its own path parameters
merged with the full location's query parameters.

A resolution is all-or-nothing: any failure discards the partially
built entries and yields a single-entry ``ErrorStack``.  A redirect
restarts the whole resolution at its target, except when an ancestor
entry redirects to the very path being resolved: that entry is simply
left out (a root guard redirecting to ``/login`` while ``/login`` is
being resolved).

Builder argument binding, in priority order for each parameter:

1. ``route`` (or a ``RouteData`` annotation): the ``RouteData``
2. ``context``: the host context passed to ``resolve()``
3. Merged arguments by name, coerced through an ``int``/``float``
   annotation or a named pattern constraint
4. ``**kwargs``: every merged argument not bound above

A required parameter none of these bind is a construction failure.
``route`` and ``context`` are reserved: a path or query parameter with
one of those names is still available as ``route.args[name]`` but is
never passed by name.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from perch.config import NavigatorConfig
from perch.errors import BuilderConstructionError, NoMatchError, ResolutionError
from perch.location import Location, normalize_location, parse_location
from perch.redirects import RedirectRequest, follow_redirects
from perch.results import Redirect, as_outcome
from perch.routing.params import convert_param
from perch.routing.route import Route, RouteData, RouteMatch
from perch.routing.table import RouteTable
from perch.stack import Diagnostic, ErrorStack, PageStack, StackEntry

logger = logging.getLogger("perch.resolver")

# Builder parameter names bound to RouteData and the host context, never to arguments
RESERVED_NAMES = frozenset({"route", "context"})


@dataclass(frozen=True, slots=True)
class PendingEntry:
    """A matched sub-location whose page has not been built yet."""

    key: str
    match: RouteMatch


@dataclass(frozen=True, slots=True)
class Failure:
    """A failed resolution attempt.

    ``payload`` overrides the ErrorStack's default payload (set when
    the route table's ``on_unknown`` hook produced a page).
    """

    error: ResolutionError
    payload: Any = None


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------


def match_location(location: Location, table: RouteTable) -> list[PendingEntry] | None:
    """Match every prefix of *location* against *table*.

    Returns the matched entries ordered by increasing prefix length, or
    ``None`` if the full location itself has no route.  Intermediate
    prefixes without a route are left out of the stack, and so are
    prefixes whose route is the leaf's wildcard route: a trailing ``*``
    consumes the rest of the location in a single entry.
    """
    *parents, (_, leaf_raw, leaf_decoded) = location.prefixes()
    leaf = table.find_first_match(leaf_decoded, leaf_raw, location.query)
    if leaf is None:
        logger.debug("No route for %s", location.full)
        return None

    entries: list[PendingEntry] = []
    for key, raw, decoded in parents:
        match = table.find_first_match(decoded, raw, location.query)
        if match is None:
            logger.debug("Skipping %s: no route", key)
            continue
        if match.route.pattern.has_wildcard and match.route.index == leaf.route.index:
            logger.debug("Skipping %s: consumed by %s", key, match.route.path)
            continue
        logger.debug("Matched %s -> %s", key, match.route.path)
        entries.append(PendingEntry(key=key, match=match))

    logger.debug("Matched %s -> %s", location.full, leaf.route.path)
    entries.append(PendingEntry(key=location.full, match=leaf))
    return entries


# ---------------------------------------------------------------------------
# Builder invocation
# ---------------------------------------------------------------------------


def _signature(builder: Callable[..., Any]) -> inspect.Signature | None:
    try:
        return inspect.signature(builder, eval_str=True)
    except NameError:
        return inspect.signature(builder)
    except (TypeError, ValueError):
        return None


def _coerce(value: str, annotation: Any, constraint: str | None) -> Any:
    if annotation in (int, float):
        try:
            return annotation(value)
        except ValueError:
            return value
    if annotation is inspect.Parameter.empty and constraint is not None:
        try:
            return convert_param(value, constraint)
        except ValueError:
            return value
    return value


def _constraints(route: Route | None) -> dict[str, str]:
    if route is None:
        return {}
    return {
        seg.param_name: seg.constraint
        for seg in route.pattern.segments
        if seg.param_name and seg.constraint
    }


def call_builder(builder: Callable[..., Any], data: RouteData) -> Any:
    """Call *builder* with arguments bound from *data*.

    Raises ``TypeError`` if a required parameter cannot be bound.
    """
    sig = _signature(builder)
    if sig is None:
        return builder(data)

    params = list(sig.parameters.values())
    constraints = _constraints(data.route)
    args: list[Any] = []
    kwargs: dict[str, Any] = {}
    bound: set[str] = set()
    var_keyword = False
    unbound: list[inspect.Parameter] = []

    for param in params:
        if param.kind is inspect.Parameter.VAR_KEYWORD:
            var_keyword = True
            continue
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            continue

        if param.name == "route" or param.annotation is RouteData:
            value: Any = data
        elif param.name == "context":
            value = data.context
        elif param.name in data.args:
            value = _coerce(
                data.args[param.name], param.annotation, constraints.get(param.name)
            )
            bound.add(param.name)
        elif param.default is not inspect.Parameter.empty:
            continue
        else:
            unbound.append(param)
            continue

        if param.kind is inspect.Parameter.POSITIONAL_ONLY:
            args.append(value)
        else:
            kwargs[param.name] = value

    if unbound:
        names = ", ".join(p.name for p in unbound)
        msg = f"cannot bind builder parameter(s): {names}"
        raise TypeError(msg)

    if var_keyword:
        for name, raw in data.args.items():
            if name not in bound and name not in kwargs and name.isidentifier():
                kwargs[name] = raw

    return builder(*args, **kwargs)


def build_entry(
    pending: PendingEntry,
    location: Location,
    context: Any,
) -> StackEntry | RedirectRequest | Failure:
    """Invoke the builder for one matched entry."""
    match = pending.match
    data = RouteData(
        location=location.full,
        path=pending.key.partition("?")[0],
        path_params=match.path_params,
        query=location.query,
        args=match.args,
        context=context,
        route=match.route,
    )
    try:
        outcome = as_outcome(call_builder(match.route.builder, data))
    except Exception as exc:
        logger.exception("Builder for %s (%s) failed", pending.key, match.route.path)
        error = BuilderConstructionError(
            location=location.full,
            key=pending.key,
            detail=f"Builder for {pending.key!r} failed: {type(exc).__name__}: {exc}",
        )
        # Frozen dataclass __setattr__ rejects attributes on subclasses
        object.__setattr__(error, "__cause__", exc)
        return Failure(error)

    if outcome is None:
        logger.warning("Builder for %s returned None", pending.key)
        return Failure(
            BuilderConstructionError(
                location=location.full,
                key=pending.key,
                detail=f"Builder for {pending.key!r} returned None",
            )
        )

    if isinstance(outcome, Redirect):
        return RedirectRequest(target=outcome.location, source=data.path)

    return StackEntry(key=pending.key, payload=outcome.payload, route=match.route, args=match.args)


def _unknown(location: Location, table: RouteTable, context: Any) -> RedirectRequest | Failure:
    error = NoMatchError(location=location.full)
    if table.on_unknown is None:
        return Failure(error)

    data = RouteData(
        location=location.full,
        path=location.path,
        path_params={},
        query=location.query,
        args={key: location.query[key] for key in location.query},
        context=context,
    )
    try:
        outcome = as_outcome(call_builder(table.on_unknown, data))
    except Exception as exc:
        logger.exception("on_unknown hook failed for %s", location.full)
        failure = BuilderConstructionError(
            location=location.full,
            key=location.full,
            detail=f"on_unknown failed: {type(exc).__name__}: {exc}",
        )
        object.__setattr__(failure, "__cause__", exc)
        return Failure(failure)

    if isinstance(outcome, Redirect):
        return RedirectRequest(target=outcome.location, source=location.path)
    if outcome is None:
        return Failure(error)
    return Failure(error, payload=outcome.payload)


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def resolve_once(
    location: str,
    table: RouteTable,
    context: Any = None,
) -> PageStack | RedirectRequest | Failure:
    """Resolve *location* without following redirects.

    Returns a complete ``PageStack``, the first ``RedirectRequest`` any
    builder issued, or a ``Failure``.  No partial stack escapes.
    """
    parsed = parse_location(location)
    pending = match_location(parsed, table)
    if pending is None:
        return _unknown(parsed, table, context)

    entries: list[StackEntry] = []
    for depth, item in enumerate(pending):
        result = build_entry(item, parsed, context)
        if isinstance(result, StackEntry):
            entries.append(result)
            continue
        if (
            isinstance(result, RedirectRequest)
            and depth < len(pending) - 1
            and parse_location(result.location).path == parsed.path
        ):
            # An ancestor redirecting to where we already are is satisfied.
            logger.debug("Dropping %s: redirects to the location being resolved", item.key)
            continue
        return result

    stack = PageStack(entries)
    if stack.location.lower() != parsed.full.lower():
        return Failure(
            NoMatchError(
                location=parsed.full,
                detail=f"Resolved stack ends at {stack.location!r}, not {parsed.full!r}",
            )
        )
    return stack


def error_stack(original: str, failure: Failure, config: NavigatorConfig) -> ErrorStack:
    """Wrap a failure in the ErrorStack handed to the host."""
    diagnostic = Diagnostic(
        original_location=original,
        message=str(failure.error),
        error=failure.error,
    )
    payload = failure.payload
    if payload is None and config.error_page is not None:
        try:
            payload = config.error_page(diagnostic)
        except Exception:
            logger.exception("error_page hook failed for %s", original)
            payload = None
    return ErrorStack(diagnostic, payload)


def resolve_location(
    location: str,
    table: RouteTable,
    context: Any = None,
    config: NavigatorConfig | None = None,
) -> PageStack:
    """Resolve *location* against *table*, following redirects.

    Always returns a stack: a complete ``PageStack`` on success, an
    ``ErrorStack`` keyed by *location* on any failure.
    """
    config = config or NavigatorConfig()
    original = normalize_location(location)

    result, tracker = follow_redirects(
        original,
        lambda current: resolve_once(current, table, context),
        config.max_redirects,
    )

    if isinstance(result, PageStack):
        if tracker.count:
            logger.debug("Resolved %s via %d redirect(s) at %s", original, tracker.count, tracker.current)
        return result

    if isinstance(result, ResolutionError):
        failure = Failure(result)
    else:
        failure = result
        logger.warning("Could not resolve %s: %s", original, failure.error)
    return error_stack(original, failure, config)
