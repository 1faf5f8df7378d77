"""Route table — ordered, first-match-wins lookup.

Routes are tried in declaration order.  When two routes can match the
same sub-location the earlier one always wins, regardless of how
specific its constraints are::

    table = RouteTable([
        Route("/:id", show_anything),
        Route("/:id(\\d+)", show_number),   # never reached for "/42"
    ])

``perch.checks`` reports such shadowed routes without forbidding them.
"""

from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from dataclasses import replace
from typing import Any

from perch.errors import ConfigurationError
from perch.query import QueryParams
from perch.routing.route import Route, RouteMatch, merge_args

# Called with RouteData for an unmatched location; returns Page, Redirect, or a payload
UnknownRouteHook = Callable[..., Any]


class RouteTable:
    """An immutable, ordered sequence of routes.

    Usage::

        table = RouteTable([
            Route("/", home),
            Route("/family/:fid", family),
            Route("/family/:fid/person/:pid", person),
        ])
        match = table.find_first_match(("family", "f1"))
        match.path_params  # {"fid": "f1"}

    A mapping of ``pattern -> builder`` is accepted as shorthand; its
    iteration order is the declaration order.
    """

    __slots__ = ("_by_name", "_routes", "on_unknown")

    def __init__(
        self,
        routes: Iterable[Route] | Mapping[str, Callable[..., Any]] = (),
        *,
        on_unknown: UnknownRouteHook | None = None,
    ) -> None:
        if isinstance(routes, Mapping):
            routes = [Route(path, builder) for path, builder in routes.items()]

        compiled: list[Route] = []
        by_name: dict[str, Route] = {}
        for index, route in enumerate(routes):
            if not isinstance(route, Route):
                msg = f"Route table entries must be Route instances, got {type(route).__name__}"
                raise ConfigurationError(msg)
            route = replace(route, index=index)
            if route.name is not None:
                if route.name in by_name:
                    msg = f"Duplicate route name {route.name!r}"
                    raise ConfigurationError(msg)
                by_name[route.name] = route
            compiled.append(route)

        if on_unknown is not None and not callable(on_unknown):
            msg = "on_unknown must be callable"
            raise ConfigurationError(msg)

        object.__setattr__(self, "_routes", tuple(compiled))
        object.__setattr__(self, "_by_name", by_name)
        object.__setattr__(self, "on_unknown", on_unknown)

    def __setattr__(self, name: str, value: object) -> None:
        msg = "RouteTable is immutable"
        raise AttributeError(msg)

    def __iter__(self) -> Iterator[Route]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def __getitem__(self, index: int) -> Route:
        return self._routes[index]

    def __repr__(self) -> str:
        return f"RouteTable({[r.path for r in self._routes]!r})"

    @property
    def routes(self) -> tuple[Route, ...]:
        return self._routes

    def find_first_match(
        self,
        segments: Sequence[str],
        raw_segments: Sequence[str] | None = None,
        query: QueryParams | None = None,
    ) -> RouteMatch | None:
        """Return the first route whose pattern accounts for exactly *segments*.

        *query*, when given, is merged into ``RouteMatch.args`` behind the
        path parameters.  Returns ``None`` if no route matches.
        """
        for route in self._routes:
            result = route.pattern.try_match(segments, raw_segments)
            if result is None:
                continue
            return RouteMatch(
                route=route,
                path_params=result.params,
                args=merge_args(result.params, query or QueryParams()),
            )
        return None

    def get(self, name: str) -> Route | None:
        """Return the route declared with *name*, if any."""
        return self._by_name.get(name)

    def url_for(self, name: str, /, **params: object) -> str:
        """Build a location for the named route.

        Raises ``KeyError`` for an unknown route name or a missing
        parameter, ``ValueError`` for a value violating a constraint.
        """
        route = self._by_name.get(name)
        if route is None:
            msg = f"No route named {name!r}"
            raise KeyError(msg)
        return route.pattern.build(params)


def as_table(
    routes: RouteTable | Iterable[Route] | Mapping[str, Callable[..., Any]],
) -> RouteTable:
    """Coerce whatever a route table builder returned into a ``RouteTable``."""
    if isinstance(routes, RouteTable):
        return routes
    return RouteTable(routes)
