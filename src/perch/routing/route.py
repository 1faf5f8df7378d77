"""Route, RouteMatch, and RouteData frozen dataclasses."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from perch.errors import ConfigurationError
from perch.query import QueryParams
from perch.routing.pattern import RoutePattern, compile_pattern


@dataclass(frozen=True, slots=True)
class Route:
    """A route declaration: pattern plus page-construction callback.

    The pattern is compiled on creation, so a malformed pattern fails
    when the route table is built, not when a location is resolved.
    ``index`` is the declaration order, assigned by ``RouteTable``.
    """

    path: str
    builder: Callable[..., Any]
    name: str | None = None
    index: int = -1
    pattern: RoutePattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not callable(self.builder):
            msg = f"Route {self.path!r} builder must be callable, got {type(self.builder).__name__}"
            raise ConfigurationError(msg)
        object.__setattr__(self, "pattern", compile_pattern(self.path))


def merge_args(path_params: Mapping[str, str], query: QueryParams) -> dict[str, str]:
    """Merge path parameters with query parameters, first bound wins.

    Path parameters are bound first; a query parameter is only added
    when no path parameter (or earlier query parameter) holds its name.
    """
    args = dict(path_params)
    for key in query:
        args.setdefault(key, query[key])
    return args


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of matching one sub-location against the route table."""

    route: Route
    path_params: dict[str, str]
    args: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class RouteData:
    """Everything a builder knows about the entry it is building.

    Attributes:
        location: The full effective location being resolved.
        path: This entry's sub-location (its stack key).
        path_params: Parameters captured by this entry's pattern.
        query: Query parameters of the full location.
        args: ``path_params`` merged with ``query`` (path wins).
        context: Host-supplied data passed through ``resolve()``.
        route: The matched route.
    """

    location: str
    path: str
    path_params: dict[str, str]
    query: QueryParams
    args: dict[str, str]
    context: Any = None
    route: Route | None = None

    @property
    def is_leaf(self) -> bool:
        """True when this entry is the deepest one (the full location)."""
        return self.path == self.location.partition("?")[0]
