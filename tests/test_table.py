"""Tests for perch.routing.table — ordered first-match-wins route table."""

import pytest

from perch.errors import ConfigurationError
from perch.query import QueryParams
from perch.routing.route import Route
from perch.routing.table import RouteTable, as_table


def _builder() -> str:
    return "page"


def _route(path: str, name: str | None = None) -> Route:
    return Route(path, _builder, name=name)


class TestRouteTable:
    def test_declaration_order_indexed(self) -> None:
        table = RouteTable([_route("/"), _route("/a"), _route("/b")])
        assert [r.index for r in table] == [0, 1, 2]
        assert [r.path for r in table] == ["/", "/a", "/b"]

    def test_len_and_getitem(self) -> None:
        table = RouteTable([_route("/"), _route("/a")])
        assert len(table) == 2
        assert table[1].path == "/a"

    def test_mapping_shorthand(self) -> None:
        table = RouteTable({"/": _builder, "/family/:fid": _builder})
        assert [r.path for r in table] == ["/", "/family/:fid"]

    def test_rejects_non_routes(self) -> None:
        with pytest.raises(ConfigurationError, match="Route instances"):
            RouteTable(["/"])  # type: ignore[list-item]

    def test_duplicate_names_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="Duplicate route name"):
            RouteTable([_route("/a", name="x"), _route("/b", name="x")])

    def test_on_unknown_must_be_callable(self) -> None:
        with pytest.raises(ConfigurationError):
            RouteTable([], on_unknown="nope")  # type: ignore[arg-type]

    def test_immutable(self) -> None:
        table = RouteTable([_route("/")])
        with pytest.raises(AttributeError):
            table.on_unknown = None  # type: ignore[misc]


class TestFindFirstMatch:
    def test_no_match(self) -> None:
        table = RouteTable([_route("/")])
        assert table.find_first_match(("missing",)) is None

    def test_exact_segments_only(self) -> None:
        table = RouteTable([_route("/family")])
        assert table.find_first_match(("family", "f1")) is None

    def test_first_declared_wins(self) -> None:
        table = RouteTable([_route("/:id"), _route(r"/:id(\d+)")])
        match = table.find_first_match(("abc",))
        assert match is not None
        assert match.route.path == "/:id"

    def test_first_declared_wins_over_more_specific(self) -> None:
        table = RouteTable([_route("/:id"), _route(r"/:id(\d+)")])
        match = table.find_first_match(("42",))
        assert match is not None
        assert match.route.index == 0

    def test_falls_through_failed_constraint(self) -> None:
        table = RouteTable([_route(r"/:id(\d+)"), _route("/:name")])
        match = table.find_first_match(("abc",))
        assert match is not None
        assert match.route.path == "/:name"
        assert match.path_params == {"name": "abc"}

    def test_query_merged_into_args(self) -> None:
        table = RouteTable([_route("/login/:from")])
        match = table.find_first_match(("login", "path"), query=QueryParams("from=query&x=1"))
        assert match is not None
        assert match.path_params == {"from": "path"}
        assert match.args == {"from": "path", "x": "1"}


class TestNamedRoutes:
    def test_get(self) -> None:
        table = RouteTable([_route("/family/:fid", name="family")])
        route = table.get("family")
        assert route is not None
        assert route.path == "/family/:fid"
        assert table.get("missing") is None

    def test_url_for(self) -> None:
        table = RouteTable([_route("/family/:fid/person/:pid", name="person")])
        assert table.url_for("person", fid="f1", pid="p2") == "/family/f1/person/p2"

    def test_url_for_unknown_name(self) -> None:
        with pytest.raises(KeyError):
            RouteTable([]).url_for("missing")


class TestAsTable:
    def test_passthrough(self) -> None:
        table = RouteTable([_route("/")])
        assert as_table(table) is table

    def test_list(self) -> None:
        assert len(as_table([_route("/"), _route("/a")])) == 2
