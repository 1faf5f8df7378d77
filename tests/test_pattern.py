"""Tests for perch.routing.pattern — pattern compilation and matching."""

import warnings
from pathlib import Path

import pytest

from perch.errors import ConfigurationError, PatternCompileError
from perch.routing import pattern as pattern_module
from perch.routing.pattern import WILDCARD, RoutePattern, compile_pattern, parse_pattern


class TestParsePattern:
    def test_root(self) -> None:
        assert parse_pattern("/") == []

    def test_literals(self) -> None:
        segments = parse_pattern("/family/list")
        assert [s.value for s in segments] == ["family", "list"]
        assert all(not s.is_param for s in segments)

    def test_param(self) -> None:
        segments = parse_pattern("/family/:fid")
        assert segments[1].is_param is True
        assert segments[1].param_name == "fid"
        assert segments[1].constraint is None

    def test_regex_constraint(self) -> None:
        segments = parse_pattern(r"/users/:id(\d+)")
        assert segments[1].param_name == "id"
        assert segments[1].constraint == r"\d+"
        assert segments[1].regex is not None

    def test_named_constraint(self) -> None:
        segments = parse_pattern("/users/:id(int)")
        assert segments[1].constraint == "int"

    def test_nested_groups_in_constraint(self) -> None:
        segments = parse_pattern(r"/api/:version(v(\d+))")
        assert segments[1].constraint == r"v(\d+)"

    def test_slash_inside_constraint_does_not_split(self) -> None:
        segments = parse_pattern("/x/:part(a/b|c)")
        assert len(segments) == 2

    def test_wildcard(self) -> None:
        segments = parse_pattern("/files/*")
        assert segments[-1].is_wildcard is True
        assert segments[-1].param_name == WILDCARD

    def test_encoded_literal_is_decoded(self) -> None:
        assert parse_pattern("/hello%20world")[0].value == "hello world"

    def test_parenthesis_inside_character_class(self) -> None:
        segments = parse_pattern("/:x([)a]+)")
        assert segments[0].constraint == "[)a]+"
        pattern = compile_pattern("/:x([)a]+)")
        assert pattern.try_match(("a)",)).params == {"x": "a)"}  # type: ignore[union-attr]
        assert pattern.try_match(("b",)) is None

    def test_bracket_first_in_character_class(self) -> None:
        segments = parse_pattern("/:x([](]+)/tail")
        assert segments[0].constraint == "[](]+"
        assert segments[1].value == "tail"

    def test_slash_inside_character_class(self) -> None:
        segments = parse_pattern("/:x([/a]+)")
        assert len(segments) == 1

    def test_module_compiles_without_escape_warnings(self) -> None:
        source = Path(pattern_module.__file__).read_text(encoding="utf-8")
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            compile(source, pattern_module.__file__, "exec")


class TestPatternCompileErrors:
    def test_is_configuration_error(self) -> None:
        assert issubclass(PatternCompileError, ConfigurationError)

    def test_duplicate_param(self) -> None:
        with pytest.raises(PatternCompileError, match="duplicate parameter name 'id'"):
            compile_pattern("/a/:id/b/:id")

    def test_unparseable_constraint(self) -> None:
        with pytest.raises(PatternCompileError, match="unparseable constraint"):
            compile_pattern("/a/:id(a{2,1})")

    def test_unterminated_character_class(self) -> None:
        with pytest.raises(PatternCompileError, match="unbalanced"):
            compile_pattern("/a/:id([)")

    def test_unbalanced_parenthesis(self) -> None:
        with pytest.raises(PatternCompileError, match="unbalanced"):
            compile_pattern("/a/:id(\\d+")

    def test_empty_constraint(self) -> None:
        with pytest.raises(PatternCompileError, match="empty constraint"):
            compile_pattern("/a/:id()")

    def test_invalid_name(self) -> None:
        with pytest.raises(PatternCompileError, match="invalid parameter name"):
            compile_pattern("/a/:1st")

    def test_empty_name(self) -> None:
        with pytest.raises(PatternCompileError):
            compile_pattern("/a/:")

    def test_wildcard_not_last(self) -> None:
        with pytest.raises(PatternCompileError, match="last segment"):
            compile_pattern("/*/a")

    def test_missing_leading_slash(self) -> None:
        with pytest.raises(PatternCompileError, match="start with '/'"):
            compile_pattern("family")

    def test_error_carries_pattern(self) -> None:
        with pytest.raises(PatternCompileError) as exc_info:
            compile_pattern("/a/:x/:x")
        assert exc_info.value.pattern == "/a/:x/:x"
        assert "duplicate" in exc_info.value.reason


class TestTryMatch:
    def test_root_matches_empty(self) -> None:
        match = compile_pattern("/").try_match(())
        assert match is not None
        assert match.consumed == 0
        assert match.params == {}

    def test_literal(self) -> None:
        pattern = compile_pattern("/family")
        assert pattern.try_match(("family",)) is not None
        assert pattern.try_match(("Family",)) is None

    def test_must_account_for_all_segments(self) -> None:
        pattern = compile_pattern("/family/:fid")
        assert pattern.try_match(("family",)) is None
        assert pattern.try_match(("family", "f1", "person")) is None

    def test_params(self) -> None:
        match = compile_pattern("/family/:fid/person/:pid").try_match(
            ("family", "f1", "person", "p2")
        )
        assert match is not None
        assert match.params == {"fid": "f1", "pid": "p2"}
        assert match.consumed == 4

    def test_param_order_follows_pattern(self) -> None:
        match = compile_pattern("/:b/:a").try_match(("1", "2"))
        assert match is not None
        assert list(match.params) == ["b", "a"]

    def test_regex_constraint(self) -> None:
        pattern = compile_pattern(r"/users/:id(\d+)")
        assert pattern.try_match(("users", "42")) is not None
        assert pattern.try_match(("users", "abc")) is None

    def test_constraint_is_full_match(self) -> None:
        pattern = compile_pattern(r"/users/:id(\d+)")
        assert pattern.try_match(("users", "42x")) is None

    def test_named_constraint(self) -> None:
        pattern = compile_pattern("/users/:id(int)")
        assert pattern.try_match(("users", "-7")) is not None
        assert pattern.try_match(("users", "seven")) is None

    def test_constraint_checks_raw_value_capture_is_decoded(self) -> None:
        pattern = compile_pattern("/notes/:title([a-z%0-9]+)")
        match = pattern.try_match(("notes", "a b"), ("notes", "a%20b"))
        assert match is not None
        assert match.params == {"title": "a b"}

    def test_wildcard_consumes_rest(self) -> None:
        match = compile_pattern("/files/*").try_match(("files", "docs", "a.txt"))
        assert match is not None
        assert match.params == {WILDCARD: "docs/a.txt"}
        assert match.consumed == 3

    def test_wildcard_matches_nothing_remaining(self) -> None:
        match = compile_pattern("/files/*").try_match(("files",))
        assert match is not None
        assert match.params == {WILDCARD: ""}

    def test_wildcard_requires_fixed_prefix(self) -> None:
        assert compile_pattern("/files/*").try_match(()) is None


class TestBuild:
    def test_literal(self) -> None:
        assert compile_pattern("/family").build() == "/family"

    def test_root(self) -> None:
        assert compile_pattern("/").build() == "/"

    def test_params_encoded(self) -> None:
        pattern = compile_pattern("/notes/:title")
        assert pattern.build({"title": "a b/c"}) == "/notes/a%20b%2Fc"

    def test_non_string_values(self) -> None:
        assert compile_pattern("/users/:id(int)").build({"id": 42}) == "/users/42"

    def test_missing_param(self) -> None:
        with pytest.raises(KeyError):
            compile_pattern("/users/:id").build({})

    def test_constraint_violation(self) -> None:
        with pytest.raises(ValueError, match="constraint"):
            compile_pattern("/users/:id(int)").build({"id": "abc"})

    def test_wildcard(self) -> None:
        assert compile_pattern("/files/*").build({"*": "docs/a b.txt"}) == "/files/docs/a%20b.txt"

    def test_query(self) -> None:
        location = compile_pattern("/login").build(query={"from": "/family/f1"})
        assert location == "/login?from=%2Ffamily%2Ff1"


class TestRoutePattern:
    def test_immutable(self) -> None:
        pattern = compile_pattern("/a")
        with pytest.raises(AttributeError):
            pattern.pattern = "/b"  # type: ignore[misc]

    def test_compile_is_cached(self) -> None:
        assert compile_pattern("/cached/:x") is compile_pattern("/cached/:x")

    def test_equality_by_structure(self) -> None:
        assert RoutePattern("/a/:x") == RoutePattern("/a/:x/")
        assert RoutePattern("/a/:x") != RoutePattern("/a/:y")

    def test_param_names(self) -> None:
        assert compile_pattern("/a/:x/b/:y/*").param_names == ("x", "y", "*")
