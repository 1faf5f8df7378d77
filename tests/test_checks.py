"""Tests for perch.checks — route table validation."""

from perch.checks import CheckResult, Issue, Severity, check_routes, covers
from perch.results import Page
from perch.routing.pattern import compile_pattern
from perch.routing.route import Route


def _page() -> Page:
    return Page(None)


class TestCovers:
    def test_param_covers_literal(self) -> None:
        assert covers(compile_pattern("/:id"), compile_pattern("/new"))

    def test_literal_does_not_cover_param(self) -> None:
        assert not covers(compile_pattern("/new"), compile_pattern("/:id"))

    def test_param_covers_constrained_param(self) -> None:
        assert covers(compile_pattern("/:id"), compile_pattern("/:n(int)"))

    def test_constrained_does_not_cover_unconstrained(self) -> None:
        assert not covers(compile_pattern("/:n(int)"), compile_pattern("/:id"))

    def test_constraint_checked_against_literal(self) -> None:
        assert covers(compile_pattern("/:n(int)"), compile_pattern("/42"))
        assert not covers(compile_pattern("/:n(int)"), compile_pattern("/new"))

    def test_different_lengths(self) -> None:
        assert not covers(compile_pattern("/:id"), compile_pattern("/a/b"))

    def test_wildcard_covers_deeper(self) -> None:
        assert covers(compile_pattern("/files/*"), compile_pattern("/files/:name/raw"))

    def test_fixed_does_not_cover_wildcard(self) -> None:
        assert not covers(compile_pattern("/files/:name"), compile_pattern("/files/*"))

    def test_root_wildcard_covers_root(self) -> None:
        assert covers(compile_pattern("/*"), compile_pattern("/"))


class TestCheckRoutes:
    def test_clean_table(self) -> None:
        result = check_routes([
            Route("/", _page),
            Route("/family/new", _page),
            Route("/family/:fid", _page),
        ])
        assert result.ok
        assert result.issues == []
        assert result.routes_checked == 3
        assert "No issues found." in result.summary()

    def test_shadowed_route_warned(self) -> None:
        result = check_routes([
            Route("/", _page),
            Route("/family/:fid", _page),
            Route("/family/new", _page),
        ])
        assert result.ok
        assert len(result.warnings) == 1
        issue = result.warnings[0]
        assert issue.category == "shadowed"
        assert issue.route == "/family/new"
        assert "'/family/:fid'" in (issue.details or "")

    def test_reserved_parameter_name_warned(self) -> None:
        result = check_routes([
            Route("/", _page),
            Route("/r/:route", _page),
            Route("/c/:context/:id", _page),
        ])
        assert result.ok
        reserved = [issue for issue in result.warnings if issue.category == "reserved"]
        assert [issue.route for issue in reserved] == ["/r/:route", "/c/:context/:id"]
        assert "'context'" in reserved[1].message

    def test_missing_root_is_info(self) -> None:
        result = check_routes([Route("/login", _page)])
        assert result.ok
        assert not result.warnings
        assert [issue.category for issue in result.issues] == ["root"]

    def test_build_error(self) -> None:
        def broken():
            return [Route("/:a/:a", _page)]

        result = check_routes(broken)
        assert not result.ok
        assert result.errors[0].category == "build"
        assert "duplicate" in result.errors[0].message.lower()

    def test_builder_called_with_context(self) -> None:
        seen = []

        def build(state):
            seen.append(state)
            return [Route("/", _page)]

        check_routes(build, context="state")
        assert seen == ["state"]


class TestCheckResult:
    def test_summary_with_errors(self) -> None:
        result = CheckResult(
            issues=[
                Issue(Severity.ERROR, "build", "broken"),
                Issue(Severity.WARNING, "shadowed", "never", route="/x", details="why"),
            ],
            routes_checked=2,
        )
        summary = result.summary()
        assert "1 error(s), 1 warning(s)." in summary
        assert "[ERROR] broken" in summary
        assert "[WARNING] never (/x)" in summary
        assert "why" in summary

    def test_summary_warnings_only(self) -> None:
        result = CheckResult(issues=[Issue(Severity.WARNING, "shadowed", "never")])
        assert "No errors. 1 warning(s)." in result.summary()
