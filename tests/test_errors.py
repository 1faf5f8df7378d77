"""Tests for perch.errors — exception hierarchy and messages."""

import dataclasses

import pytest

from perch.errors import (
    BuilderConstructionError,
    ConfigurationError,
    NavigationError,
    NoMatchError,
    PatternCompileError,
    PerchError,
    RedirectLoopError,
    ReentrantNavigationError,
    ResolutionError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "exc_type",
        [ConfigurationError, PatternCompileError, ResolutionError, NavigationError],
    )
    def test_all_are_perch_errors(self, exc_type: type[Exception]) -> None:
        assert issubclass(exc_type, PerchError)

    def test_pattern_error_is_configuration_error(self) -> None:
        assert issubclass(PatternCompileError, ConfigurationError)

    @pytest.mark.parametrize("exc_type", [NoMatchError, BuilderConstructionError, RedirectLoopError])
    def test_recovered_errors(self, exc_type: type[Exception]) -> None:
        assert issubclass(exc_type, ResolutionError)

    def test_reentrant_is_navigation_error(self) -> None:
        assert issubclass(ReentrantNavigationError, NavigationError)


class TestPatternCompileError:
    def test_message(self) -> None:
        exc = PatternCompileError("/:a/:a", "duplicate parameter name 'a'")
        assert str(exc) == "Invalid route pattern '/:a/:a': duplicate parameter name 'a'"
        assert exc.pattern == "/:a/:a"
        assert exc.reason == "duplicate parameter name 'a'"


class TestResolutionErrors:
    def test_no_match_default_detail(self) -> None:
        exc = NoMatchError("/nope")
        assert exc.location == "/nope"
        assert str(exc) == "/nope: No route matches this location"

    def test_no_match_custom_detail(self) -> None:
        assert NoMatchError("/x", "gone").detail == "gone"

    def test_builder_error(self) -> None:
        exc = BuilderConstructionError("/family/f1/person/p2", key="/family/f1")
        assert exc.key == "/family/f1"
        assert exc.detail == "Builder for '/family/f1' failed"

    def test_redirect_loop(self) -> None:
        exc = RedirectLoopError("/a", hops=("/a", "/b", "/a"))
        assert exc.hops == ("/a", "/b", "/a")
        assert exc.detail == "Redirect loop after 2 redirects: /a -> /b -> /a"

    def test_location_only(self) -> None:
        assert str(ResolutionError("/x")) == "/x"

    def test_frozen(self) -> None:
        exc = NoMatchError("/x")
        with pytest.raises(dataclasses.FrozenInstanceError):
            exc.location = "/y"  # type: ignore[misc]

    def test_raisable(self) -> None:
        with pytest.raises(ResolutionError, match="No route"):
            raise NoMatchError("/x")
