"""Perch exception hierarchy.

Shared across the pattern compiler, resolver, redirect engine, and
navigator so every module raises and catches the same types.

Two families live here.  Exceptions that *propagate* (``ConfigurationError``,
``PatternCompileError``, ``NavigationError``) signal programming mistakes
in route declarations or host integration.  ``ResolutionError`` and its
subclasses are *recovered*: the resolver instantiates them and attaches
them to an ``ErrorStack`` diagnostic instead of raising them to callers.
"""

from dataclasses import dataclass


class PerchError(Exception):
    """Base for all perch-specific errors."""


class ConfigurationError(PerchError):
    """Raised when configuration or a route declaration is invalid.

    Surfaced immediately at table-build time, never recovered.
    """


class PatternCompileError(ConfigurationError):
    """A route pattern string could not be compiled.

    Raised for duplicate parameter names, invalid parameter names,
    unparseable constraints, and misplaced wildcards.
    """

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid route pattern {pattern!r}: {reason}")


@dataclass(frozen=True, slots=True)
class ResolutionError(PerchError):
    """A recovered failure while resolving a location.

    Never raised out of ``resolve()``; carried by ``Diagnostic.error``
    so the host always receives a renderable stack.
    """

    location: str
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.location}: {self.detail}"
        return self.location


class NoMatchError(ResolutionError):
    """The full location matched no route."""

    def __init__(self, location: str, detail: str = "") -> None:
        super().__init__(location=location, detail=detail or "No route matches this location")


class BuilderConstructionError(ResolutionError):
    """A route builder failed while producing a page.

    ``key`` is the sub-location whose builder failed.  The original
    exception, when there is one, is available as ``__cause__``.
    """

    key: str

    def __init__(self, location: str, key: str, detail: str = "") -> None:
        super().__init__(
            location=location,
            detail=detail or f"Builder for {key!r} failed",
        )
        object.__setattr__(self, "key", key)


class RedirectLoopError(ResolutionError):
    """The redirect counter exceeded ``NavigatorConfig.max_redirects``."""

    hops: tuple[str, ...]

    def __init__(self, location: str, hops: tuple[str, ...], detail: str = "") -> None:
        chain = " -> ".join(hops)
        super().__init__(
            location=location,
            detail=detail or f"Redirect loop after {len(hops) - 1} redirects: {chain}",
        )
        object.__setattr__(self, "hops", hops)


class NavigationError(PerchError):
    """The navigator was driven in a way it cannot honour."""


class ReentrantNavigationError(NavigationError):
    """Navigation was requested while a resolution is in flight.

    Raised when a route builder calls back into the same ``Navigator``
    on the same thread while that navigator is resolving.
    """
