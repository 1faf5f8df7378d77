"""Redirect engine — restart resolution when a builder redirects.

A redirect changes the effective full location, and with it the whole
prefix chain, so the engine abandons the current attempt entirely and
runs a fresh one against the target.  The number of hops is capped per
top-level call; the cap is a plain count, so a builder that keeps
redirecting (even to new locations every time) terminates with a
``RedirectLoopError`` after a bounded number of attempts.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from perch.errors import RedirectLoopError
from perch.location import join_location, normalize_location

logger = logging.getLogger("perch.redirects")

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class RedirectRequest:
    """A builder asked to resolve *target* instead.

    Attributes:
        target: The redirect location as the builder wrote it.
        source: Key of the entry whose builder redirected; relative
            targets are joined onto it.
    """

    target: str
    source: str = "/"

    @property
    def location(self) -> str:
        """The absolute, normalized redirect target."""
        return normalize_location(join_location(self.source, self.target))


class RedirectTracker:
    """Counts redirect hops for one top-level resolution.

    Usage::

        tracker = RedirectTracker("/", max_redirects=5)
        error = tracker.follow(RedirectRequest("/login"))
        tracker.current  # "/login"
    """

    __slots__ = ("_hops", "max_redirects")

    def __init__(self, start: str, max_redirects: int) -> None:
        self._hops: list[str] = [start]
        self.max_redirects = max_redirects

    @property
    def count(self) -> int:
        """Redirects followed so far."""
        return len(self._hops) - 1

    @property
    def hops(self) -> tuple[str, ...]:
        """Every location attempted, starting with the original."""
        return tuple(self._hops)

    @property
    def current(self) -> str:
        return self._hops[-1]

    def follow(self, request: RedirectRequest) -> RedirectLoopError | None:
        """Record a hop to *request*'s target.

        Returns a ``RedirectLoopError`` once the hop count exceeds
        ``max_redirects``; the caller must stop resolving then.
        """
        target = request.location
        self._hops.append(target)
        logger.debug("Redirect %d: %s -> %s", self.count, request.source, target)
        if self.count > self.max_redirects:
            return RedirectLoopError(location=self._hops[0], hops=self.hops)
        return None


def follow_redirects(
    start: str,
    attempt: Callable[[str], T | RedirectRequest],
    max_redirects: int,
) -> tuple[T | RedirectLoopError, RedirectTracker]:
    """Run *attempt* against *start*, restarting on every redirect.

    *attempt* resolves one location from scratch and returns either its
    final result or a ``RedirectRequest``.  Returns the first
    non-redirect result (or a ``RedirectLoopError`` once the cap trips)
    together with the tracker, whose ``current`` is the effective
    location of that result.
    """
    tracker = RedirectTracker(start, max_redirects)
    while True:
        result = attempt(tracker.current)
        if not isinstance(result, RedirectRequest):
            return result, tracker
        error = tracker.follow(result)
        if error is not None:
            logger.warning("Redirect loop resolving %s: %s", start, error.detail)
            return error, tracker
