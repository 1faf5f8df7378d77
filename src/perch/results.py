"""Page and Redirect builder outcomes.

Frozen dataclasses that route builders return.  A builder's result is
a tagged variant with exactly two cases: ``Page`` carries the host's
opaque payload, ``Redirect`` restarts resolution at another location.

Usage::

    def family_page(route):
        if not signed_in():
            return Redirect(f"/login?from={quote(route.location, safe='')}")
        return Page(FamilyScreen(route.args["fid"]))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeAlias


@dataclass(frozen=True, slots=True)
class Page:
    """A materialized page.  The payload is never inspected by perch."""

    payload: Any


@dataclass(frozen=True, slots=True)
class Redirect:
    """Abandon the current resolution and resolve *location* instead.

    Relative locations (no leading ``/``) are joined onto the
    sub-location whose builder returned the redirect.
    """

    location: str


Outcome: TypeAlias = Page | Redirect


def as_outcome(result: Any) -> Outcome | None:
    """Normalize a builder's return value into the two-case variant.

    ``Page`` and ``Redirect`` pass through unchanged.  Any other value
    is treated as a bare page payload and wrapped in ``Page``.  ``None``
    is returned unchanged so the caller can report it as a construction
    failure.
    """
    if result is None:
        return None
    if isinstance(result, (Page, Redirect)):
        return result
    return Page(result)
