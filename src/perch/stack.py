"""Page stacks — the ordered, location-keyed result of a resolution.

A ``PageStack`` is an ordered sequence of ``StackEntry`` values with a
key -> position index kept alongside, so lookups by sub-location are
O(1) without relying on dict iteration order.  An ``ErrorStack`` is
the single-entry form every failed resolution produces.

Stacks are immutable.  Back-navigation never edits a stack in place:
``pop()`` computes the parent location and the host resolves it again,
since the route table may have changed in the meantime.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

from perch.errors import ResolutionError
from perch.routing.route import Route


@dataclass(frozen=True, slots=True)
class StackEntry:
    """One materialized page, keyed by its exact sub-location.

    Attributes:
        key: The sub-location (``/family/f1``); the deepest entry's key
            is the full location, query string included.
        payload: The host's opaque page payload.
        route: The route that produced this entry (``None`` for errors).
        args: The merged path and query arguments the builder received.
    """

    key: str
    payload: Any
    route: Route | None = None
    args: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Why a resolution failed.  The default payload of an ``ErrorStack``.

    Attributes:
        original_location: The location the host asked for.
        message: Human-readable description.
        error: The recovered ``ResolutionError`` (``NoMatchError``,
            ``BuilderConstructionError``, or ``RedirectLoopError``).
    """

    original_location: str
    message: str
    error: ResolutionError

    @property
    def kind(self) -> str:
        """Error class name, e.g. ``"NoMatchError"``."""
        return type(self.error).__name__


class PageStack:
    """An ordered, sub-location-keyed collection of stack entries.

    Usage::

        stack = resolve("/family/f1/person/p2", build_routes)
        stack.keys()        # ["/", "/family/f1", "/family/f1/person/p2"]
        stack["/family/f1"] # StackEntry for the family page
        stack.top.payload   # the deepest page
        pop(stack)          # "/family/f1"
    """

    __slots__ = ("_entries", "_index")

    is_error = False

    def __init__(self, entries: Iterable[StackEntry]) -> None:
        entries = tuple(entries)
        index: dict[str, int] = {}
        for position, entry in enumerate(entries):
            if entry.key in index:
                msg = f"Duplicate stack key {entry.key!r}"
                raise ValueError(msg)
            index[entry.key] = position
        object.__setattr__(self, "_entries", entries)
        object.__setattr__(self, "_index", index)

    def __setattr__(self, name: str, value: object) -> None:
        msg = f"{type(self).__name__} is immutable"
        raise AttributeError(msg)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[StackEntry]:
        return iter(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __getitem__(self, key: str | int) -> StackEntry:
        """Look up an entry by sub-location key or by position."""
        if isinstance(key, int):
            return self._entries[key]
        return self._entries[self._index[key]]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PageStack):
            return type(self) is type(other) and self._entries == other._entries
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.keys()!r})"

    @property
    def entries(self) -> tuple[StackEntry, ...]:
        return self._entries

    @property
    def top(self) -> StackEntry:
        """The deepest (last) entry."""
        return self._entries[-1]

    @property
    def location(self) -> str:
        """The key of the deepest entry."""
        return self._entries[-1].key

    def get(self, key: str) -> StackEntry | None:
        position = self._index.get(key)
        if position is None:
            return None
        return self._entries[position]

    def keys(self) -> list[str]:
        return [entry.key for entry in self._entries]

    def payloads(self) -> list[Any]:
        """Page payloads in stack order, root first.  What the host renders."""
        return [entry.payload for entry in self._entries]

    def pop_target(self) -> str | None:
        """Location to resolve after removing the deepest entry.

        Returns ``None`` when there is nothing to pop back to: a stack
        with a single entry has no parent entry.
        """
        if len(self._entries) < 2:
            return None
        return self._entries[-2].key


class ErrorStack(PageStack):
    """The single-entry stack produced by every failed resolution.

    Keyed by the location the host asked for.  The entry payload is
    the ``Diagnostic`` unless ``NavigatorConfig.error_page`` or the
    route table's ``on_unknown`` hook supplied one.
    """

    __slots__ = ("diagnostic",)

    is_error = True

    def __init__(self, diagnostic: Diagnostic, payload: Any = None) -> None:
        if payload is None:
            payload = diagnostic
        super().__init__([StackEntry(key=diagnostic.original_location, payload=payload)])
        object.__setattr__(self, "diagnostic", diagnostic)

    @property
    def error(self) -> ResolutionError:
        return self.diagnostic.error

    def pop_target(self) -> str | None:
        return None


def pop(stack: PageStack) -> str | None:
    """Back-navigation: the parent location of *stack*'s deepest entry.

    The caller resolves the returned location again to get a fresh
    stack.  ``None`` means the stack cannot be popped further (an
    ``ErrorStack``, or a single entry such as the root).
    """
    return stack.pop_target()
