"""Resolution facade and the host-facing Navigator.

``resolve()`` is the single entry point a host calls on every
navigation event and on every external rebuild trigger.  It invokes
the route table builder (where the host's reactive state is read),
then resolves the location against the fresh table.  Nothing is cached
between calls.

``Navigator`` wraps ``resolve()`` with the navigation request API
(``go_to``, ``push``, ``pop``, ``back``, ...), a back/forward history,
and change listeners.  Navigations on one navigator are serialized;
a builder that navigates the navigator resolving it raises
``ReentrantNavigationError`` instead of corrupting the in-flight
resolution.
"""

from __future__ import annotations

import inspect
import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from perch.config import NavigatorConfig
from perch.errors import ReentrantNavigationError
from perch.history import NavigationHistory
from perch.location import join_location, parse_location
from perch.resolver import resolve_location
from perch.routing.route import Route
from perch.routing.table import RouteTable, as_table
from perch.stack import PageStack, pop

logger = logging.getLogger("perch.navigator")

# A route table, or a function of host state returning one
RouteSource = RouteTable | Iterable[Route] | Mapping[str, Callable[..., Any]] | Callable[..., Any]

# Receives every new stack a navigator produces
Listener = Callable[[PageStack], None]


def build_table(routes: RouteSource, context: Any = None) -> RouteTable:
    """Produce the current route table from *routes*.

    A callable is invoked with *context* (or with no arguments if it
    takes none) and may return a ``RouteTable``, a list of ``Route``,
    or a ``pattern -> builder`` mapping.  ``PatternCompileError``
    propagates: a malformed pattern is a programming mistake.
    """
    if isinstance(routes, (RouteTable, Mapping)) or not callable(routes):
        return as_table(routes)

    try:
        takes_args = bool(inspect.signature(routes).parameters)
    except (TypeError, ValueError):
        takes_args = True
    return as_table(routes(context) if takes_args else routes())


def resolve(
    location: str,
    routes: RouteSource,
    context: Any = None,
    *,
    config: NavigatorConfig | None = None,
) -> PageStack:
    """Resolve *location* into a page stack.

    Usage::

        def build_routes(state):
            return RouteTable([
                Route("/", lambda: HomePage()),
                Route("/family/:fid", lambda fid: FamilyPage(state.family(fid))),
            ])

        stack = resolve("/family/f1", build_routes, state)
        render(stack.payloads())

    Returns a complete ``PageStack`` or an ``ErrorStack``; resolution
    failures are never raised.
    """
    table = build_table(routes, context)
    return resolve_location(location, table, context, config)


class Navigator:
    """Host navigation state: current stack, history, listeners.

    Usage::

        nav = Navigator(build_routes, context=state)
        nav.go_to("/family/f1")
        nav.push("person/p2")       # relative to the current location
        nav.pop()                   # back to /family/f1
        nav.subscribe(render)       # called with every new stack
        nav.rebuild()               # state changed, resolve again
    """

    def __init__(
        self,
        routes: RouteSource,
        *,
        context: Any = None,
        config: NavigatorConfig | None = None,
        initial_location: str = "/",
    ) -> None:
        self.routes = routes
        self.context = context
        self.config = config or NavigatorConfig()
        self.history = NavigationHistory(self.config.history_limit)
        self._listeners: list[Listener] = []
        self._lock = threading.Lock()
        self._owner: int | None = None
        self._current: PageStack | None = None
        self._initial_location = initial_location

    @property
    def current(self) -> PageStack:
        """The current stack, resolving the initial location on first access."""
        if self._current is None:
            return self.go_to(self._initial_location)
        return self._current

    @property
    def location(self) -> str:
        return self.current.location

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* with every new stack.  Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -- Navigation requests ------------------------------------------------

    def go_to(self, location: str) -> PageStack:
        """Navigate to an absolute *location* and record it in history."""
        stack = self._navigate(location)
        self.history.push(stack.location)
        self._notify(stack)
        return stack

    def replace(self, location: str) -> PageStack:
        """Navigate to *location*, overwriting the current history entry."""
        stack = self._navigate(location)
        self.history.replace(stack.location)
        self._notify(stack)
        return stack

    def push(self, location: str) -> PageStack:
        """Navigate to *location*, resolved relative to the current location."""
        base = parse_location(self.current.location).path
        return self.go_to(join_location(base, location))

    def pop(self) -> PageStack | None:
        """Back-navigation to the parent entry.

        Returns the new stack, or ``None`` if the current stack cannot
        be popped (an error stack, or a single entry).
        """
        target = pop(self.current)
        if target is None:
            logger.debug("Cannot pop %s", self.current.location)
            return None
        return self.go_to(target)

    def back(self) -> PageStack | None:
        """Resolve the previous history entry, if there is one."""
        if self._current is None:
            self.go_to(self._initial_location)
        target = self.history.back()
        if target is None:
            return None
        stack = self._navigate(target)
        self._notify(stack)
        return stack

    def forward(self) -> PageStack | None:
        """Resolve the next history entry, if there is one."""
        if self._current is None:
            self.go_to(self._initial_location)
        target = self.history.forward()
        if target is None:
            return None
        stack = self._navigate(target)
        self._notify(stack)
        return stack

    def rebuild(self) -> PageStack:
        """Resolve the current location again after external state changed."""
        if self._current is None:
            return self.current
        location = self.history.current or self._current.location
        stack = self._navigate(location)
        self.history.replace(stack.location)
        self._notify(stack)
        return stack

    # -- Internals ----------------------------------------------------------

    def _navigate(self, location: str) -> PageStack:
        if self._owner == threading.get_ident():
            msg = f"Navigation to {location!r} requested while resolving; builders must not navigate"
            raise ReentrantNavigationError(msg)

        with self._lock:
            self._owner = threading.get_ident()
            try:
                stack = resolve(location, self.routes, self.context, config=self.config)
            finally:
                self._owner = None
            self._current = stack

        logger.debug("Navigated to %s (%d entries)", stack.location, len(stack))
        return stack

    def _notify(self, stack: PageStack) -> None:
        for listener in list(self._listeners):
            listener(stack)
