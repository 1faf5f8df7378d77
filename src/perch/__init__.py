"""Perch — declarative location-to-page-stack routing.

Describe *what should be on screen* as a pure function of the current
location: an ordered route table maps every prefix of a location to a
page, and resolution returns the whole stack, root first.

Basic usage::

    from perch import Page, Redirect, Route, RouteTable, resolve

    def build_routes(state):
        return RouteTable([
            Route("/", lambda: Page(HomeScreen())),
            Route("/family/:fid", lambda fid: Page(FamilyScreen(fid))),
            Route("/family/:fid/person/:pid", lambda fid, pid: Page(PersonScreen(fid, pid))),
            Route("/login", lambda route: Page(LoginScreen(route.args.get("from")))),
        ])

    stack = resolve("/family/f1/person/p2", build_routes, state)
    stack.keys()  # ["/", "/family/f1", "/family/f1/person/p2"]

Host integration::

    from perch import Navigator

    nav = Navigator(build_routes, context=state)
    nav.subscribe(lambda stack: render(stack.payloads()))
    nav.go_to("/family/f1")
    nav.pop()
"""

__version__ = "0.1.0"
__all__ = [
    "BuilderConstructionError",
    "ConfigurationError",
    "Diagnostic",
    "ErrorStack",
    "NavigationError",
    "NavigationHistory",
    "Navigator",
    "NavigatorConfig",
    "NoMatchError",
    "Page",
    "PageStack",
    "PatternCompileError",
    "PerchError",
    "Redirect",
    "RedirectLoopError",
    "ReentrantNavigationError",
    "ResolutionError",
    "Route",
    "RouteData",
    "RoutePattern",
    "RouteTable",
    "StackEntry",
    "compile_pattern",
    "pop",
    "resolve",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` fast while providing a clean top-level API.
    """
    if name in ("Navigator", "resolve"):
        from perch import navigator as _nav

        return getattr(_nav, name)

    if name == "NavigatorConfig":
        from perch.config import NavigatorConfig

        return NavigatorConfig

    if name == "NavigationHistory":
        from perch.history import NavigationHistory

        return NavigationHistory

    if name in ("Page", "Redirect"):
        from perch import results as _results

        return getattr(_results, name)

    if name in ("Route", "RouteData"):
        from perch.routing import route as _route

        return getattr(_route, name)

    if name in ("RoutePattern", "compile_pattern"):
        from perch.routing import pattern as _pattern

        return getattr(_pattern, name)

    if name == "RouteTable":
        from perch.routing.table import RouteTable

        return RouteTable

    if name in ("Diagnostic", "ErrorStack", "PageStack", "StackEntry", "pop"):
        from perch import stack as _stack

        return getattr(_stack, name)

    if name in (
        "BuilderConstructionError",
        "ConfigurationError",
        "NavigationError",
        "NoMatchError",
        "PatternCompileError",
        "PerchError",
        "RedirectLoopError",
        "ReentrantNavigationError",
        "ResolutionError",
    ):
        from perch import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
