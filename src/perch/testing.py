"""Assertion helpers for testing route tables.

Each assertion produces a clear error message on failure::

    from perch import resolve
    from perch.testing import assert_stack_keys

    stack = resolve("/family/f1", build_routes, state)
    assert_stack_keys(stack, ["/", "/family/f1"])
"""

from collections.abc import Sequence

from perch.errors import ResolutionError
from perch.stack import ErrorStack, PageStack


def assert_stack_keys(stack: PageStack, keys: Sequence[str]) -> None:
    """Assert the stack resolved successfully with exactly *keys*, in order."""
    assert not stack.is_error, (
        f"Expected a resolved stack, got an error stack: {_describe_error(stack)}"
    )
    assert stack.keys() == list(keys), (
        f"Expected stack keys {list(keys)!r}, got {stack.keys()!r}"
    )


def assert_error_stack(
    stack: PageStack,
    error_type: type[ResolutionError] = ResolutionError,
    *,
    location: str | None = None,
) -> None:
    """Assert the stack is an ``ErrorStack`` carrying *error_type*.

    When *location* is given, also checks the error stack's key.
    """
    assert isinstance(stack, ErrorStack), (
        f"Expected an error stack, got {stack.keys()!r}"
    )
    assert isinstance(stack.error, error_type), (
        f"Expected {error_type.__name__}, got {type(stack.error).__name__}: {stack.error}"
    )
    if location is not None:
        assert stack.location == location, (
            f"Expected error stack keyed {location!r}, got {stack.location!r}"
        )


def assert_redirected_to(stack: PageStack, location: str) -> None:
    """Assert resolution succeeded and ended at *location* (case-insensitive)."""
    assert not stack.is_error, (
        f"Expected a redirect to {location!r}, got an error stack: {_describe_error(stack)}"
    )
    assert stack.location.lower() == location.lower(), (
        f"Expected resolution to end at {location!r}, got {stack.location!r}"
    )


def _describe_error(stack: PageStack) -> str:
    if isinstance(stack, ErrorStack):
        return f"{stack.diagnostic.kind}: {stack.diagnostic.message}"
    return ""
