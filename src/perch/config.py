"""Navigator configuration.

Every knob a Navigator (or a bare ``resolve()`` call) honours lives on
one frozen dataclass, validated when it is created.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from perch.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class NavigatorConfig:
    """Resolution configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = NavigatorConfig(max_redirects=3, error_page=render_error)
    """

    # Redirects allowed per top-level resolution before a loop is reported
    max_redirects: int = 5

    # Turns a Diagnostic into the ErrorStack's page payload (None = the Diagnostic itself)
    error_page: Callable[[Any], Any] | None = None

    # Navigator back/forward history size
    history_limit: int = 100

    def __post_init__(self) -> None:
        if self.max_redirects < 0:
            msg = f"max_redirects must be >= 0, got {self.max_redirects}"
            raise ConfigurationError(msg)
        if self.history_limit < 1:
            msg = f"history_limit must be >= 1, got {self.history_limit}"
            raise ConfigurationError(msg)
        if self.error_page is not None and not callable(self.error_page):
            msg = "error_page must be callable"
            raise ConfigurationError(msg)
