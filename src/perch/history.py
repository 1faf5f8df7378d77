"""Linear back/forward navigation history."""

from perch.errors import ConfigurationError


class NavigationHistory:
    """Visited locations with a cursor, like a browser's session history.

    Usage::

        history = NavigationHistory()
        history.push("/")
        history.push("/family/f1")
        history.back()     # "/"
        history.forward()  # "/family/f1"

    Pushing after going back discards the forward entries.  When more
    than *limit* entries are held the oldest ones are dropped.
    """

    __slots__ = ("_entries", "_index", "limit")

    def __init__(self, limit: int = 100) -> None:
        if limit < 1:
            msg = f"History limit must be >= 1, got {limit}"
            raise ConfigurationError(msg)
        self._entries: list[str] = []
        self._index = -1
        self.limit = limit

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"NavigationHistory({self._entries!r}, index={self._index})"

    @property
    def entries(self) -> tuple[str, ...]:
        return tuple(self._entries)

    @property
    def current(self) -> str | None:
        if self._index < 0:
            return None
        return self._entries[self._index]

    @property
    def can_go_back(self) -> bool:
        return self._index > 0

    @property
    def can_go_forward(self) -> bool:
        return self._index < len(self._entries) - 1

    def push(self, location: str) -> None:
        """Record a new navigation, dropping any forward entries."""
        del self._entries[self._index + 1 :]
        if self._entries and self._entries[-1] == location:
            return
        self._entries.append(location)
        overflow = len(self._entries) - self.limit
        if overflow > 0:
            del self._entries[:overflow]
        self._index = len(self._entries) - 1

    def replace(self, location: str) -> None:
        """Overwrite the current entry (or push the first one)."""
        if self._index < 0:
            self.push(location)
            return
        self._entries[self._index] = location

    def back(self) -> str | None:
        """Move the cursor back.  Returns the new current location or ``None``."""
        if not self.can_go_back:
            return None
        self._index -= 1
        return self._entries[self._index]

    def forward(self) -> str | None:
        """Move the cursor forward.  Returns the new current location or ``None``."""
        if not self.can_go_forward:
            return None
        self._index += 1
        return self._entries[self._index]
