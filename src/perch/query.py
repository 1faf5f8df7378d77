"""Immutable query string parameters.

Implements ``Mapping[str, str]`` with first-value-wins lookup.
"""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qs


class QueryParams(Mapping[str, str]):
    """Immutable, percent-decoded query string parameters.

    Attributes:
        _data: Parsed query string as field name -> list of values.
        _raw: Raw query string (without the leading ``?``).

    ``__getitem__`` returns the first value for a key, so a repeated
    key is bound by its first occurrence, the value builders receive
    as an argument.  A builder that accepts repeated keys reads them
    through ``route.query``::

        def search(route):
            return Page(SearchScreen(tags=route.query.get_list("tag")))
    """

    _data: dict[str, list[str]]
    _raw: str

    __slots__ = ("_data", "_raw")

    def __init__(self, query_string: str = "") -> None:
        query_string = query_string.removeprefix("?")
        object.__setattr__(self, "_raw", query_string)
        parsed = parse_qs(query_string, keep_blank_values=True)
        object.__setattr__(self, "_data", parsed)

    def __setattr__(self, name: str, value: object) -> None:
        msg = "QueryParams is immutable"
        raise AttributeError(msg)

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, QueryParams):
            return self._data == other._data
        return super().__eq__(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"QueryParams({{{items}}})"

    @property
    def raw(self) -> str:
        """The query string as it appeared in the location."""
        return self._raw

    def get_list(self, key: str) -> list[str]:
        """Every value of a repeated *key*, in location order."""
        return list(self._data.get(key, ()))
