"""Location parsing — path segments, query parameters, and prefixes.

A location is a URI path plus an optional query string::

    /family/f1/person/p2?tab=notes

Parsing splits the path into segments (kept both raw and
percent-decoded), drops empty segments (so ``/a//b/`` reads as
``/a/b``), and discards any ``#fragment``.  Stack entries are keyed by
the *raw* sub-location so a key round-trips to the exact text the host
asked for.
"""

from dataclasses import dataclass, field
from urllib.parse import unquote

from perch.query import QueryParams


@dataclass(frozen=True, slots=True)
class Location:
    """A parsed, normalized location.

    Attributes:
        raw_segments: Path segments exactly as written (percent-encoded).
        segments: Percent-decoded path segments, used for matching.
        query: Decoded query parameters.
    """

    raw_segments: tuple[str, ...] = ()
    segments: tuple[str, ...] = ()
    query: QueryParams = field(default_factory=QueryParams)

    @property
    def path(self) -> str:
        """The normalized path, without query string."""
        return "/" + "/".join(self.raw_segments)

    @property
    def full(self) -> str:
        """The normalized location: path plus query string, if any."""
        if self.query.raw:
            return f"{self.path}?{self.query.raw}"
        return self.path

    @property
    def is_root(self) -> bool:
        return not self.raw_segments

    def prefix_key(self, length: int) -> str:
        """Key of the sub-location made of the first *length* segments."""
        return "/" + "/".join(self.raw_segments[:length])

    def prefixes(self) -> list[tuple[str, tuple[str, ...], tuple[str, ...]]]:
        """Every sub-location from the root to the full path, inclusive.

        Returns ``(key, raw_segments, decoded_segments)`` triples in
        increasing prefix length.  The root ``/`` is always first.
        """
        return [
            (self.prefix_key(n), self.raw_segments[:n], self.segments[:n])
            for n in range(len(self.raw_segments) + 1)
        ]

    def __str__(self) -> str:
        return self.full


def parse_location(location: str) -> Location:
    """Parse a location string into a normalized ``Location``.

    Examples::

        parse_location("/")                    -> Location(path="/")
        parse_location("/family/f1/")          -> path "/family/f1"
        parse_location("/login?from=%2Fhome")  -> query {"from": "/home"}
        parse_location("family")               -> path "/family"
    """
    location = location.partition("#")[0]
    path, _, query_string = location.partition("?")
    raw = tuple(part for part in path.split("/") if part)
    return Location(
        raw_segments=raw,
        segments=tuple(unquote(part) for part in raw),
        query=QueryParams(query_string),
    )


def normalize_location(location: str) -> str:
    """Return the canonical text form of *location*."""
    return parse_location(location).full


def join_location(base: str, target: str) -> str:
    """Resolve *target* against *base* the way a relative link would.

    Absolute targets (leading ``/``) are returned unchanged.  Relative
    targets are appended to *base*'s path; ``..`` climbs one level and
    ``.`` is ignored.  The query string of *base* is never carried over.

    Examples::

        join_location("/family/f1", "person/p2")  -> "/family/f1/person/p2"
        join_location("/family/f1", "../f2")      -> "/family/f2"
        join_location("/family/f1", "/login")     -> "/login"
    """
    if target.startswith("/"):
        return target

    target_path, sep, target_query = target.partition("?")
    parts = list(parse_location(base).raw_segments)
    for part in target_path.split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            if parts:
                parts.pop()
            continue
        parts.append(part)

    joined = "/" + "/".join(parts)
    if sep:
        joined = f"{joined}?{target_query}"
    return joined
