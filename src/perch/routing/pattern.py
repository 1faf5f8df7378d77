r"""Pattern compiler — route pattern strings to segment matchers.

Patterns are segment-wise::

    "/"                          root (zero segments)
    "/family"                    literal segment, case-sensitive
    "/family/:fid"               named parameter, captures any segment
    "/family/:fid(\d+)"          parameter constrained by a regex (full match)
    "/family/:fid(int)"          parameter constrained by a named constraint
    "/files/*"                   trailing wildcard, binds the rest under "*"

Literals compare against the percent-decoded location segment.
Constraints are checked against the *raw* segment text; captured
values are decoded.
"""

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache
from urllib.parse import quote, unquote, urlencode

from perch.errors import PatternCompileError
from perch.routing.params import constraint_regex

# Reserved capture name for the trailing wildcard
WILDCARD = "*"

_PARAM_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

# Characters left unescaped when building a location from a pattern
_SEGMENT_SAFE = "-._~!$&'()*+,;=:@"


@dataclass(frozen=True, slots=True)
class PatternSegment:
    r"""A parsed segment of a route pattern.

    Literal:     ``family``        (is_param=False)
    Param:       ``:fid``          (is_param=True, param_name="fid")
    Constrained: ``:fid(\d+)``     (is_param=True, constraint=r"\d+")
    Wildcard:    ``*``             (is_wildcard=True, param_name="*")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    constraint: str | None = None
    regex: re.Pattern[str] | None = None
    is_wildcard: bool = False


@dataclass(frozen=True, slots=True)
class SegmentMatch:
    """Result of a successful ``RoutePattern.try_match``."""

    consumed: int
    params: dict[str, str]


def _split_pattern(pattern: str) -> list[str]:
    """Split on ``/`` outside of constraint parentheses.

    Parentheses inside a regex character class (``[)a]``) do not count
    toward nesting.
    """
    parts: list[str] = []
    current: list[str] = []
    depth = 0
    escaped = False
    in_class = False
    class_start = 0
    for char in pattern:
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif in_class:
            # "]" right after "[" or "[^" is a literal member of the class
            if char == "^" and len(current) == class_start:
                class_start += 1
            elif char == "]" and len(current) > class_start:
                in_class = False
        elif char == "[" and depth > 0:
            in_class = True
            class_start = len(current) + 1
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise PatternCompileError(pattern, "unbalanced ')'")
        elif char == "/" and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    if depth != 0:
        raise PatternCompileError(pattern, "unbalanced '('")
    parts.append("".join(current))
    return [part for part in parts if part]


def _parse_param(pattern: str, part: str) -> PatternSegment:
    body = part[1:]
    constraint: str | None = None
    if "(" in body:
        name, _, rest = body.partition("(")
        if not rest.endswith(")"):
            raise PatternCompileError(
                pattern, f"text after constraint in segment {part!r}"
            )
        constraint = rest[:-1]
        if not constraint:
            raise PatternCompileError(pattern, f"empty constraint in segment {part!r}")
    else:
        name = body

    if not _PARAM_NAME.fullmatch(name):
        raise PatternCompileError(pattern, f"invalid parameter name {name!r}")

    regex = None
    if constraint is not None:
        try:
            regex = constraint_regex(constraint)
        except re.error as exc:
            raise PatternCompileError(
                pattern, f"unparseable constraint {constraint!r} for {name!r}: {exc}"
            ) from exc

    return PatternSegment(
        value=part,
        is_param=True,
        param_name=name,
        constraint=constraint,
        regex=regex,
    )


def parse_pattern(pattern: str) -> list[PatternSegment]:
    """Parse a route pattern string into segments.

    Examples::

        "/"                  -> []
        "/family/:fid"       -> [PatternSegment("family"), PatternSegment(":fid", is_param=True, ...)]
        "/users/:id(int)"    -> [PatternSegment("users"), PatternSegment(":id(int)", constraint="int", ...)]

    Raises ``PatternCompileError`` on duplicate parameter names, invalid
    names, unparseable constraints, or a wildcard that is not last.
    """
    if not pattern.startswith("/"):
        raise PatternCompileError(pattern, "patterns must start with '/'")

    parts = _split_pattern(pattern)
    segments: list[PatternSegment] = []
    seen: set[str] = set()

    for index, part in enumerate(parts):
        if part == WILDCARD:
            if index != len(parts) - 1:
                raise PatternCompileError(pattern, "'*' must be the last segment")
            segments.append(
                PatternSegment(value=part, is_param=True, param_name=WILDCARD, is_wildcard=True)
            )
            continue

        if part.startswith(":"):
            segment = _parse_param(pattern, part)
            if segment.param_name in seen:
                raise PatternCompileError(
                    pattern, f"duplicate parameter name {segment.param_name!r}"
                )
            seen.add(segment.param_name or "")
            segments.append(segment)
            continue

        segments.append(PatternSegment(value=unquote(part)))

    return segments


class RoutePattern:
    """A compiled route pattern.  Immutable.

    Usage::

        pattern = compile_pattern("/family/:fid/person/:pid")
        match = pattern.try_match(("family", "f1", "person", "p2"))
        match.params  # {"fid": "f1", "pid": "p2"}
    """

    __slots__ = ("_param_names", "_segments", "pattern")

    def __init__(self, pattern: str) -> None:
        segments = tuple(parse_pattern(pattern))
        object.__setattr__(self, "pattern", pattern)
        object.__setattr__(self, "_segments", segments)
        object.__setattr__(
            self,
            "_param_names",
            tuple(s.param_name for s in segments if s.is_param and s.param_name),
        )

    def __setattr__(self, name: str, value: object) -> None:
        msg = "RoutePattern is immutable"
        raise AttributeError(msg)

    def __repr__(self) -> str:
        return f"RoutePattern({self.pattern!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RoutePattern):
            return self._segments == other._segments
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._segments)

    @property
    def segments(self) -> tuple[PatternSegment, ...]:
        return self._segments

    @property
    def param_names(self) -> tuple[str, ...]:
        """Parameter names in declaration order (``"*"`` for a wildcard)."""
        return self._param_names

    @property
    def has_wildcard(self) -> bool:
        return bool(self._segments) and self._segments[-1].is_wildcard

    def try_match(
        self,
        segments: Sequence[str],
        raw_segments: Sequence[str] | None = None,
    ) -> SegmentMatch | None:
        """Match decoded location *segments* against this pattern.

        The pattern must account for every segment: without a wildcard
        the segment counts must be equal.  *raw_segments* (the
        percent-encoded text) are used for constraint checks and default
        to *segments*.

        Returns ``None`` when the pattern does not match.
        """
        if raw_segments is None:
            raw_segments = segments

        fixed = len(self._segments) - 1 if self.has_wildcard else len(self._segments)
        if self.has_wildcard:
            if len(segments) < fixed:
                return None
        elif len(segments) != fixed:
            return None

        params: dict[str, str] = {}
        for index in range(fixed):
            seg = self._segments[index]
            value = segments[index]
            if not seg.is_param:
                if seg.value != value:
                    return None
                continue
            if seg.regex is not None and not seg.regex.fullmatch(raw_segments[index]):
                return None
            params[seg.param_name or ""] = value

        if self.has_wildcard:
            params[WILDCARD] = "/".join(segments[fixed:])

        return SegmentMatch(consumed=len(segments), params=params)

    def build(
        self,
        params: Mapping[str, object] | None = None,
        query: Mapping[str, object] | None = None,
    ) -> str:
        """Build a location string for this pattern.

        Values are converted with ``str()`` and percent-encoded.

        Raises ``KeyError`` if a parameter is missing and ``ValueError``
        if a value does not satisfy its constraint.
        """
        params = params or {}
        parts: list[str] = []
        for seg in self._segments:
            if not seg.is_param:
                parts.append(quote(seg.value, safe=_SEGMENT_SAFE))
                continue
            name = seg.param_name or ""
            if name not in params:
                msg = f"Missing parameter {name!r} for pattern {self.pattern!r}"
                raise KeyError(msg)
            value = str(params[name])
            if seg.is_wildcard:
                parts.extend(
                    quote(piece, safe=_SEGMENT_SAFE) for piece in value.split("/") if piece
                )
                continue
            encoded = quote(value, safe=_SEGMENT_SAFE)
            if not encoded:
                msg = f"Empty value for parameter {name!r}"
                raise ValueError(msg)
            if seg.regex is not None and not seg.regex.fullmatch(encoded):
                msg = f"Value {value!r} does not satisfy constraint {seg.constraint!r} of {name!r}"
                raise ValueError(msg)
            parts.append(encoded)

        location = "/" + "/".join(parts)
        if query:
            location = f"{location}?{urlencode({k: str(v) for k, v in query.items()})}"
        return location


@lru_cache(maxsize=1024)
def compile_pattern(pattern: str) -> RoutePattern:
    """Compile *pattern*, reusing earlier compilations of the same text.

    Raises ``PatternCompileError`` if the pattern is malformed.
    """
    return RoutePattern(pattern)
