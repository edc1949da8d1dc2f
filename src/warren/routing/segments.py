"""Route file segment classification.

Each component of a route file's relative path is one of:

    Static:    ``users``       -> ``users``
    Dynamic:   ``[id]``        -> ``:id``
    Catch-all: ``[...slug]``   -> ``*``
    Index:     ``index``       -> collapses into the parent path

Classification is a pure function of the segment text.
"""

import re
from dataclasses import dataclass
from typing import TypeAlias

# [name]; dots and dashes are matched so that malformed names such as
# "[user-id]" or "[...a.b]" classify as dynamic and fail validation.
_DYNAMIC_RE = re.compile(r"^\[([\w.$-]+)\]$")

# [...name]
_CATCH_ALL_RE = re.compile(r"^\[\.\.\.([\w$-]+)\]$")


@dataclass(frozen=True, slots=True)
class StaticSegment:
    """A literal path component, matched verbatim."""

    value: str


@dataclass(frozen=True, slots=True)
class DynamicSegment:
    """A ``[name]`` component bound to exactly one path parameter."""

    name: str


@dataclass(frozen=True, slots=True)
class CatchAllSegment:
    """A ``[...name]`` component that greedily matches the remaining path."""

    name: str


@dataclass(frozen=True, slots=True)
class IndexSegment:
    """The index marker file; contributes nothing to the URL."""


Segment: TypeAlias = StaticSegment | DynamicSegment | CatchAllSegment | IndexSegment


def strip_extension(segment: str, extensions: tuple[str, ...]) -> str:
    """Remove the first matching file extension from *segment*."""
    for ext in extensions:
        if ext and segment.endswith(ext):
            return segment[: -len(ext)]
    return segment


def classify_segment(text: str, *, index_name: str | None = "index") -> Segment:
    """Classify one extension-stripped path component.

    Pass ``index_name=None`` for directory components: only a file can
    be the index marker.

    Examples::

        classify_segment("users")      -> StaticSegment("users")
        classify_segment("[id]")       -> DynamicSegment("id")
        classify_segment("[...slug]")  -> CatchAllSegment("slug")
        classify_segment("index")      -> IndexSegment()
    """
    match = _CATCH_ALL_RE.match(text)
    if match:
        return CatchAllSegment(match.group(1))
    match = _DYNAMIC_RE.match(text)
    if match:
        return DynamicSegment(match.group(1))
    if index_name is not None and text == index_name:
        return IndexSegment()
    return StaticSegment(text)


def to_pattern_token(segment: Segment) -> str:
    """Render a classified segment as a dispatcher pattern token."""
    match segment:
        case CatchAllSegment():
            return "*"
        case DynamicSegment(name=name):
            return ":" + name
        case StaticSegment(value=value):
            return value
        case IndexSegment():
            return ""


def param_name(segment: Segment) -> str | None:
    """Return the parameter captured by *segment*, or None for literals."""
    match segment:
        case DynamicSegment(name=name) | CatchAllSegment(name=name):
            return name
        case _:
            return None
