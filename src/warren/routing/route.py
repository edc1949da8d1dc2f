"""RouteDefinition, RouteMeta and RoutePriority."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import IntEnum
from types import MappingProxyType
from typing import Any

from warren.routing.handlers import HandlerSet, Middleware


class RoutePriority(IntEnum):
    """Coarse matching tier.  Lower values are mounted (and matched) first."""

    STATIC = 1
    DYNAMIC = 2
    CATCH_ALL = 3


_META_FIELDS = ("description", "tags", "public", "deprecated", "skip_middlewares", "prefix")


def _as_tuple(value: Any) -> tuple[str, ...]:
    """A lone string is one item, not a sequence of characters."""
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


@dataclass(frozen=True, slots=True)
class RouteMeta:
    """Free-form route metadata declared by a route file's ``meta`` dict.

    Known keys get typed attributes; anything else lands in ``extra``.
    """

    description: str | None = None
    tags: tuple[str, ...] = ()
    public: bool = False
    deprecated: bool = False
    skip_middlewares: tuple[str, ...] = ()
    prefix: str | None = None
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RouteMeta:
        extra = {key: value for key, value in data.items() if key not in _META_FIELDS}
        return cls(
            description=data.get("description"),
            tags=_as_tuple(data.get("tags")),
            public=bool(data.get("public", False)),
            deprecated=bool(data.get("deprecated", False)),
            skip_middlewares=_as_tuple(data.get("skip_middlewares")),
            prefix=data.get("prefix"),
            extra=MappingProxyType(extra),
        )

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a typed field or an ``extra`` key by name."""
        if key in _META_FIELDS:
            return getattr(self, key)
        return self.extra.get(key, default)


@dataclass(frozen=True, slots=True)
class RouteDefinition:
    """A fully resolved route, ready to mount.

    Created once per route file by the mapper; owned by the registry
    until applied to a dispatcher.

    Attributes:
        url_path: Dispatch pattern (e.g. ``/users/:id``, ``/docs/*``).
        file_path: Originating file, relative to the routes directory.
        priority: Matching tier.
        params: Parameter names, left to right.
        handlers: The loaded handler set.
        meta: Optional route metadata.
        middlewares: Middleware the route file asked to wrap its handlers.
    """

    url_path: str
    file_path: str
    priority: RoutePriority
    params: tuple[str, ...]
    handlers: HandlerSet
    meta: RouteMeta | None = None
    middlewares: tuple[Middleware, ...] = ()

    @property
    def segments(self) -> list[str]:
        """Non-empty ``/``-separated components of ``url_path``."""
        return [part for part in self.url_path.split("/") if part]

    @property
    def segment_count(self) -> int:
        return len(self.segments)

    @property
    def tags(self) -> tuple[str, ...]:
        return self.meta.tags if self.meta is not None else ()
