"""Route registry — duplicate detection, conflict warnings, and ordering.

Collects mapped route definitions during boot, then mounts them on a
dispatcher in priority order.  The registry has two states:

    OPEN     accepting ``register()`` calls
    APPLIED  routes handed to a dispatcher; read-only from then on

There is no transition back to OPEN.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from warren.errors import ConflictWarning, DuplicateRouteError, RegistryStateError
from warren.routing.handlers import HTTP_METHODS
from warren.routing.route import RouteDefinition, RouteMeta, RoutePriority

if TYPE_CHECKING:
    from warren.routing.dispatcher import Dispatcher

logger = logging.getLogger("warren.routes")

_PRIORITY_MARKERS = {
    RoutePriority.STATIC: "S",
    RoutePriority.DYNAMIC: "D",
    RoutePriority.CATCH_ALL: "*",
}


class RegistryState(Enum):
    OPEN = "open"
    APPLIED = "applied"


@dataclass(frozen=True, slots=True)
class RouteStats:
    """Counts over the registered routes."""

    total: int
    by_method: dict[str, int]
    by_priority: dict[str, int]
    by_tag: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class RouteGroup:
    """Routes sharing a tag."""

    name: str
    routes: tuple[RouteDefinition, ...]


def sort_key(route: RouteDefinition) -> tuple[int, int, str]:
    """Priority ascending, then deeper paths first, then path text."""
    return (int(route.priority), -route.segment_count, route.url_path)


class RouteRegistry:
    """Boot-time route table.

    Usage::

        registry = RouteRegistry()
        registry.register(definition)
        registry.apply_to_dispatcher(router)
    """

    __slots__ = ("_by_path", "_conflicts", "_routes", "_state")

    def __init__(self) -> None:
        self._routes: list[RouteDefinition] = []
        self._by_path: dict[str, RouteDefinition] = {}
        self._conflicts: list[ConflictWarning] = []
        self._state = RegistryState.OPEN

    # -- Registration --

    def register(self, definition: RouteDefinition) -> None:
        """Add a route definition.

        Raises:
            RegistryStateError: The registry was already applied.
            DuplicateRouteError: Another file resolved to the same ``url_path``.
        """
        if self._state is RegistryState.APPLIED:
            msg = (
                f"Cannot register {definition.url_path} ({definition.file_path}): "
                "routes were already applied to a dispatcher."
            )
            raise RegistryStateError(msg)

        existing = self._by_path.get(definition.url_path)
        if existing is not None:
            raise DuplicateRouteError(definition.url_path, existing.file_path, definition.file_path)

        self._check_conflicts(definition)

        self._routes.append(definition)
        self._by_path[definition.url_path] = definition

    def _check_conflicts(self, new_route: RouteDefinition) -> None:
        """Warn about same-shape routes that differ only in param names."""
        new_segments = new_route.segments
        for existing in self._routes:
            if existing.priority != new_route.priority:
                continue
            existing_segments = existing.segments
            if len(existing_segments) != len(new_segments):
                continue
            pairs = list(zip(existing_segments, new_segments, strict=True))
            same_shape = all(a == b or (a.startswith(":") and b.startswith(":")) for a, b in pairs)
            # identical segment lists (e.g. "/users/" vs "/users") share no renamed param
            if same_shape and any(a != b for a, b in pairs):
                conflict = ConflictWarning(
                    existing_path=existing.url_path,
                    existing_file=existing.file_path,
                    new_path=new_route.url_path,
                    new_file=new_route.file_path,
                )
                self._conflicts.append(conflict)
                logger.warning("%s", conflict)

    # -- Ordering --

    def get_sorted_routes(self) -> list[RouteDefinition]:
        """Routes in mount order: static, dynamic, catch-all; deeper first."""
        return sorted(self._routes, key=sort_key)

    def apply_to_dispatcher(self, dispatcher: Dispatcher) -> list[RouteDefinition]:
        """Mount every route on *dispatcher* in sorted order.

        Route-file middleware is attached to each handler set once every
        mount has succeeded, so a failed apply leaves handler sets untouched.
        The registry is read-only afterwards.

        Raises ``RegistryStateError`` if called a second time.
        """
        if self._state is RegistryState.APPLIED:
            msg = "Routes were already applied to a dispatcher."
            raise RegistryStateError(msg)

        sorted_routes = self.get_sorted_routes()
        logger.info("Registering %d routes", len(sorted_routes))

        for route in sorted_routes:
            dispatcher.mount(route.url_path, route.handlers)
            logger.info("  %s", describe_route(route))

        # Handler sets are mounted by reference; attach only once every mount succeeded
        for route in sorted_routes:
            for middleware in route.middlewares:
                route.handlers.use(middleware)

        self._state = RegistryState.APPLIED
        return sorted_routes

    # -- Introspection --

    @property
    def state(self) -> RegistryState:
        return self._state

    @property
    def conflicts(self) -> tuple[ConflictWarning, ...]:
        return tuple(self._conflicts)

    def __len__(self) -> int:
        return len(self._routes)

    def get_all_routes(self) -> list[RouteDefinition]:
        """Routes in registration order."""
        return list(self._routes)

    def get_stats(self) -> RouteStats:
        by_method = dict.fromkeys(HTTP_METHODS, 0)
        by_priority = {"static": 0, "dynamic": 0, "catch_all": 0}
        by_tag: dict[str, int] = {}

        for route in self._routes:
            for method in route.handlers.methods:
                by_method[method] = by_method.get(method, 0) + 1
            by_priority[route.priority.name.lower()] += 1
            for tag in route.tags:
                by_tag[tag] = by_tag.get(tag, 0) + 1

        return RouteStats(
            total=len(self._routes),
            by_method=by_method,
            by_priority=by_priority,
            by_tag=by_tag,
        )

    def get_routes_by_tag(self, tag: str) -> list[RouteDefinition]:
        return [route for route in self._routes if tag in route.tags]

    def get_route_groups(self) -> list[RouteGroup]:
        """One group per tag, sorted by tag name."""
        tagged: dict[str, list[RouteDefinition]] = {}
        for route in self._routes:
            for tag in route.tags:
                tagged.setdefault(tag, []).append(route)
        return [RouteGroup(name, tuple(routes)) for name, routes in sorted(tagged.items())]

    def find_routes_by_meta(self, predicate: Callable[[RouteMeta], bool]) -> list[RouteDefinition]:
        return [route for route in self._routes if route.meta is not None and predicate(route.meta)]


def describe_route(route: RouteDefinition) -> str:
    """One-line summary used in boot logs: marker, path, file, extras."""
    info: list[str] = []
    if route.params:
        info.append(f"params: [{', '.join(route.params)}]")
    if route.meta is not None and route.meta.tags:
        info.append(f"tags: [{', '.join(route.meta.tags)}]")
    if route.middlewares:
        info.append(f"middlewares: {len(route.middlewares)}")
    extras = f" ({', '.join(info)})" if info else ""
    marker = _PRIORITY_MARKERS.get(route.priority, "?")
    return f"{marker} {route.url_path:<40} -> {route.file_path}{extras}"
