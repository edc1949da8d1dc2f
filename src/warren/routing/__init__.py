"""File-derived routing.

The directory structure under ``routes/`` defines URL patterns::

    routes/
      index.py               # /
      users/
        index.py             # /users
        me.py                # /users/me
        [id].py              # /users/:id
        [userId]/
          posts/
            [postId].py      # /users/:userId/posts/:postId
      docs/
        [...slug].py         # /docs/*

Boot runs Scanner -> Mapper -> Registry and mounts the result on a
dispatcher, static routes first, catch-alls last.
"""

from warren.routing.dispatcher import Dispatcher, RouteMatch, Router
from warren.routing.handlers import HTTP_METHODS, HandlerSet, RouteContext, wrap_handler
from warren.routing.loader import RouteLoader, load_routes_from_directory
from warren.routing.mapper import RouteMapper, validate_param_name
from warren.routing.registry import RegistryState, RouteGroup, RouteRegistry, RouteStats
from warren.routing.route import RouteDefinition, RouteMeta, RoutePriority
from warren.routing.scanner import RouteFile, scan_routes
from warren.routing.segments import (
    CatchAllSegment,
    DynamicSegment,
    IndexSegment,
    Segment,
    StaticSegment,
    classify_segment,
)

__all__ = [
    "HTTP_METHODS",
    "CatchAllSegment",
    "Dispatcher",
    "DynamicSegment",
    "HandlerSet",
    "IndexSegment",
    "RegistryState",
    "RouteContext",
    "RouteDefinition",
    "RouteFile",
    "RouteGroup",
    "RouteLoader",
    "RouteMapper",
    "RouteMatch",
    "RouteMeta",
    "RoutePriority",
    "RouteRegistry",
    "RouteStats",
    "Router",
    "Segment",
    "StaticSegment",
    "classify_segment",
    "load_routes_from_directory",
    "scan_routes",
    "validate_param_name",
    "wrap_handler",
]
