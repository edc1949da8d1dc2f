"""Route mapper — turns a scanned route file into a RouteDefinition.

For each file the mapper:

1. Loads the module through the injected resolver and extracts its
   handler set (a pre-built ``handlers`` object, or ``GET``/``POST``/...
   functions).
2. Builds the URL pattern from the path segments, unless the module
   overrides it with ``prefix`` / ``meta["prefix"]``.
3. Extracts and validates parameter names.
4. Assigns the priority tier.

The resolver is the only part that touches the module system, so
mapping is testable with plain namespace objects.
"""

from __future__ import annotations

import keyword
import re
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeAlias

from warren._internal.invoke import invoke
from warren.errors import InvalidParameterNameError, InvalidRouteFileError
from warren.routing.handlers import HTTP_METHODS, HandlerSet
from warren.routing.modules import load_route_module
from warren.routing.route import RouteDefinition, RouteMeta, RoutePriority
from warren.routing.scanner import RouteFile, classify_path
from warren.routing.segments import (
    CatchAllSegment,
    IndexSegment,
    Segment,
    param_name,
    to_pattern_token,
)

ModuleResolver: TypeAlias = Callable[[str], Any | Awaitable[Any]]

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_$][a-zA-Z0-9_$]*$")

# Names that collide with handler-language keywords.  The JavaScript list
# keeps route trees portable to generated clients; Python keywords keep
# params usable as keyword arguments.
RESERVED_WORDS: frozenset[str] = frozenset(
    {
        "default", "if", "else", "while", "for", "switch",
        "case", "break", "continue", "return", "function",
        "var", "let", "const", "class", "extends", "import",
        "export", "async", "await", "try", "catch", "finally",
    }
    | set(keyword.kwlist)
)  # fmt: skip

_SLASHES_RE = re.compile(r"/+")


class RouteMapper:
    """Maps :class:`RouteFile` records to :class:`RouteDefinition` objects.

    Usage::

        mapper = RouteMapper()
        definition = await mapper.map_route(route_file)

    Args:
        load_module: ``path -> module`` resolver, sync or async.  Defaults
            to importing the file with ``importlib``.
        extensions: File suffixes stripped from the last segment.
        index_name: File stem that collapses into its parent path.
    """

    __slots__ = ("_extensions", "_index_name", "_load_module")

    def __init__(
        self,
        load_module: ModuleResolver | None = None,
        *,
        extensions: tuple[str, ...] = (".py",),
        index_name: str = "index",
    ) -> None:
        self._load_module = load_module or load_route_module
        self._extensions = extensions
        self._index_name = index_name

    async def map_route(self, route_file: RouteFile) -> RouteDefinition:
        """Load and resolve one route file.

        Raises:
            InvalidRouteFileError: The module exposes no supported handler shape.
            InvalidParameterNameError: A segment captures an invalid name.
        """
        module = await invoke(self._load_module, route_file.absolute_path)

        functions = _method_functions(module)
        prebuilt = getattr(module, "handlers", None)
        if not isinstance(prebuilt, HandlerSet) and not functions:
            raise InvalidRouteFileError(route_file.relative_path)

        segments = classify_path(route_file.segments, self._extensions, self._index_name)
        params = self.extract_params(route_file, segments)
        meta = _route_meta(module)
        url_path = self.build_url_path(segments, module, meta)

        if isinstance(prebuilt, HandlerSet):
            handlers = prebuilt
        else:
            catch_all = next(
                (s.name for s in segments if isinstance(s, CatchAllSegment)),
                None,
            )
            handlers = HandlerSet.from_functions(functions, catch_all=catch_all)

        return RouteDefinition(
            url_path=url_path,
            file_path=route_file.relative_path,
            priority=self.calculate_priority(route_file),
            params=params,
            handlers=handlers,
            meta=meta,
            middlewares=tuple(getattr(module, "middlewares", None) or ()),
        )

    # -- Derivation steps --

    @staticmethod
    def build_url_path(
        segments: list[Segment],
        module: Any = None,
        meta: RouteMeta | None = None,
    ) -> str:
        """Derive the dispatch pattern.

        An explicit ``meta["prefix"]`` or module ``prefix`` wins verbatim.
        Otherwise::

            users/[id].py           -> /users/:id
            docs/[...slug].py       -> /docs/*
            users/index.py          -> /users
            index.py                -> /
        """
        if meta is not None and meta.prefix:
            return meta.prefix
        prefix = getattr(module, "prefix", None)
        if isinstance(prefix, str) and prefix:
            return prefix

        tokens = [to_pattern_token(s) for s in segments if not isinstance(s, IndexSegment)]
        path = _SLASHES_RE.sub("/", "/" + "/".join(tokens))
        return path.rstrip("/") or "/"

    @staticmethod
    def extract_params(route_file: RouteFile, segments: list[Segment]) -> tuple[str, ...]:
        """Collect and validate parameter names, left to right."""
        params: list[str] = []
        for segment in segments:
            name = param_name(segment)
            if name is None:
                continue
            validate_param_name(name, route_file.relative_path)
            params.append(name)
        return tuple(params)

    @staticmethod
    def calculate_priority(route_file: RouteFile) -> RoutePriority:
        if route_file.is_catch_all:
            return RoutePriority.CATCH_ALL
        if route_file.is_dynamic:
            return RoutePriority.DYNAMIC
        return RoutePriority.STATIC


def validate_param_name(name: str, file_path: str) -> None:
    """Reject names that are not identifiers or are reserved words.

    Raises ``InvalidParameterNameError`` naming the file and parameter.
    """
    if not _IDENTIFIER_RE.match(name):
        raise InvalidParameterNameError(
            file_path,
            name,
            "Parameter names must be identifiers "
            "(letters, digits, '_' or '$', not starting with a digit).",
        )
    if name in RESERVED_WORDS:
        raise InvalidParameterNameError(
            file_path,
            name,
            "Parameter names cannot be reserved words.",
        )


def _method_functions(module: Any) -> dict[str, Callable[..., Any]]:
    """Module-level callables named after supported HTTP methods."""
    found: dict[str, Callable[..., Any]] = {}
    for method in HTTP_METHODS:
        func = getattr(module, method, None)
        if func is not None and callable(func):
            found[method] = func
    return found


def _route_meta(module: Any) -> RouteMeta | None:
    meta = getattr(module, "meta", None)
    if meta is None:
        return None
    if isinstance(meta, RouteMeta):
        return meta
    if isinstance(meta, Mapping):
        return RouteMeta.from_mapping(meta)
    msg = f"Route module 'meta' must be a mapping or RouteMeta, got {type(meta).__name__}"
    raise TypeError(msg)
