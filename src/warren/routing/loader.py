"""Boot sequence: scan -> map -> register -> apply.

Files are mapped one at a time.  Each module load is awaited before the
next file is touched, so duplicate-detection errors always surface in
the same order for the same tree.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

from warren.config import RoutesConfig
from warren.routing.dispatcher import Dispatcher
from warren.routing.mapper import ModuleResolver, RouteMapper
from warren.routing.registry import RouteRegistry
from warren.routing.scanner import scan_routes

logger = logging.getLogger("warren.routes")


class RouteLoader:
    """Builds a route table from a directory and mounts it on a dispatcher.

    Usage::

        loader = RouteLoader(RoutesConfig(routes_dir="routes"))
        registry = await loader.load_routes(router)

    Args:
        config: Directory, file selection, and debug settings.
        load_module: Optional module resolver handed to the mapper.
        registry: Registry to fill; a fresh one by default.
    """

    __slots__ = ("_config", "_mapper", "_registry")

    def __init__(
        self,
        config: RoutesConfig,
        *,
        load_module: ModuleResolver | None = None,
        registry: RouteRegistry | None = None,
    ) -> None:
        self._config = config
        self._mapper = RouteMapper(
            load_module,
            extensions=config.extensions,
            index_name=config.index_name,
        )
        self._registry = registry if registry is not None else RouteRegistry()

    @property
    def registry(self) -> RouteRegistry:
        return self._registry

    async def build_registry(self) -> RouteRegistry:
        """Scan, map, and register every route file without applying.

        Raises the first scan, mapping, or registration error.
        """
        route_files = scan_routes(
            self._config.routes_dir,
            exclude=self._config.compiled_exclude(),
            extensions=self._config.extensions,
            index_name=self._config.index_name,
        )
        if not route_files:
            logger.warning("No route files found in %s", self._config.routes_dir)
            return self._registry

        for route_file in route_files:
            try:
                definition = await self._mapper.map_route(route_file)
            except Exception:
                logger.error("Failed to load route: %s", route_file.relative_path)
                raise
            try:
                self._registry.register(definition)
            except Exception:
                logger.error("Failed to register route: %s", route_file.relative_path)
                raise

        return self._registry

    async def load_routes(self, dispatcher: Dispatcher) -> RouteRegistry:
        """Build the route table and mount it on *dispatcher*."""
        start = time.perf_counter()

        registry = await self.build_registry()
        registry.apply_to_dispatcher(dispatcher)

        if self._config.debug:
            _log_stats(registry, time.perf_counter() - start)
        return registry


def _log_stats(registry: RouteRegistry, elapsed: float) -> None:
    stats = registry.get_stats()
    logger.debug(
        "Route priority: %d static, %d dynamic, %d catch-all",
        stats.by_priority["static"],
        stats.by_priority["dynamic"],
        stats.by_priority["catch_all"],
    )
    methods = ", ".join(f"{method}({count})" for method, count in stats.by_method.items() if count)
    if methods:
        logger.debug("Route methods: %s", methods)
    if stats.by_tag:
        tags = ", ".join(f"{tag}({count})" for tag, count in stats.by_tag.items())
        logger.debug("Route tags: %s", tags)
    logger.debug("Routes loaded in %.1fms", elapsed * 1000)


async def load_routes_from_directory(
    dispatcher: Dispatcher,
    routes_dir: str | Path | None = None,
    *,
    debug: bool = False,
) -> RouteRegistry:
    """Load ``routes_dir`` (default ``<cwd>/routes``) onto *dispatcher*."""
    directory = Path(routes_dir) if routes_dir is not None else Path.cwd() / "routes"
    loader = RouteLoader(RoutesConfig(routes_dir=directory, debug=debug))
    return await loader.load_routes(dispatcher)
