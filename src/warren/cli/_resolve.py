"""Registry resolution shared by ``warren routes`` and ``warren check``."""

import argparse
import sys

import anyio

from warren.config import DEFAULT_EXCLUDE, RoutesConfig
from warren.errors import WarrenError
from warren.routing.loader import RouteLoader
from warren.routing.registry import RouteRegistry


def config_from_args(args: argparse.Namespace) -> RoutesConfig:
    """Build a RoutesConfig from CLI arguments; ``--exclude`` adds to the defaults."""
    return RoutesConfig(
        routes_dir=args.routes_dir,
        exclude=(*DEFAULT_EXCLUDE, *(args.exclude or ())),
        index_name=args.index,
        debug=args.debug,
    )


def resolve_registry(args: argparse.Namespace) -> RouteRegistry:
    """Scan, map, and register the tree named by ``args.routes_dir``.

    Prints the error and exits 1 on any boot failure.  Errors raised while
    importing a route file (``SyntaxError``, ``ImportError``, ...) are
    boot failures too.
    """
    loader = RouteLoader(config_from_args(args))
    try:
        return anyio.run(loader.build_registry)
    except (WarrenError, ImportError, SyntaxError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
