"""``warren check`` — validate a routes directory.

Runs the full boot sequence against a throwaway router, printing the
route count and any conflict warnings.  Exits with code 1 on a boot error.
"""

import argparse
import sys

from warren.cli._resolve import resolve_registry
from warren.errors import WarrenError
from warren.routing.dispatcher import Router


def run_check(args: argparse.Namespace) -> None:
    """Validate ``args.routes_dir`` and report the outcome."""
    registry = resolve_registry(args)
    try:
        registry.apply_to_dispatcher(Router())
    except WarrenError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    for conflict in registry.conflicts:
        print(f"Warning: {conflict}")
    print(f"OK: {len(registry)} routes, {len(registry.conflicts)} conflict warning(s)")
