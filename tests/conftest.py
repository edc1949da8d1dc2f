"""Shared fixtures: route trees built under ``tmp_path``."""

from collections.abc import Callable
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

from warren.routing.scanner import RouteFile, classify_path
from warren.routing.segments import CatchAllSegment, DynamicSegment, IndexSegment

GET_HANDLER = """
async def GET(ctx):
    return ctx.json({"file": __file__.rsplit("/", 1)[-1], "params": ctx.params})
"""


def write_tree(root: Path, files: dict[str, str]) -> Path:
    """Create ``{relative_path: source}`` under *root* and return *root*."""
    for relative, source in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source, encoding="utf-8")
    return root


@pytest.fixture
def route_tree(tmp_path: Path) -> Callable[..., Path]:
    """Build a routes directory; files default to a GET handler."""

    def build(*paths: str, sources: dict[str, str] | None = None) -> Path:
        root = tmp_path / "routes"
        root.mkdir(exist_ok=True)
        write_tree(root, {path: GET_HANDLER for path in paths})
        write_tree(root, sources or {})
        return root

    return build


def make_route_file(relative_path: str, index_name: str = "index") -> RouteFile:
    """Build a RouteFile without touching the filesystem."""
    segments = tuple(relative_path.split("/"))
    classified = classify_path(segments, (".py",), index_name)
    return RouteFile(
        absolute_path=f"/srv/routes/{relative_path}",
        relative_path=relative_path,
        segments=segments,
        is_dynamic=any(isinstance(s, DynamicSegment | CatchAllSegment) for s in classified),
        is_catch_all=any(isinstance(s, CatchAllSegment) for s in classified),
        is_index=isinstance(classified[-1], IndexSegment),
    )


def module_resolver(**attrs: Any) -> Callable[[str], SimpleNamespace]:
    """A resolver returning the same fake module for every path."""

    def resolve(path: str) -> SimpleNamespace:
        return SimpleNamespace(**attrs)

    return resolve


def get_only(**extra: Any) -> Callable[[str], SimpleNamespace]:
    async def GET(ctx):  # noqa: N802 — route files name handlers after methods
        return ctx.json({"ok": True})

    return module_resolver(GET=GET, **extra)
