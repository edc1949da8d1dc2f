"""Filesystem scan of the routes directory.

Walks the routes directory tree and produces one :class:`RouteFile` per
handler file:

- Directory and file names wrapped in ``[brackets]`` are path parameters
- ``[...name]`` captures the rest of the path
- ``index.py`` maps to its directory URL

The scan is eager: priority sorting downstream needs the full set.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from warren.errors import ScanError
from warren.routing.segments import (
    CatchAllSegment,
    DynamicSegment,
    IndexSegment,
    Segment,
    classify_segment,
    strip_extension,
)

logger = logging.getLogger("warren.routes")


@dataclass(frozen=True, slots=True)
class RouteFile:
    """A discovered route file.

    Attributes:
        absolute_path: Resolved filesystem path of the file.
        relative_path: POSIX path relative to the routes directory.
        segments: Directory names followed by the file name (with extension).
        is_dynamic: Any segment is ``[name]`` or ``[...name]``.
        is_catch_all: Any segment is ``[...name]``.
        is_index: The file stem is the index marker.
    """

    absolute_path: str
    relative_path: str
    segments: tuple[str, ...]
    is_dynamic: bool = False
    is_catch_all: bool = False
    is_index: bool = False


def scan_routes(
    routes_dir: str | Path,
    *,
    exclude: Iterable[re.Pattern[str]] = (),
    extensions: tuple[str, ...] = (".py",),
    index_name: str = "index",
) -> list[RouteFile]:
    """Walk a routes directory and return every route file in it.

    Args:
        routes_dir: Root of the route tree.
        exclude: Patterns searched against each entry's relative path;
            a match skips the file (or the whole directory).
        extensions: File suffixes that mark a route file.
        index_name: File stem that collapses into its parent path.

    Returns:
        Route files in deterministic (sorted) walk order.  A missing
        ``routes_dir`` yields an empty list.

    Raises:
        ScanError: ``routes_dir`` is not a directory or cannot be read.
    """
    root = Path(routes_dir).resolve()
    try:
        exists = root.exists()
        is_dir = exists and root.is_dir()
    except OSError as exc:
        raise ScanError(str(root), f"Cannot access directory: {exc}") from exc
    if not exists:
        logger.warning("Routes directory not found: %s", root)
        return []
    if not is_dir:
        raise ScanError(str(root), "Not a directory")

    scanner = _Scanner(
        root,
        exclude=tuple(exclude),
        extensions=extensions,
        index_name=index_name,
    )
    logger.debug("Scanning routes directory: %s", root)
    files: list[RouteFile] = []
    scanner.walk(root, files)
    logger.debug("Found %d route files", len(files))
    return files


class _Scanner:
    """Recursive walker; holds the options shared by every directory level."""

    __slots__ = ("_exclude", "_extensions", "_index_name", "_root")

    def __init__(
        self,
        root: Path,
        *,
        exclude: tuple[re.Pattern[str], ...],
        extensions: tuple[str, ...],
        index_name: str,
    ) -> None:
        self._root = root
        self._exclude = exclude
        self._extensions = extensions
        self._index_name = index_name

    def walk(self, directory: Path, files: list[RouteFile]) -> None:
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda entry: entry.name)
        except OSError as exc:
            raise ScanError(str(directory), f"Cannot read directory: {exc}") from exc

        for entry in entries:
            relative = Path(entry.path).relative_to(self._root).as_posix()
            if self._is_excluded(relative):
                logger.debug("  Excluded: %s", relative)
                continue

            try:
                is_dir = entry.is_dir()
                is_file = entry.is_file()
            except OSError as exc:
                logger.warning("Cannot access: %s (%s)", entry.path, exc)
                continue

            if is_dir:
                self.walk(Path(entry.path), files)
            elif is_file and self._is_route_file(entry.name):
                route_file = self._create_route_file(Path(entry.path), relative)
                files.append(route_file)
                logger.debug("  + %s", route_file.relative_path)

    def _is_excluded(self, relative_path: str) -> bool:
        return any(pattern.search(relative_path) for pattern in self._exclude)

    def _is_route_file(self, name: str) -> bool:
        return any(name.endswith(ext) and name != ext for ext in self._extensions)

    def _create_route_file(self, path: Path, relative_path: str) -> RouteFile:
        segments = tuple(relative_path.split("/"))
        classified = classify_path(segments, self._extensions, self._index_name)
        return RouteFile(
            absolute_path=str(path),
            relative_path=relative_path,
            segments=segments,
            is_dynamic=any(isinstance(s, DynamicSegment | CatchAllSegment) for s in classified),
            is_catch_all=any(isinstance(s, CatchAllSegment) for s in classified),
            is_index=isinstance(classified[-1], IndexSegment),
        )


def classify_path(
    segments: tuple[str, ...],
    extensions: tuple[str, ...] = (".py",),
    index_name: str = "index",
) -> list[Segment]:
    """Classify every segment of a route file path.

    Directory components are never the index marker; the final
    component has its extension stripped first.
    """
    *directories, filename = segments
    classified: list[Segment] = [classify_segment(d, index_name=None) for d in directories]
    stem = strip_extension(filename, extensions)
    classified.append(classify_segment(stem, index_name=index_name))
    return classified
