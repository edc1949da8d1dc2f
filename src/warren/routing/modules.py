"""Default module resolver — imports a route file by path.

The mapper only needs *something* with handler attributes for each route
file; hosts may inject their own resolver (a plugin system, a test
double).  This one executes the file with ``importlib`` in an anyio
worker thread so boot stays responsive while disk-bound imports run.
"""

import hashlib
import importlib.util
import sys
from pathlib import Path
from types import ModuleType

import anyio.to_thread


def _module_name(path: Path) -> str:
    # Route file names like "[...slug].py" are not importable identifiers
    digest = hashlib.sha1(str(path).encode("utf-8"), usedforsecurity=False).hexdigest()[:12]
    stem = "".join(ch if ch.isalnum() else "_" for ch in path.stem)
    return f"_warren_route_{stem}_{digest}"


def import_route_module(path: str | Path) -> ModuleType:
    """Execute the route file at *path* and return the module.

    Raises ``ImportError`` if no loader can be created for the file;
    errors raised while executing the module propagate unchanged.
    """
    file = Path(path)
    spec = importlib.util.spec_from_file_location(_module_name(file), file)
    if spec is None or spec.loader is None:
        msg = f"Cannot create a module loader for route file: {file}"
        raise ImportError(msg, path=str(file))
    module = importlib.util.module_from_spec(spec)
    # dataclasses and typing resolve names through sys.modules[cls.__module__]
    sys.modules[spec.name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(spec.name, None)
        raise
    return module


async def load_route_module(path: str | Path) -> ModuleType:
    """Import a route file off the event loop."""
    return await anyio.to_thread.run_sync(import_route_module, path)
