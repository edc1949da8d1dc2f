"""Route loading configuration.

RoutesConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

import re
from dataclasses import dataclass
from pathlib import Path

from warren.errors import ConfigurationError

# Test modules, private modules (``__init__.py``, ``_helpers.py``) and caches
# never define routes.
DEFAULT_EXCLUDE: tuple[str, ...] = (
    r"(^|/)test_[^/]*\.py$",
    r"_test\.py$",
    r"(^|/)conftest\.py$",
    r"(^|/)_[^/]*$",
    r"(^|/)__pycache__(/|$)",
)


@dataclass(frozen=True, slots=True)
class RoutesConfig:
    """Route loading configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RoutesConfig(routes_dir="api/routes", debug=True)
    """

    routes_dir: str | Path = "routes"

    # File selection
    extensions: tuple[str, ...] = (".py",)
    exclude: tuple[str | re.Pattern[str], ...] = DEFAULT_EXCLUDE

    # Segment syntax
    index_name: str = "index"

    # Diagnostics
    debug: bool = False

    def compiled_exclude(self) -> tuple[re.Pattern[str], ...]:
        """Compile exclude rules, passing pre-compiled patterns through.

        Raises ``ConfigurationError`` for a rule that is not a valid regex.
        """
        compiled: list[re.Pattern[str]] = []
        for rule in self.exclude:
            if isinstance(rule, re.Pattern):
                compiled.append(rule)
                continue
            try:
                compiled.append(re.compile(rule))
            except re.error as exc:
                msg = f"Invalid exclude pattern {rule!r}: {exc}"
                raise ConfigurationError(msg) from exc
        return tuple(compiled)
