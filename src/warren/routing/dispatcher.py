"""Dispatcher contract and a first-registered-wins reference router.

The registry mounts routes through :class:`Dispatcher`; anything with a
``mount(pattern, handlers)`` method qualifies.  :class:`Router` is the
bundled implementation: it tries patterns in mount order and takes the
first match, which is why the registry's ordering matters.

Pattern syntax::

    /users          literal
    /users/:id      one path component, captured as "id"
    /docs/*         the remaining path (possibly empty), captured as "*"
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from warren.errors import ConfigurationError, MethodNotAllowed, NotFound
from warren.http.request import Request
from warren.http.response import Response
from warren.routing.handlers import WILDCARD_KEY, HandlerSet


@runtime_checkable
class Dispatcher(Protocol):
    """Anything that accepts ``(pattern, handler set)`` registrations in order."""

    def mount(self, pattern: str, handlers: HandlerSet) -> None: ...


@dataclass(frozen=True, slots=True)
class MountedRoute:
    """A pattern compiled for matching.

    ``names`` lists the capture groups in order; the wildcard capture is
    named ``"*"``.
    """

    pattern: str
    handlers: HandlerSet
    regex: re.Pattern[str]
    names: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: MountedRoute
    path_params: dict[str, str]


def compile_pattern(pattern: str) -> tuple[re.Pattern[str], tuple[str, ...]]:
    """Compile a mount pattern to an anchored regex plus capture names.

    Groups are positional because param names may contain ``$``.

    Examples::

        "/users/:id" -> ^/users/([^/]+)/?$          ("id",)
        "/docs/*"    -> ^/docs(?:/(.*))?/?$         ("*",)
        "/"          -> ^/$                         ()
    """
    parts = [part for part in pattern.strip("/").split("/") if part]
    if not parts:
        return re.compile(r"^/$"), ()

    regex = ""
    names: list[str] = []
    for index, part in enumerate(parts):
        if part == "*":
            if index != len(parts) - 1:
                msg = f"Wildcard must be the last segment of a pattern: {pattern!r}"
                raise ConfigurationError(msg)
            regex += r"(?:/(.*))?"
            names.append(WILDCARD_KEY)
        elif part.startswith(":"):
            regex += r"/([^/]+)"
            names.append(part[1:])
        else:
            regex += "/" + re.escape(part)
    return re.compile(f"^{regex}/?$"), tuple(names)


class Router:
    """Ordered, first-match-wins dispatcher.

    Usage::

        router = Router()
        registry.apply_to_dispatcher(router)
        router.compile()
        response = await router.dispatch(request)
    """

    __slots__ = ("_compiled", "_routes")

    def __init__(self) -> None:
        self._routes: list[MountedRoute] = []
        self._compiled = False

    def mount(self, pattern: str, handlers: HandlerSet) -> None:
        """Append a pattern. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot mount routes after compilation."
            raise RuntimeError(msg)
        regex, names = compile_pattern(pattern)
        self._routes.append(MountedRoute(pattern, handlers, regex, names))

    def compile(self) -> None:
        """Freeze the router. No more routes can be mounted."""
        self._compiled = True

    @property
    def routes(self) -> list[MountedRoute]:
        """Mounted routes in match order."""
        return list(self._routes)

    def match(self, method: str, path: str) -> RouteMatch:
        """Return the first mounted route whose pattern matches *path*.

        Raises ``NotFound`` if no pattern matches.
        Raises ``MethodNotAllowed`` if the first matching pattern's handler
        set lacks *method*.
        """
        for route in self._routes:
            found = route.regex.match(path)
            if found is None:
                continue
            if method.upper() not in route.handlers:
                raise MethodNotAllowed(route.handlers.methods)
            params = {
                name: value or ""
                for name, value in zip(route.names, found.groups(), strict=True)
            }
            return RouteMatch(route=route, path_params=params)
        raise NotFound(f"No route matches {method} {path!r}")

    async def dispatch(self, request: Request) -> Response:
        """Match *request* and run the mounted handler set."""
        matched = self.match(request.method, request.path)
        return await matched.route.handlers.handle(request.with_path_params(matched.path_params))
