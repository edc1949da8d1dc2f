"""Handler sets — the per-file bundle of method handlers a dispatcher mounts.

A route file exposes its handlers one of two ways:

    # 1. A pre-built handler set, used as-is
    handlers = HandlerSet().get(list_users).post(create_user)

    # 2. Module-level functions named after HTTP methods
    async def GET(ctx: RouteContext) -> Response:
        return ctx.json({"id": ctx.params["id"]})

Functions of the second shape are wrapped by :func:`wrap_handler`, which
hands them a :class:`RouteContext` with normalised path params, query
params (repeated keys become lists) and a lazy JSON body accessor.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from warren._internal.invoke import invoke
from warren.errors import MethodNotAllowed
from warren.http.request import Request
from warren.http.response import Response, json_response

# HEAD is not supported; a HEAD request to a mounted route is a 405.
HTTP_METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")

# Key under which dispatchers store the ``*`` remainder capture
WILDCARD_KEY = "*"

Handler: TypeAlias = Callable[[Request], Awaitable[Response]]
Next: TypeAlias = Callable[[Request], Awaitable[Response]]
Middleware: TypeAlias = Callable[[Request, Next], Awaitable[Response]]


@dataclass(slots=True)
class RouteContext:
    """What a method-function handler receives.

    Attributes:
        params: Path parameters by name.
        query: Query parameters; repeated keys map to a list of values.
        raw: The underlying request.
    """

    params: dict[str, str]
    query: dict[str, str | list[str]]
    raw: Request
    _data: Any = field(default=None, repr=False)
    _data_loaded: bool = field(default=False, repr=False)

    async def data(self) -> Any:
        """Parse the request body as JSON on first call; cached afterwards."""
        if not self._data_loaded:
            self._data = await self.raw.json()
            self._data_loaded = True
        return self._data

    def json(
        self,
        data: Any,
        status: int = 200,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        """Build a JSON response."""
        return json_response(data, status, headers)


def normalize_path_params(
    path_params: Mapping[str, str],
    catch_all: str | None = None,
) -> dict[str, str]:
    """Rename the dispatcher's ``*`` capture to the catch-all parameter name."""
    params = dict(path_params)
    if catch_all is not None and WILDCARD_KEY in params:
        params[catch_all] = params.pop(WILDCARD_KEY)
    return params


def wrap_handler(func: Callable[..., Any], *, catch_all: str | None = None) -> Handler:
    """Adapt a ``func(ctx)`` user function to the uniform handler shape.

    *func* may be sync or async.  A ``str`` or ``bytes`` return becomes a
    plain response; a ``dict`` or ``list`` becomes JSON.
    """

    async def handler(request: Request) -> Response:
        ctx = RouteContext(
            params=normalize_path_params(request.path_params, catch_all),
            query=request.query.to_dict(),
            raw=request,
        )
        result = await invoke(func, ctx)
        return _to_response(result)

    handler.__name__ = getattr(func, "__name__", "handler")
    handler.__qualname__ = getattr(func, "__qualname__", handler.__name__)
    handler.__wrapped__ = func  # type: ignore[attr-defined]
    return handler


def _to_response(result: Any) -> Response:
    if isinstance(result, Response):
        return result
    if isinstance(result, str | bytes):
        return Response(body=result)
    if isinstance(result, dict | list):
        return json_response(result)
    msg = (
        f"Route handler returned {type(result).__name__}; "
        "expected Response, str, bytes, dict or list"
    )
    raise TypeError(msg)


class HandlerSet:
    """Method -> handler mapping mounted at one URL pattern.

    Middleware registered with :meth:`use` wraps every method handler,
    outermost first.
    """

    __slots__ = ("_handlers", "_middlewares")

    def __init__(self, handlers: Mapping[str, Handler] | None = None) -> None:
        self._handlers: dict[str, Handler] = {}
        self._middlewares: list[Middleware] = []
        for method, handler in (handlers or {}).items():
            self.add(method, handler)

    @classmethod
    def from_functions(
        cls,
        functions: Mapping[str, Callable[..., Any]],
        *,
        catch_all: str | None = None,
    ) -> HandlerSet:
        """Wrap ``{"GET": func, ...}`` user functions into a handler set."""
        handler_set = cls()
        for method, func in functions.items():
            handler_set.add(method, wrap_handler(func, catch_all=catch_all))
        return handler_set

    # -- Registration --

    def add(self, method: str, handler: Handler) -> HandlerSet:
        method = method.upper()
        if method not in HTTP_METHODS:
            msg = f"Unsupported HTTP method {method!r}; expected one of {', '.join(HTTP_METHODS)}"
            raise ValueError(msg)
        self._handlers[method] = handler
        return self

    def get(self, handler: Handler) -> HandlerSet:
        return self.add("GET", handler)

    def post(self, handler: Handler) -> HandlerSet:
        return self.add("POST", handler)

    def put(self, handler: Handler) -> HandlerSet:
        return self.add("PUT", handler)

    def patch(self, handler: Handler) -> HandlerSet:
        return self.add("PATCH", handler)

    def delete(self, handler: Handler) -> HandlerSet:
        return self.add("DELETE", handler)

    def options(self, handler: Handler) -> HandlerSet:
        return self.add("OPTIONS", handler)

    def use(self, middleware: Middleware) -> HandlerSet:
        """Append a middleware to the chain."""
        self._middlewares.append(middleware)
        return self

    # -- Introspection --

    @property
    def methods(self) -> frozenset[str]:
        return frozenset(self._handlers)

    @property
    def middlewares(self) -> tuple[Middleware, ...]:
        return tuple(self._middlewares)

    def __contains__(self, method: object) -> bool:
        return method in self._handlers

    def __repr__(self) -> str:
        return f"HandlerSet(methods={sorted(self._handlers)})"

    # -- Dispatch --

    async def handle(self, request: Request) -> Response:
        """Run the middleware chain, then the handler for ``request.method``.

        Raises ``MethodNotAllowed`` if this set has no handler for the method.
        """
        handler = self._handlers.get(request.method.upper())
        if handler is None:
            raise MethodNotAllowed(self.methods)

        call: Next = handler
        for middleware in reversed(self._middlewares):
            call = _bind(middleware, call)
        return await call(request)


def _bind(middleware: Middleware, next_call: Next) -> Next:
    async def call(request: Request) -> Response:
        return await invoke(middleware, request, next_call)

    return call
