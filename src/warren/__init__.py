"""Warren — file-derived routing for Python REST services.

Drop handler files into a directory; warren turns the tree into an
ordered, conflict-checked route table.

Basic usage::

    from warren import Router, load_routes_from_directory

    router = Router()
    await load_routes_from_directory(router, "routes")
    router.compile()
    response = await router.dispatch(request)

A route file::

    # routes/users/[id].py
    meta = {"description": "Fetch one user", "tags": ["users"]}

    async def GET(ctx):
        return ctx.json({"id": ctx.params["id"]})
"""

__version__ = "0.1.0.dev0"
__all__ = [
    "ConfigurationError",
    "DuplicateRouteError",
    "HandlerSet",
    "InvalidParameterNameError",
    "InvalidRouteFileError",
    "MethodNotAllowed",
    "NotFound",
    "Request",
    "Response",
    "RouteContext",
    "RouteLoader",
    "RouteRegistry",
    "Router",
    "RoutesConfig",
    "ScanError",
    "WarrenError",
    "load_routes_from_directory",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import warren`` fast while providing a clean top-level API.
    """
    if name == "RoutesConfig":
        from warren.config import RoutesConfig

        return RoutesConfig

    if name == "Request":
        from warren.http.request import Request

        return Request

    if name == "Response":
        from warren.http.response import Response

        return Response

    if name in (
        "HandlerSet",
        "RouteContext",
        "RouteLoader",
        "RouteRegistry",
        "Router",
        "load_routes_from_directory",
    ):
        from warren import routing as _routing

        return getattr(_routing, name)

    if name in (
        "ConfigurationError",
        "DuplicateRouteError",
        "InvalidParameterNameError",
        "InvalidRouteFileError",
        "MethodNotAllowed",
        "NotFound",
        "ScanError",
        "WarrenError",
    ):
        from warren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
