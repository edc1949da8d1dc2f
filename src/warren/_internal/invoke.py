"""Invoke helpers — call sync or async callables uniformly.

Route handlers, middleware, and module resolvers can be ``def`` or
``async def``.  Any code that calls a user-provided callable must handle
both cases; this helper keeps the sync/async check in one place.

Usage::

    from warren._internal.invoke import invoke

    result = await invoke(handler, ctx)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it's awaitable.

    Works with both sync and async callables::

        # sync — returns immediately, no await needed
        def GET(ctx):
            return ctx.json({"ok": True})

        # async — returns coroutine, awaited automatically
        async def GET(ctx):
            body = await ctx.data()
            return ctx.json(body)
    """
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
