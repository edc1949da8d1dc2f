"""Immutable HTTP request.

Frozen metadata with async body access.  The host's transport builds a
``Request`` per call and hands it to the dispatcher; the body is pulled
through an ASGI-style ``receive`` callable only when a handler asks.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncGenerator, Awaitable, Callable, Mapping, MutableMapping
from dataclasses import dataclass, field, replace
from typing import Any, TypeAlias

from warren.http.query import QueryParams

Receive: TypeAlias = Callable[[], Awaitable[MutableMapping[str, Any]]]


async def _empty_receive() -> MutableMapping[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, query) is frozen at creation.
    Body is accessed asynchronously via ``.body()``, ``.json()``, ``.text()``.
    """

    method: str
    path: str
    query: QueryParams = field(default_factory=QueryParams)
    headers: Mapping[str, str] = field(default_factory=dict)
    path_params: dict[str, str] = field(default_factory=dict)

    # Private: ASGI receive callable for body streaming
    _receive: Receive = _empty_receive

    # Private: mutable body cache (dict contents are mutable even though
    # the field reference is frozen)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    def with_path_params(self, path_params: dict[str, str]) -> Request:
        """Return a copy carrying the dispatcher's path captures."""
        return replace(self, path_params=path_params, _cache=self._cache)

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        Result is cached — the receive callable is consumed once, then
        the same bytes are returned on subsequent calls.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def json(self) -> Any:
        """Parse the body as JSON."""
        raw = await self.body()
        return json_module.loads(raw)

    async def text(self) -> str:
        """Read the body as text (UTF-8)."""
        raw = await self.body()
        return raw.decode("utf-8")

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Mapping[str, Any], receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        headers = {
            name.decode("latin-1").lower(): value.decode("latin-1")
            for name, value in scope.get("headers", ())
        }
        return cls(
            method=scope["method"],
            path=scope["path"],
            query=QueryParams(scope.get("query_string", b"")),
            headers=headers,
            _receive=receive,
        )
