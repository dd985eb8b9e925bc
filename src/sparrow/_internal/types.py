"""Shared type aliases used across sparrow modules."""

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from sparrow.http.request import Request
    from sparrow.http.response import Response

# Route handler: ``def handler(req, res)`` or ``async def handler(req, res)``
Handler: TypeAlias = Callable[["Request", "Response"], Awaitable[None] | None]

# Startup/shutdown and listen callbacks: zero-arg, sync or async
Hook: TypeAlias = Callable[[], Any]
