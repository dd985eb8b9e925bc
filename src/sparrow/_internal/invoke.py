"""Invoke helpers — call sync or async callables uniformly.

Route handlers, lifecycle hooks, and the ``listen()`` callback can each be
``def`` or ``async def``. This module keeps the sync/async check in
exactly one place.

Usage::

    from sparrow._internal.invoke import invoke

    await invoke(route.handler, request, response)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it's awaitable.

    Works with both sync and async callables::

        def index(req, res):
            res.json({"message": "Hello World!"})

        async def show_user(req, res):
            rows = await req.db_query("SELECT * FROM users WHERE id = $1", [req.params["id"]])
            res.json(rows)
    """
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
