"""Serving — runs a sparrow App under uvicorn on the current event loop.

``start_server()`` returns as soon as the socket is bound and the app is
accepting connections, handing back a ``ServerHandle`` for lifecycle
control. The HTTP protocol itself is entirely uvicorn's.
"""

import asyncio
import logging
from typing import Any

import uvicorn

from sparrow.config import AppConfig

logger = logging.getLogger("sparrow.server")

# How often to check whether uvicorn finished binding
_STARTUP_POLL_INTERVAL = 0.01


class ServerHandle:
    """A running server.

    Usage::

        handle = await app.listen(8000)
        ...
        await handle.close()   # stop accepting, finish in-flight requests
    """

    __slots__ = ("_server", "_task")

    def __init__(self, server: uvicorn.Server, task: asyncio.Task[Any]) -> None:
        self._server = server
        self._task = task

    def __repr__(self) -> str:
        state = "closed" if self.closed else "listening"
        return f"<ServerHandle {self.host}:{self.port} {state}>"

    @property
    def host(self) -> str:
        return self._server.config.host

    @property
    def port(self) -> int:
        """The bound port, resolved when listening on port 0."""
        for server in getattr(self._server, "servers", ()):
            for sock in server.sockets:
                return sock.getsockname()[1]
        return self._server.config.port

    @property
    def closed(self) -> bool:
        return self._task.done()

    async def wait(self) -> None:
        """Block until the server stops (signal or ``close()``)."""
        await self._task

    async def close(self) -> None:
        """Stop accepting connections and wait for shutdown to finish.

        Does not close the app's database pool; see ``App.close()``.
        """
        self._server.should_exit = True
        await self._task


async def start_server(app: Any, config: AppConfig, *, host: str, port: int) -> ServerHandle:
    """Start uvicorn in a background task and wait until it is listening.

    Raises ``RuntimeError`` if the server stops before it finishes
    starting (e.g. the lifespan startup failed), or is still not listening
    after ``config.startup_timeout`` seconds.
    """
    server = uvicorn.Server(
        uvicorn.Config(
            app,
            host=host,
            port=port,
            log_level=config.log_level,
            access_log=config.access_log,
            lifespan=config.lifespan,
        )
    )
    task = asyncio.create_task(server.serve())

    try:
        async with asyncio.timeout(config.startup_timeout):
            while not server.started:
                if task.done():
                    task.result()
                    msg = f"Server on {host}:{port} stopped before it started listening"
                    raise RuntimeError(msg)
                await asyncio.sleep(_STARTUP_POLL_INTERVAL)
    except TimeoutError:
        server.should_exit = True
        task.cancel()
        await asyncio.wait({task})
        msg = (
            f"Server on {host}:{port} did not start listening within "
            f"{config.startup_timeout}s"
        )
        raise RuntimeError(msg) from None

    handle = ServerHandle(server, task)
    logger.info("Listening on http://%s:%d", host, handle.port)
    return handle
