"""Sparrow application class.

Mutable during setup (route registration, database configuration).
Frozen at runtime when ``listen()``/``run()`` or ``__call__()`` is first
invoked. Routes are read-only while serving.
"""

import asyncio
import logging
import threading
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from sparrow._internal.asgi import Receive, Scope, Send
from sparrow._internal.invoke import invoke
from sparrow._internal.types import Handler, Hook
from sparrow.config import AppConfig, DatabaseConfig
from sparrow.data.database import Database
from sparrow.errors import DatabaseNotConfigured
from sparrow.routing.route import Route
from sparrow.routing.router import Router
from sparrow.server.handler import handle_request
from sparrow.server.serve import ServerHandle, start_server

logger = logging.getLogger("sparrow.app")


class App:
    """The sparrow application.

    Usage::

        app = App()
        app.database({"user": "root", "password": "admin", "database": "testdb"})

        def index(req, res):
            res.json({"message": "Hello World!"})

        app.get("/", index)

        @app.get("/users/:id")
        async def show_user(req, res):
            rows = await req.db_query("SELECT * FROM users WHERE id = $1", [int(req.params["id"])])
            res.json(rows)

        app.run(5000, lambda: print("Server running on port 5000"))

    Thread safety:
        Setup is single-threaded (registration at import time). The freeze
        transition uses a Lock + double-check so exactly one caller flips
        the app into serving mode.
    """

    __slots__ = (
        "_db",
        "_freeze_lock",
        "_frozen",
        "_retired_dbs",
        "_router",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        database: DatabaseConfig | Mapping[str, Any] | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self._router = Router()
        self._startup_hooks: list[Hook] = []
        self._shutdown_hooks: list[Hook] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()
        self._db: Database | None = None
        # Pools replaced by a later database() call, closed by close()
        self._retired_dbs: list[Database] = []
        if database is not None:
            self.database(database)

    # -- Route registration --

    def get(self, path: str, handler: Handler | None = None) -> Any:
        """Register a GET handler.

        Call directly (``app.get("/", index)``) or use as a decorator
        (``@app.get("/")``).
        """
        return self.route("GET", path, handler)

    def post(self, path: str, handler: Handler | None = None) -> Any:
        """Register a POST handler. Same call styles as ``get()``."""
        return self.route("POST", path, handler)

    def route(self, method: str, path: str, handler: Handler | None = None) -> Any:
        """Register *handler* for (method, path).

        Re-registering the same pair replaces the previous handler.
        Path patterns may contain ``:name`` segments, bound into
        ``req.params`` as strings.
        """
        if handler is not None:
            self._check_not_frozen()
            self._router.add(method, path, handler)
            return handler

        def decorator(func: Handler) -> Handler:
            self._check_not_frozen()
            self._router.add(method, path, func)
            return func

        return decorator

    @property
    def router(self) -> Router:
        return self._router

    @property
    def routes(self) -> list[Route]:
        return self._router.routes

    # -- Database --

    def database(self, config: DatabaseConfig | Mapping[str, Any]) -> Database:
        """Configure the database for this app.

        Recognized keys: ``host`` (default ``"localhost"``), ``port``,
        ``user``, ``password``, ``database``, ``driver`` (``"postgresql"``
        or ``"sqlite"``), ``pool_size`` (default 10), ``echo``. Any other
        key is passed through to the driver.

        The pool opens lazily on the first query. Calling this again
        replaces the configuration; the previous pool is closed by
        ``close()``.
        """
        db = Database(config)
        if self._db is not None:
            self._retired_dbs.append(self._db)
        self._db = db
        return db

    @property
    def db(self) -> Database | None:
        """The configured database, or ``None``."""
        return self._db

    async def query(self, sql: str, params: Sequence[Any] | None = None) -> list[dict[str, Any]]:
        """Run *sql* with positional *params* and return the result rows.

        Raises ``DatabaseNotConfigured`` if ``database()`` was never called.
        Driver errors propagate unchanged.
        """
        if self._db is None:
            raise DatabaseNotConfigured
        return await self._db.query(sql, params)

    # -- Lifecycle hooks --

    def on_startup(self, func: Hook) -> Hook:
        """Register a sync or async startup hook via decorator.

        Hooks run in registration order during ASGI lifespan startup,
        before the server begins accepting requests.
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Hook) -> Hook:
        """Register a sync or async shutdown hook via decorator.

        Hooks run in registration order during ASGI lifespan shutdown,
        after which the database pool is closed.
        """
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Server --

    async def listen(
        self,
        port: int | None = None,
        callback: Callable[[], Any] | None = None,
        *,
        host: str | None = None,
    ) -> ServerHandle:
        """Bind and start serving on the running event loop.

        Returns once the server is accepting connections, after calling
        *callback* (sync or async). The returned handle stops the server;
        it does not close the database, which is what ``close()`` is for.
        """
        self._ensure_frozen()
        _host = host or self.config.host
        _port = self.config.port if port is None else port

        handle = await start_server(self, self.config, host=_host, port=_port)
        if callback is not None:
            await invoke(callback)
        return handle

    def run(
        self,
        port: int | None = None,
        callback: Callable[[], Any] | None = None,
        *,
        host: str | None = None,
    ) -> None:
        """Serve until interrupted. Blocking counterpart of ``listen()``."""

        async def _serve() -> None:
            handle = await self.listen(port, callback, host=host)
            await handle.wait()

        asyncio.run(_serve())

    async def close(self) -> None:
        """Close the database pool(s), if any. Safe to call repeatedly.

        Does not stop the HTTP listener.
        """
        retired, self._retired_dbs = self._retired_dbs, []
        for db in retired:
            await db.close()
        if self._db is not None:
            await self._db.close()

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()

        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            query=self.query,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup, runs startup hooks, and on shutdown
        runs shutdown hooks and closes the database.
        """
        self._ensure_frozen()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    for hook in self._startup_hooks:
                        await invoke(hook)
                except Exception as exc:
                    logger.exception("Startup hook failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                for hook in self._shutdown_hooks:
                    await invoke(hook)
                await self.close()
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._frozen = True
            logger.debug("Serving %d route(s)", len(self._router.routes))

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes and hooks before calling app.listen()."
            )
            raise RuntimeError(msg)
