"""Pooled async database access.

Supports PostgreSQL (via ``asyncpg``) and SQLite (via stdlib ``sqlite3``
+ ``anyio``). SQL and positional parameters in, result rows out.

The pool is created lazily on the first query, so configuring a database
never touches the network. Driver errors are not wrapped: constraint
violations, syntax errors, and lost connections reach the caller as the
driver raised them.
"""

import logging
import time
from collections.abc import Mapping, Sequence
from typing import Any

import anyio

from sparrow.config import DatabaseConfig
from sparrow.data.errors import DriverNotInstalledError

logger = logging.getLogger("sparrow.data")


class Database:
    """A lazily created, bounded connection pool.

    Usage::

        db = Database(DatabaseConfig.from_mapping({
            "user": "app", "password": "secret", "database": "shop",
        }))

        rows = await db.query("SELECT * FROM users WHERE id = $1", [42])
        await db.close()

    PostgreSQL placeholders are ``$1, $2, ...``; SQLite uses ``?``.
    At most ``config.pool_size`` connections are open at once; callers
    beyond that wait for a free connection.
    """

    __slots__ = ("_async_lock", "_config", "_conn_lock", "_pool")

    def __init__(self, config: DatabaseConfig | Mapping[str, Any]) -> None:
        if not isinstance(config, DatabaseConfig):
            config = DatabaseConfig.from_mapping(config)
        self._config = config
        self._pool: Any = None
        # Created lazily; anyio primitives want a running event loop
        self._async_lock: anyio.Lock | None = None
        self._conn_lock: anyio.Lock | None = None

    def __repr__(self) -> str:
        cfg = self._config
        state = "connected" if self.connected else "idle"
        return f"<Database {cfg.driver} {cfg.database!r} {state}>"

    @property
    def config(self) -> DatabaseConfig:
        return self._config

    @property
    def driver(self) -> str:
        return self._config.driver

    @property
    def connected(self) -> bool:
        return self._pool is not None

    # -- Query --

    async def query(self, sql: str, params: Sequence[Any] | None = None) -> list[dict[str, Any]]:
        """Execute *sql* with positional *params* and return the result rows.

        Statements that produce no rows (INSERT/UPDATE/DELETE without
        ``RETURNING``) return an empty list.
        """
        args = tuple(params or ())
        await self.connect()
        t0 = time.perf_counter()
        try:
            if self._config.driver == "sqlite":
                if self._conn_lock is None:
                    self._conn_lock = anyio.Lock()
                # SQLite: the pool IS one connection, used by one task at a time
                async with self._conn_lock:
                    return await self._pool.fetch_all(sql, args)

            async with self._pool.acquire() as conn:
                records = await conn.fetch(sql, *args)
                return [dict(record) for record in records]
        finally:
            if self._config.echo:
                ms = (time.perf_counter() - t0) * 1000
                logger.info("%6.1fms  %s  params=%r", ms, sql, args)

    # -- Lifecycle --

    async def connect(self) -> None:
        """Create the pool if it does not exist yet.

        Called automatically on first query. Call explicitly to fail fast
        at startup. Concurrent first callers create exactly one pool.
        """
        if self._pool is not None:
            return
        if self._async_lock is None:
            self._async_lock = anyio.Lock()
        async with self._async_lock:
            if self._pool is not None:
                return
            self._pool = await _create_pool(self._config)
            logger.debug("Opened %s pool for %r", self._config.driver, self._config.database)

    async def close(self) -> None:
        """Close the pool and every connection in it. Safe to call repeatedly."""
        pool, self._pool = self._pool, None
        if pool is None:
            return
        await pool.close()
        logger.debug("Closed %s pool for %r", self._config.driver, self._config.database)

    async def __aenter__(self) -> "Database":
        await self.connect()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()


# =============================================================================
# Pool creation, dispatched on the driver name
# =============================================================================


async def _create_pool(config: DatabaseConfig) -> Any:
    if config.driver == "sqlite":
        return await _create_sqlite_pool(config)
    return await _create_pg_pool(config)


async def _create_sqlite_pool(config: DatabaseConfig) -> Any:
    from sparrow.data._sqlite import connect as sqlite_connect

    conn = await sqlite_connect(config.database, **config.options)
    await conn.fetch_all("PRAGMA foreign_keys=ON")
    return conn


async def _create_pg_pool(config: DatabaseConfig) -> Any:
    try:
        import asyncpg
    except ImportError:
        msg = (
            "sparrow.data requires 'asyncpg' for PostgreSQL databases. "
            "Install it with: pip install asyncpg"
        )
        raise DriverNotInstalledError(msg) from None

    return await asyncpg.create_pool(
        host=config.host,
        port=config.port,
        user=config.user,
        password=config.password,
        database=config.database,
        min_size=0,
        max_size=config.pool_size,
        **config.options,
    )
