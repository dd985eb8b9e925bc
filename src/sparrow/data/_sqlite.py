"""Async SQLite connection using stdlib sqlite3 + anyio.

Every blocking sqlite3 call runs in a worker thread via
``anyio.to_thread``. Statement execution and row fetching happen in one
thread hop so a cursor never crosses threads.
"""

import sqlite3
from collections.abc import Callable, Sequence
from typing import Any

import anyio


def _run_sync(func: Callable[..., Any], *args: Any) -> Any:
    return anyio.to_thread.run_sync(func, *args)  # type: ignore[union-attr]


def _fetch_all(conn: sqlite3.Connection, sql: str, params: Sequence[Any]) -> list[dict[str, Any]]:
    cursor = conn.execute(sql, params)
    try:
        if cursor.description is None:
            # INSERT/UPDATE/DELETE without RETURNING: no rows
            return []
        columns = [desc[0] for desc in cursor.description]
        return [dict(zip(columns, row, strict=True)) for row in cursor.fetchall()]
    finally:
        cursor.close()


class AsyncConnection:
    """Async wrapper around ``sqlite3.Connection``."""

    __slots__ = ("_conn",)

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    async def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        """Execute *sql* and return every result row as a dict."""
        return await _run_sync(_fetch_all, self._conn, sql, params)

    async def close(self) -> None:
        await _run_sync(self._conn.close)


async def connect(path: str, **options: Any) -> AsyncConnection:
    """Open an async SQLite connection.

    Uses ``autocommit=True`` so each statement commits on its own, and
    ``check_same_thread=False`` because anyio's thread pool may run
    successive calls on different threads.
    """
    conn = await _run_sync(
        lambda: sqlite3.connect(path, autocommit=True, check_same_thread=False, **options)
    )
    return AsyncConnection(conn)
