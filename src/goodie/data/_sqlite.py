"""SQLite backend: stdlib ``sqlite3`` driven from anyio worker threads.

A database file gets exactly one connection, opened in autocommit mode.
Callers take turns through an anyio lock; a transaction keeps the lock
until it commits or rolls back.
"""

import sqlite3
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import Any

import anyio
from anyio import to_thread


class SQLiteSession:
    """Statements on the shared connection. The owning backend holds the lock."""

    __slots__ = ("_conn",)

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def _select(self, sql: str, params: Sequence[Any], limit: int) -> list[dict[str, Any]]:
        cursor = self._conn.execute(sql, params)
        found = cursor.fetchmany(limit) if limit else cursor.fetchall()
        columns = [column[0] for column in cursor.description or ()]
        return [dict(zip(columns, row, strict=True)) for row in found]

    async def fetch_all(self, sql: str, params: Sequence[Any]) -> list[dict[str, Any]]:
        return await to_thread.run_sync(self._select, sql, params, 0)

    async def fetch_first(self, sql: str, params: Sequence[Any]) -> dict[str, Any] | None:
        rows = await to_thread.run_sync(self._select, sql, params, 1)
        return rows[0] if rows else None

    async def run(self, sql: str, params: Sequence[Any]) -> int:
        cursor = await to_thread.run_sync(self._conn.execute, sql, params)
        return cursor.rowcount

    async def insert(self, sql: str, params: Sequence[Any], id_column: str) -> int | None:
        cursor = await to_thread.run_sync(self._conn.execute, sql, params)
        return cursor.lastrowid

    async def script(self, sql: str) -> None:
        # executescript commits anything pending before it starts
        await to_thread.run_sync(self._conn.executescript, sql)


class SQLiteBackend:
    __slots__ = ("_conn", "_lock", "_session")

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self._session = SQLiteSession(conn)
        self._lock = anyio.Lock()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[SQLiteSession]:
        async with self._lock:
            yield self._session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[SQLiteSession]:
        async with self._lock:
            self._conn.autocommit = False
            try:
                yield self._session
            except BaseException:
                await to_thread.run_sync(self._conn.rollback)
                raise
            else:
                await to_thread.run_sync(self._conn.commit)
            finally:
                self._conn.autocommit = True

    async def close(self) -> None:
        await to_thread.run_sync(self._conn.close)


def _open(path: str) -> sqlite3.Connection:
    conn = sqlite3.connect(path, autocommit=True, check_same_thread=False)
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


async def open_backend(path: str) -> SQLiteBackend:
    """Open *path* (or ``:memory:``) off the event loop."""
    return SQLiteBackend(await to_thread.run_sync(_open, path))
