"""PostgreSQL backend over an ``asyncpg`` connection pool."""

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import Any

from goodie.data.errors import DriverNotInstalledError


class PostgresSession:
    __slots__ = ("_conn",)

    def __init__(self, conn: Any) -> None:
        self._conn = conn

    async def fetch_all(self, sql: str, params: Sequence[Any]) -> list[dict[str, Any]]:
        return [dict(record) for record in await self._conn.fetch(sql, *params)]

    async def fetch_first(self, sql: str, params: Sequence[Any]) -> dict[str, Any] | None:
        record = await self._conn.fetchrow(sql, *params)
        return None if record is None else dict(record)

    async def run(self, sql: str, params: Sequence[Any]) -> int:
        status = await self._conn.execute(sql, *params)
        # "UPDATE 2", "DELETE 0", "INSERT 0 1"
        count = status.rsplit(" ", 1)[-1]
        return int(count) if count.isdigit() else 0

    async def insert(self, sql: str, params: Sequence[Any], id_column: str) -> int | None:
        return await self._conn.fetchval(f"{sql} RETURNING {id_column}", *params)

    async def script(self, sql: str) -> None:
        await self._conn.execute(sql)


class PostgresBackend:
    __slots__ = ("_pool",)

    def __init__(self, pool: Any) -> None:
        self._pool = pool

    @asynccontextmanager
    async def session(self) -> AsyncIterator[PostgresSession]:
        async with self._pool.acquire() as conn:
            yield PostgresSession(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[PostgresSession]:
        async with self._pool.acquire() as conn, conn.transaction():
            yield PostgresSession(conn)

    async def close(self) -> None:
        await self._pool.close()


async def open_backend(url: str, pool_size: int) -> PostgresBackend:
    try:
        import asyncpg
    except ImportError:
        msg = (
            "goodie.data requires 'asyncpg' for PostgreSQL databases. "
            "Install it with: pip install goodie[pg]"
        )
        raise DriverNotInstalledError(msg) from None
    pool = await asyncpg.create_pool(url, min_size=1, max_size=pool_size)
    return PostgresBackend(pool)
