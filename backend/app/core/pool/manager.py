"""
Connection pool for the app database.

One AsyncEngine (and therefore one pool) per process. Sizing and acquisition
timeout are the SQLAlchemy pool defaults; this module only decides the
target URL and TLS settings and makes sure the pool is built once.
"""

import logging
import threading
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from .tls import TlsPolicy, select_tls_policy

_log = logging.getLogger(__name__)

ASYNC_DRIVERNAME = "postgresql+psycopg"


def to_async_url(connection_string: str) -> URL:
    """Parse a ``postgres://`` / ``postgresql[+driver]://`` URI and switch it to the psycopg async driver."""
    url = make_url(connection_string)
    backend = url.drivername.split("+", 1)[0]
    if backend not in ("postgres", "postgresql"):
        raise ValueError(f"Unsupported database URL scheme: {url.drivername}")
    return url.set(drivername=ASYNC_DRIVERNAME)


class PoolManager:
    """Owns the process-wide AsyncEngine and hands out pooled connections."""

    def __init__(
        self,
        connection_string: str,
        tls: TlsPolicy | None = None,
        *,
        connect_timeout: int | None = None,
    ) -> None:
        self.tls = tls if tls is not None else select_tls_policy(connection_string)
        self.url = to_async_url(connection_string)
        connect_args: dict[str, Any] = dict(self.tls.connect_args())
        if connect_timeout is not None and connect_timeout > 0:
            connect_args["connect_timeout"] = connect_timeout
        self.engine: AsyncEngine = create_async_engine(
            self.url, connect_args=connect_args
        )
        _log.info(
            "Database pool created for %s (relaxed TLS: %s)",
            self.url.render_as_string(hide_password=True),
            self.tls.relaxed_verification,
        )

    async def acquire(self) -> AsyncConnection:
        """Borrow a connection. Waits on the pool timeout when the pool is exhausted."""
        return await self.engine.connect()

    async def release(self, conn: AsyncConnection) -> None:
        """Return a borrowed connection to the pool. Call exactly once per acquire()."""
        await conn.close()

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[AsyncConnection]:
        conn = await self.acquire()
        try:
            yield conn
        finally:
            await self.release(conn)

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()

    def stats(self) -> dict[str, int]:
        """Return pool statistics for monitoring."""
        pool: Any = self.engine.pool
        return {
            "size": pool.size(),
            "checked_out": pool.checkedout(),
        }


_pool_manager: PoolManager | None = None
_pool_lock = threading.Lock()


def init_pool_manager(
    connection_string: str,
    tls: TlsPolicy | None = None,
    *,
    connect_timeout: int | None = None,
) -> PoolManager:
    """Build the process-wide PoolManager. A second call raises RuntimeError."""
    global _pool_manager
    with _pool_lock:
        if _pool_manager is not None:
            raise RuntimeError("Database pool is already initialised")
        _pool_manager = PoolManager(
            connection_string, tls, connect_timeout=connect_timeout
        )
        return _pool_manager


def get_pool_manager() -> PoolManager:
    """Return the process-wide PoolManager built by init_pool_manager()."""
    if _pool_manager is None:
        raise RuntimeError("Database pool is not initialised")
    return _pool_manager


async def close_pool_manager() -> None:
    """Dispose the process-wide pool (if any) so it can be built again."""
    global _pool_manager
    with _pool_lock:
        pm, _pool_manager = _pool_manager, None
    if pm is not None:
        await pm.dispose()
