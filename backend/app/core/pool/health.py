"""
Connection health check for the app database.
"""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection
from sqlmodel import SQLModel

from .manager import PoolManager

_log = logging.getLogger(__name__)


class DatabaseHealth(SQLModel):
    connected: bool
    error: str | None = None


def _describe(exc: BaseException) -> str:
    return str(exc) or exc.__class__.__name__


async def _release_quiet(pool: PoolManager, conn: AsyncConnection) -> None:
    try:
        await pool.release(conn)
    except Exception:
        _log.warning("Failed to release health-check connection", exc_info=True)


async def check_database_health(pool: PoolManager) -> DatabaseHealth:
    """
    Borrow a connection, run SELECT 1, give it back.

    Never raises: acquisition and query failures come back as
    ``DatabaseHealth(connected=False, error=...)``.
    """
    try:
        conn = await pool.acquire()
    except Exception as e:
        _log.error("Database health check failed: %s", e, exc_info=True)
        return DatabaseHealth(connected=False, error=_describe(e))

    try:
        await conn.execute(text("SELECT 1"))
    except Exception as e:
        _log.error("Database health check failed: %s", e, exc_info=True)
        return DatabaseHealth(connected=False, error=_describe(e))
    finally:
        await _release_quiet(pool, conn)

    return DatabaseHealth(connected=True)
