"""
Data-access handle for the app database.

``init_db`` is the bootstrap: validate DATABASE_URL, pick the TLS policy,
build the pool once, wrap it with the schema metadata.
"""

import logging

from sqlalchemy import MetaData, Table
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import Settings, require_connection_string
from app.core.pool import (
    DatabaseHealth,
    PoolManager,
    check_database_health,
    close_pool_manager,
    init_pool_manager,
    select_tls_policy,
)

logger = logging.getLogger(__name__)


class Database:
    """Pool + schema metadata + session factory. Holds no other state."""

    def __init__(self, pool: PoolManager, metadata: MetaData | None = None) -> None:
        self.pool = pool
        self.metadata = metadata if metadata is not None else SQLModel.metadata
        self._sessionmaker = async_sessionmaker(
            pool.engine, class_=AsyncSession, expire_on_commit=False
        )

    @property
    def engine(self) -> AsyncEngine:
        return self.pool.engine

    @property
    def tables(self) -> dict[str, Table]:
        return dict(self.metadata.tables)

    def session(self) -> AsyncSession:
        """New session bound to the shared engine; use as ``async with db.session() as s``."""
        return self._sessionmaker()

    async def check_health(self) -> DatabaseHealth:
        return await check_database_health(self.pool)


def init_db(settings: Settings, metadata: MetaData | None = None) -> Database:
    url = require_connection_string(settings)
    tls = select_tls_policy(url)
    pool = init_pool_manager(url, tls, connect_timeout=settings.DB_CONNECT_TIMEOUT)
    logger.info("Database initialised")
    return Database(pool, metadata)


async def close_db() -> None:
    await close_pool_manager()
