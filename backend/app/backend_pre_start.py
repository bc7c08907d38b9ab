import asyncio
import logging
import sys

from app.core.config import ConfigurationError, settings
from app.core.db import Database, close_db, init_db

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class DatabaseUnavailableError(RuntimeError):
    pass


async def init(database: Database) -> None:
    health = await database.check_health()
    if not health.connected:
        logger.error("Database is not reachable: %s", health.error)
        raise DatabaseUnavailableError(health.error)


async def _run() -> None:
    database = init_db(settings)
    try:
        await init(database)
    finally:
        await close_db()


def main() -> None:
    logger.info("Initializing service")
    try:
        asyncio.run(_run())
    except ConfigurationError as e:
        logger.error("%s", e)
        sys.exit(2)
    except DatabaseUnavailableError:
        sys.exit(1)
    logger.info("Service finished initializing")


if __name__ == "__main__":
    main()
