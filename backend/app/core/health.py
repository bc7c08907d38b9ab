"""
Health-check helpers for liveness and readiness probes.

Liveness  — is the process alive and not deadlocked?  (cheap, no I/O)
Readiness — can it serve traffic?  (Postgres reachable through the shared pool)
"""

import logging

from app.core.db import Database
from app.core.pool import DatabaseHealth

logger = logging.getLogger(__name__)


async def check_postgres(database: Database) -> DatabaseHealth:
    """Run SELECT 1 through the shared pool. Never raises."""
    return await database.check_health()


def liveness_check() -> tuple[bool, list[str]]:
    """
    Lightweight liveness probe — just confirms the Python process is responsive.
    No I/O, no DB calls.  Return format matches readiness_check for consistency.
    """
    return (True, [])


async def readiness_check(database: Database) -> tuple[bool, list[str], dict[str, str]]:
    """
    Run the Postgres check.
    Returns (ok, names of failed checks, error message per failed check).
    """
    failures: list[str] = []
    errors: dict[str, str] = {}

    pg = await check_postgres(database)
    if not pg.connected:
        failures.append("postgres")
        errors["postgres"] = pg.error or "Unknown database error"
        logger.warning("Readiness check failed: postgres: %s", errors["postgres"])

    return (len(failures) == 0, failures, errors)
