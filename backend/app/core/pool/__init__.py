"""
Connection pool for the app database.

One pool per process, built during bootstrap; TLS settings come from the
shape of DATABASE_URL.
"""

from .health import DatabaseHealth, check_database_health
from .manager import (
    PoolManager,
    close_pool_manager,
    get_pool_manager,
    init_pool_manager,
    to_async_url,
)
from .tls import TlsPolicy, select_tls_policy

__all__ = [
    "DatabaseHealth",
    "check_database_health",
    "PoolManager",
    "close_pool_manager",
    "get_pool_manager",
    "init_pool_manager",
    "to_async_url",
    "TlsPolicy",
    "select_tls_policy",
]
