"""Database access: pooled connections and table definition."""

from opday.db.pool import ConnectionPool, create_pool, open_pool, ping
from opday.db.schema import health_check_table, init_schema

__all__ = [
    "ConnectionPool",
    "create_pool",
    "health_check_table",
    "init_schema",
    "open_pool",
    "ping",
]
