"""Connection pool with per-request leases.

Each request checks out exactly one connection through
:meth:`ConnectionPool.lease` and hands it back when the ``with`` block
exits, whether the handler returned or raised.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from opday.db.schema import init_schema
from opday.errors import DatabaseUnavailableError, OpdayError, PoolExhaustedError

if TYPE_CHECKING:
    from opday.config import Settings

logger = logging.getLogger(__name__)


class ConnectionPool:
    """Bounded pool of database connections backed by a SQLAlchemy engine."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    @contextmanager
    def lease(self) -> Iterator[Connection]:
        """Check out one connection for the duration of the block.

        Raises PoolExhaustedError when no connection frees up within the
        pool timeout, DatabaseUnavailableError when a new connection
        cannot be opened.
        """
        try:
            conn = self._engine.connect()
        except PoolTimeoutError as e:
            logger.warning("Connection pool exhausted: %s", e)
            raise PoolExhaustedError("No database connection available, try again later.") from e
        except SQLAlchemyError as e:
            logger.error("Could not open database connection: %s", e)
            raise DatabaseUnavailableError(f"Database unavailable: {e}") from e

        try:
            yield conn
        finally:
            conn.close()

    def check(self) -> None:
        """Lease a connection and run a trivial query. Raises on failure."""
        with self.lease() as conn:
            ping(conn)

    def dispose(self) -> None:
        self._engine.dispose()


def ping(conn: Connection) -> None:
    conn.execute(text("SELECT 1"))


def create_pool(settings: Settings) -> ConnectionPool:
    """Build the engine and its bounded pool from settings."""
    engine = create_engine(
        settings.database_dsn,
        pool_pre_ping=True,
        pool_size=settings.pool_size,
        max_overflow=settings.pool_max_overflow,
        pool_timeout=settings.pool_timeout,
    )
    logger.debug(
        "Engine created: size=%d overflow=%d timeout=%.1fs",
        settings.pool_size,
        settings.pool_max_overflow,
        settings.pool_timeout,
    )
    return ConnectionPool(engine)


def open_pool(settings: Settings) -> ConnectionPool:
    """Create the pool, verify the database answers and bootstrap the schema.

    Raises DatabaseUnavailableError if the database cannot be reached.
    """
    pool = create_pool(settings)
    try:
        pool.check()
        if settings.create_schema:
            init_schema(pool.engine)
    except SQLAlchemyError as e:
        pool.dispose()
        raise DatabaseUnavailableError(f"Database unavailable: {e}") from e
    except OpdayError:
        pool.dispose()
        raise
    return pool
