"""Tests for connection leases."""

from __future__ import annotations

import pytest
from sqlalchemy import create_engine, text

from opday.config import Settings
from opday.db.pool import ConnectionPool, create_pool, open_pool, ping
from opday.errors import DatabaseUnavailableError, PoolExhaustedError


class TestLease:
    def test_lease_yields_working_connection(self, pool):
        with pool.lease() as conn:
            assert conn.execute(text("SELECT 1")).scalar() == 1

    def test_connection_returned_after_block(self, pool):
        with pool.lease():
            assert pool.engine.pool.checkedout() == 1
        assert pool.engine.pool.checkedout() == 0

    def test_connection_returned_on_error(self, pool):
        with pytest.raises(RuntimeError):
            with pool.lease():
                raise RuntimeError("handler failed")
        assert pool.engine.pool.checkedout() == 0

    def test_exhausted_pool_raises(self, pool):
        # settings fixture: pool_size=2, max_overflow=0, timeout=0.2s
        held = [pool.engine.connect(), pool.engine.connect()]
        try:
            with pytest.raises(PoolExhaustedError) as exc_info:
                with pool.lease():
                    pass
            assert exc_info.value.status_code == 503
        finally:
            for conn in held:
                conn.close()

        with pool.lease() as conn:
            ping(conn)

    def test_unreachable_database(self, tmp_path):
        engine = create_engine(f"sqlite+pysqlite:///{tmp_path / 'missing' / 'x.db'}")
        pool = ConnectionPool(engine)
        with pytest.raises(DatabaseUnavailableError):
            with pool.lease():
                pass

    def test_check(self, pool):
        pool.check()
        assert pool.engine.pool.checkedout() == 0


class TestCreatePool:
    def test_pool_bounds_from_settings(self, settings):
        pool = create_pool(settings)
        try:
            assert pool.engine.pool.size() == 2
            assert pool.engine.pool.timeout() == 0.2
        finally:
            pool.dispose()

    def test_open_pool_creates_table(self, settings):
        pool = open_pool(settings)
        try:
            with pool.lease() as conn:
                count = conn.execute(text("SELECT COUNT(*) FROM health_check")).scalar()
            assert count == 0
        finally:
            pool.dispose()

    def test_open_pool_without_schema(self, tmp_path):
        settings = Settings(
            _env_file=None,
            database_dsn=f"sqlite+pysqlite:///{tmp_path / 'bare.db'}",
            create_schema=False,
        )
        pool = open_pool(settings)
        try:
            with pool.lease() as conn:
                tables = conn.execute(
                    text("SELECT name FROM sqlite_master WHERE type = 'table'")
                ).scalars().all()
            assert "health_check" not in tables
        finally:
            pool.dispose()

    def test_open_pool_unreachable(self, tmp_path):
        settings = Settings(
            _env_file=None,
            database_dsn=f"sqlite+pysqlite:///{tmp_path / 'missing' / 'x.db'}",
        )
        with pytest.raises(DatabaseUnavailableError):
            open_pool(settings)
