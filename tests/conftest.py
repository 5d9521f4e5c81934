"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from opday.api.server import create_app
from opday.config import Settings, get_settings
from opday.db.pool import ConnectionPool, open_pool
from opday.health_checks.store import HealthCheckStore


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a temp SQLite file with a tiny pool."""
    return Settings(
        _env_file=None,
        database_dsn=f"sqlite+pysqlite:///{tmp_path / 'opday.db'}",
        pool_size=2,
        pool_max_overflow=0,
        pool_timeout=0.2,
    )


@pytest.fixture
def pool(settings):
    """Pool with the health_check table created."""
    pool = open_pool(settings)
    yield pool
    pool.dispose()


@pytest.fixture
def store() -> HealthCheckStore:
    return HealthCheckStore()


@pytest.fixture
def client(settings, pool) -> TestClient:
    app = create_app(settings)
    app.state.pool = pool
    return TestClient(app)


@pytest.fixture
def offline_client(settings):
    """Client whose pool is a mock; anything that leases shows up on it."""
    app = create_app(settings)
    app.state.pool = MagicMock(spec=ConnectionPool)
    return TestClient(app), app.state.pool


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
