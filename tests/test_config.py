"""Tests for settings loading."""

from __future__ import annotations

import pydantic
import pytest

from opday.config import Settings, get_settings


class TestSettings:
    def test_reads_database_dsn_from_env(self, monkeypatch):
        monkeypatch.setenv("DATABASE_DSN", "postgresql+psycopg://u:p@db/opday")
        settings = Settings(_env_file=None)
        assert settings.database_dsn == "postgresql+psycopg://u:p@db/opday"

    def test_defaults(self, monkeypatch):
        monkeypatch.setenv("DATABASE_DSN", "sqlite://")
        settings = Settings(_env_file=None)
        assert settings.pool_size == 10
        assert settings.pool_timeout == 5.0
        assert settings.create_schema is True
        assert settings.log_level == "INFO"

    def test_pool_overrides(self, monkeypatch):
        monkeypatch.setenv("DATABASE_DSN", "sqlite://")
        monkeypatch.setenv("POOL_SIZE", "3")
        monkeypatch.setenv("POOL_TIMEOUT", "0.5")
        settings = Settings(_env_file=None)
        assert settings.pool_size == 3
        assert settings.pool_timeout == 0.5

    def test_missing_database_dsn(self, monkeypatch):
        monkeypatch.delenv("DATABASE_DSN", raising=False)
        with pytest.raises(pydantic.ValidationError):
            Settings(_env_file=None)

    def test_get_settings_is_cached(self, monkeypatch):
        monkeypatch.setenv("DATABASE_DSN", "sqlite://")
        assert get_settings() is get_settings()
