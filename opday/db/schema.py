"""Table definition for health-check records.

Only used to bootstrap an empty database (``CREATE TABLE IF NOT EXISTS``);
queries are plain SQL in :mod:`opday.health_checks.store`.
"""

from __future__ import annotations

import logging

from sqlalchemy import Column, Integer, MetaData, Table, Text, Uuid, text
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

metadata = MetaData()

health_check_table = Table(
    "health_check",
    metadata,
    Column("id", Uuid, primary_key=True),
    Column("organization_id", Uuid, nullable=False, index=True),
    Column("name", Text, nullable=False),
    Column("url", Text, nullable=False),
    Column("expected_status_code", Integer, nullable=False, server_default=text("200")),
)


def init_schema(engine: Engine) -> None:
    """Create missing tables. Existing tables are left untouched."""
    metadata.create_all(engine, checkfirst=True)
    logger.info("Schema v%d ready on %s", SCHEMA_VERSION, engine.url.render_as_string(hide_password=True))
