"""Health-check record storage: one parameterized statement per operation.

The store holds no connection of its own: every method runs on the
connection leased for the current request (see :mod:`opday.db.pool`).
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from typing import Any

from sqlalchemy import Integer, Text, Uuid, bindparam, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from opday.errors import StorageError

logger = logging.getLogger(__name__)

DEFAULT_EXPECTED_STATUS_CODE = 200


@dataclass
class HealthCheck:
    """A single health-check record."""

    id: uuid.UUID
    organization_id: uuid.UUID
    name: str
    url: str
    expected_status_code: int = DEFAULT_EXPECTED_STATUS_CODE

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "HealthCheck":
        return cls(
            id=row["id"],
            organization_id=row["organization_id"],
            name=row["name"],
            url=row["url"],
            expected_status_code=row.get("expected_status_code", DEFAULT_EXPECTED_STATUS_CODE),
        )


# ── Statements ───────────────────────────────────────────────────────────

_INSERT = text("""
    INSERT INTO health_check (id, organization_id, name, url, expected_status_code)
    VALUES (:id, :organization_id, :name, :url, :expected_status_code)
""").bindparams(
    bindparam("id", type_=Uuid()),
    bindparam("organization_id", type_=Uuid()),
)

_SELECT_BY_ID = text("""
    SELECT id, organization_id, name, url, expected_status_code
    FROM health_check
    WHERE id = :id
""").bindparams(
    bindparam("id", type_=Uuid()),
).columns(
    id=Uuid(),
    organization_id=Uuid(),
    name=Text(),
    url=Text(),
    expected_status_code=Integer(),
)

_UPDATE = text("""
    UPDATE health_check
    SET name = :name, url = :url
    WHERE id = :id
""").bindparams(
    bindparam("id", type_=Uuid()),
)


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as e:
        logger.exception("health_check %s failed", operation)
        raise StorageError(str(e.orig) if getattr(e, "orig", None) else str(e)) from e


class HealthCheckStore:
    """SQL for create / read / update of health-check records."""

    def create(
        self,
        conn: Connection,
        organization_id: uuid.UUID,
        name: str,
        url: str,
    ) -> uuid.UUID:
        """Insert a new record and return its generated id."""
        check_id = uuid.uuid4()
        with _storage_errors("create"):
            conn.execute(_INSERT, {
                "id": check_id,
                "organization_id": organization_id,
                "name": name,
                "url": url,
                "expected_status_code": DEFAULT_EXPECTED_STATUS_CODE,
            })
            conn.commit()
        logger.info("Created health check %s (org=%s)", check_id, organization_id)
        return check_id

    def get(self, conn: Connection, check_id: uuid.UUID) -> HealthCheck | None:
        """Get a single record by id, or None when no row matches."""
        with _storage_errors("get"):
            row = conn.execute(_SELECT_BY_ID, {"id": check_id}).mappings().first()
        return HealthCheck.from_row(dict(row)) if row else None

    def update(
        self,
        conn: Connection,
        check_id: uuid.UUID,
        name: str,
        url: str,
    ) -> uuid.UUID:
        """Set name and url and return the id.

        An id with no row is not reported; callers that need to know
        whether the record exists look it up with ``get``.
        """
        with _storage_errors("update"):
            result = conn.execute(_UPDATE, {"id": check_id, "name": name, "url": url})
            conn.commit()
        if result.rowcount == 0:
            logger.debug("Update matched no health check with id %s", check_id)
        else:
            logger.info("Updated health check %s", check_id)
        return check_id
