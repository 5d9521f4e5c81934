"""API routes: liveness + health-check record CRUD.

Endpoints:
  GET  /                                liveness
  GET  /api/v1/alive                    liveness
  POST /api/v1/health-check             create a record
  GET  /api/v1/health-check/{id}        fetch a record
  POST /api/v1/health-check/{id}        update name / url
  POST /api/v1/health-check/{id}/run    run the check now

Request bodies and path ids are validated by FastAPI before the handler
runs, so a malformed request never takes a connection from the pool.
"""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from opday.api.envelope import (
    HealthCheckGetResponse,
    IdResponse,
    ProbeResponse,
    id_response,
    model_response,
    not_found,
    probe_response,
)
from opday.db.pool import ConnectionPool
from opday.health_checks.probe import run_check
from opday.health_checks.store import HealthCheckStore

logger = logging.getLogger(__name__)

liveness_router = APIRouter(tags=["liveness"])

health_check_router = APIRouter(prefix="/api/v1/health-check", tags=["health-check"])


# ── Request models ───────────────────────────────────────────────────────

class HealthCheckBody(BaseModel):
    name: str = Field(min_length=1)
    url: str = Field(min_length=1)


# ── Helpers ──────────────────────────────────────────────────────────────

def _get_pool(request: Request) -> ConnectionPool:
    return request.app.state.pool  # type: ignore[no-any-return]


def _get_store(request: Request) -> HealthCheckStore:
    return request.app.state.health_check_store  # type: ignore[no-any-return]


# ── Liveness ─────────────────────────────────────────────────────────────

@liveness_router.get("/")
@liveness_router.get("/api/v1/alive")
def alive() -> str:
    return "ok"


# ── Health checks ────────────────────────────────────────────────────────

@health_check_router.post("")
def create_health_check(body: HealthCheckBody, request: Request) -> IdResponse:
    """Create a record under a freshly generated organization id."""
    organization_id = uuid.uuid4()
    with _get_pool(request).lease() as conn:
        check_id = _get_store(request).create(conn, organization_id, body.name, body.url)
    return id_response(check_id)


@health_check_router.get("/{check_id}")
def get_health_check(check_id: uuid.UUID, request: Request) -> HealthCheckGetResponse:
    with _get_pool(request).lease() as conn:
        record = _get_store(request).get(conn, check_id)
    if record is None:
        return not_found(HealthCheckGetResponse)
    return model_response(record)


@health_check_router.post("/{check_id}")
def update_health_check(
    check_id: uuid.UUID, body: HealthCheckBody, request: Request
) -> IdResponse:
    """Replace name and url. Answers with the id whether or not a row matched."""
    with _get_pool(request).lease() as conn:
        updated = _get_store(request).update(conn, check_id, body.name, body.url)
    return id_response(updated)


@health_check_router.post("/{check_id}/run")
def run_health_check(check_id: uuid.UUID, request: Request) -> ProbeResponse:
    """Request the record's URL and compare with its expected status.

    The connection goes back to the pool before the outbound request.
    """
    with _get_pool(request).lease() as conn:
        record = _get_store(request).get(conn, check_id)
    if record is None:
        return not_found(ProbeResponse)

    result = run_check(record, timeout_ms=request.app.state.settings.probe_timeout_ms)
    logger.info(
        "Check %s → %s (%s, %.0fms)",
        record.id, result.status.value, result.message, result.latency_ms,
    )
    return probe_response(result)
