"""Response envelopes: ``{success, <payload>, error}``.

A successful envelope carries its payload and no error; a failed one
carries an error and no payload. The validator below rejects anything
else, on construction and on decode alike.
"""

from __future__ import annotations

import uuid
from typing import ClassVar, TypeVar

from pydantic import BaseModel, model_validator

from opday.errors import NotFoundError, OpdayError
from opday.health_checks.probe import ProbeResult
from opday.health_checks.store import HealthCheck


class ErrorBody(BaseModel):
    kind: str
    detail: str


class HealthCheckModel(BaseModel):
    id: uuid.UUID
    organization_id: uuid.UUID
    name: str
    url: str
    expected_status_code: int


class ProbeResultModel(BaseModel):
    status: str
    latency_ms: float
    status_code: int | None = None
    message: str = ""
    timestamp: str = ""


class Envelope(BaseModel):
    """Base for all envelopes.

    Subclasses declare ``success``, then their payload, then ``error``, so the
    JSON keys come out in that order.
    """

    # Name of the payload field, None for error-only envelopes.
    payload_field: ClassVar[str | None] = None

    @model_validator(mode="after")
    def _payload_xor_error(self) -> "Envelope":
        payload = getattr(self, self.payload_field) if self.payload_field else None
        if self.success:
            if self.error is not None:
                raise ValueError("successful envelope cannot carry an error")
            if self.payload_field and payload is None:
                raise ValueError(f"successful envelope requires '{self.payload_field}'")
        else:
            if self.error is None:
                raise ValueError("failed envelope requires an error")
            if payload is not None:
                raise ValueError(f"failed envelope cannot carry '{self.payload_field}'")
        return self


class ErrorEnvelope(Envelope):
    success: bool
    error: ErrorBody | None = None


class IdResponse(Envelope):
    payload_field: ClassVar[str | None] = "id"

    success: bool
    id: uuid.UUID | None = None
    error: ErrorBody | None = None


class HealthCheckGetResponse(Envelope):
    payload_field: ClassVar[str | None] = "model"

    success: bool
    model: HealthCheckModel | None = None
    error: ErrorBody | None = None


class ProbeResponse(Envelope):
    payload_field: ClassVar[str | None] = "result"

    success: bool
    result: ProbeResultModel | None = None
    error: ErrorBody | None = None


E = TypeVar("E", bound=Envelope)


# ── Builders ─────────────────────────────────────────────────────────────

def id_response(check_id: uuid.UUID) -> IdResponse:
    return IdResponse(success=True, id=check_id)


def model_response(record: HealthCheck) -> HealthCheckGetResponse:
    return HealthCheckGetResponse(
        success=True,
        model=HealthCheckModel(**record.to_dict()),
    )


def probe_response(result: ProbeResult) -> ProbeResponse:
    return ProbeResponse(
        success=True,
        result=ProbeResultModel(
            status=result.status.value,
            latency_ms=result.latency_ms,
            status_code=result.status_code,
            message=result.message,
            timestamp=result.timestamp,
        ),
    )


def failure(envelope_cls: type[E], exc: OpdayError) -> E:
    return envelope_cls(success=False, error=ErrorBody(kind=exc.kind, detail=exc.detail))


def not_found(envelope_cls: type[E]) -> E:
    """Failed envelope for a lookup that matched no row."""
    return failure(envelope_cls, NotFoundError())


def error_envelope(exc: OpdayError) -> ErrorEnvelope:
    return failure(ErrorEnvelope, exc)
