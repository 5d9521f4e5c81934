"""FastAPI application for the health-check record service."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from opday import __version__
from opday.api.envelope import error_envelope
from opday.api.routes import health_check_router, liveness_router
from opday.config import Settings, get_settings
from opday.db.pool import open_pool
from opday.errors import OpdayError, ValidationError
from opday.health_checks.store import HealthCheckStore

logger = logging.getLogger(__name__)


# ── Request logging ──────────────────────────────────────────────────────────


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)
        logger.debug("%s %s → %d", request.method, request.url.path, response.status_code)
        return response


# ── Error handlers ───────────────────────────────────────────────────────────


async def opday_error_handler(request: Request, exc: OpdayError) -> JSONResponse:
    """Render any OpdayError as a failed envelope with its HTTP status.

    Not logged here: the store and the pool log where the failure happens.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(exc).model_dump(mode="json"),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed JSON, missing fields and bad path ids all become validation_error."""
    detail = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', 'invalid')}"
        for err in exc.errors()
    )
    return await opday_error_handler(request, ValidationError(detail or "Invalid request."))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything else still answers with a 500 envelope."""
    logger.error("%s %s raised %s", request.method, request.url.path, type(exc).__name__, exc_info=exc)
    return await opday_error_handler(request, OpdayError(str(exc)))


# ── Lifespan ─────────────────────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the connection pool unless one was already attached."""
    if app.state.settings is None:
        app.state.settings = get_settings()

    if getattr(app.state, "pool", None) is None:
        app.state.pool = open_pool(app.state.settings)
        logger.info("Connection pool ready")

    yield

    app.state.pool.dispose()
    logger.info("Connection pool closed")


# ── App factory ──────────────────────────────────────────────────────────────


def create_app(settings: Settings | None = None) -> FastAPI:
    app = FastAPI(
        title="opday health check records",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.health_check_store = HealthCheckStore()

    app.add_middleware(RequestLogMiddleware)
    app.add_exception_handler(OpdayError, opday_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(liveness_router)
    app.include_router(health_check_router)

    return app


app = create_app()
