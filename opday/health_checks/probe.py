"""Check runner: requests a record's URL and compares the status code."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

import httpx

from opday.health_checks.store import HealthCheck

logger = logging.getLogger(__name__)


class Status(str, Enum):
    UP = "up"
    DOWN = "down"


@dataclass
class ProbeResult:
    """Outcome of running one health check."""

    status: Status
    latency_ms: float
    status_code: int | None = None
    message: str = ""
    timestamp: str = ""

    def __post_init__(self) -> None:
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).isoformat()


def run_check(check: HealthCheck, timeout_ms: int = 10_000) -> ProbeResult:
    """GET ``check.url`` and compare against ``check.expected_status_code``."""
    t0 = time.perf_counter()
    try:
        with httpx.Client(timeout=timeout_ms / 1000, follow_redirects=True) as client:
            resp = client.get(check.url)
        latency = (time.perf_counter() - t0) * 1000

        if resp.status_code == check.expected_status_code:
            status = Status.UP
            msg = f"{resp.status_code} OK"
        else:
            status = Status.DOWN
            msg = f"Expected {check.expected_status_code}, got {resp.status_code}"

        return ProbeResult(
            status=status, latency_ms=round(latency, 1),
            status_code=resp.status_code, message=msg,
        )
    except httpx.TimeoutException:
        return ProbeResult(
            status=Status.DOWN, latency_ms=timeout_ms,
            message=f"Timed out ({timeout_ms}ms)",
        )
    except httpx.ConnectError as e:
        latency = (time.perf_counter() - t0) * 1000
        return ProbeResult(
            status=Status.DOWN, latency_ms=round(latency, 1),
            message=f"Connection error: {e}",
        )
    except Exception as e:
        logger.debug("Check %s raised", check.id, exc_info=True)
        latency = (time.perf_counter() - t0) * 1000
        return ProbeResult(
            status=Status.DOWN, latency_ms=round(latency, 1),
            message=f"Error: {type(e).__name__}: {e}",
        )
