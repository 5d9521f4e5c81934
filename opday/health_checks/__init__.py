"""Health-check records: storage and check runner."""

from opday.health_checks.store import DEFAULT_EXPECTED_STATUS_CODE, HealthCheck, HealthCheckStore

__all__ = ["DEFAULT_EXPECTED_STATUS_CODE", "HealthCheck", "HealthCheckStore"]
