"""Error taxonomy shared by the store, the pool and the HTTP layer.

Every error carries the ``kind`` written into the response envelope and
the HTTP status it maps to.
"""

from __future__ import annotations


class OpdayError(Exception):
    kind = "internal_error"
    status_code = 500

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail)
        self.detail = detail or self.__class__.__name__


class ValidationError(OpdayError):
    """Malformed path parameter or request body."""

    kind = "validation_error"
    status_code = 422


class NotFoundError(OpdayError):
    kind = "not_found"
    status_code = 200

    def __init__(self, detail: str = "Not found.") -> None:
        super().__init__(detail)


class StorageError(OpdayError):
    """The driver failed to execute a statement."""

    kind = "storage_error"
    status_code = 500


class PoolExhaustedError(OpdayError):
    """No pooled connection became free within the checkout timeout."""

    kind = "pool_exhausted"
    status_code = 503


class DatabaseUnavailableError(OpdayError):
    """A new connection could not be opened."""

    kind = "database_unavailable"
    status_code = 503
