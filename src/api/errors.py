from __future__ import annotations

from typing import Optional


class StockWatchError(Exception):
    """Base error. Route-level exception handlers turn these into JSON responses."""

    status_code = 500
    error = "Internal server error"

    def __init__(self, message: Optional[str] = None, *, status_code: Optional[int] = None) -> None:
        super().__init__(message or self.error)
        self.message = message or self.error
        if status_code is not None:
            self.status_code = status_code


class ValidationError(StockWatchError):
    status_code = 400
    error = "Invalid request"


class AuthError(StockWatchError):
    status_code = 401
    error = "Unauthorized"


class NotFoundError(StockWatchError):
    status_code = 404
    error = "Not found"


class ConflictError(StockWatchError):
    status_code = 409
    error = "Conflict"


class UpstreamError(StockWatchError):
    """Third-party API failure. 502 by default, 503 when the provider is unreachable."""

    status_code = 502
    error = "Upstream service error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        upstream_status: Optional[int] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.upstream_status = upstream_status


class StorageError(StockWatchError):
    status_code = 500
    error = "Storage error"


class ConfigurationError(StockWatchError):
    status_code = 503
    error = "Service not configured"


class InternalError(StockWatchError):
    status_code = 500
    error = "Internal server error"
