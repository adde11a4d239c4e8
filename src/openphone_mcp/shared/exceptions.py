"""
Exception hierarchy for the adapter.

Every exception here is rendered by the application's exception handlers as
``{"error": ..., "message": ...}``.
"""

from typing import Any


class AdapterError(Exception):
    """Base exception for errors surfaced to API callers."""

    status_code: int = 500
    error: str = "Request failed"

    def __init__(self, message: str, error: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if error is not None:
            self.error = error


class RequestValidationFailed(AdapterError):
    """Missing or invalid client input. Raised before any upstream call."""

    status_code = 400
    error = "Invalid request"


class UnsupportedResourceTypeError(RequestValidationFailed):
    """Fetch was asked for a resource type with no upstream endpoint."""

    error = "Unsupported resource type"

    def __init__(self, resource_type: str) -> None:
        super().__init__(f"Unsupported resource type: {resource_type}")
        self.resource_type = resource_type


class UpstreamError(AdapterError):
    """OpenPhone API call failed (transport error, non-2xx or malformed body)."""

    def __init__(
        self,
        message: str,
        upstream_status: int | None = None,
        response_data: Any = None,
    ) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status
        self.response_data = response_data
