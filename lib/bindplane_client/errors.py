from __future__ import annotations


class BindPlaneClientError(Exception):
    """Base client error."""


class ConstructionError(BindPlaneClientError):
    """Client could not be built from the given config or options."""


class SerializationError(BindPlaneClientError):
    """Request payload could not be encoded."""


class NetworkError(BindPlaneClientError):
    """Transport/network layer error."""


class ApiError(BindPlaneClientError):
    def __init__(self, status_code: int, message: str, details: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class AuthError(ApiError):
    """Auth-related API error."""
