"""Error types raised by the gateway and mapped to HTTP responses."""

from __future__ import annotations

from fastapi import status


class ServiceError(Exception):
    """Client-facing failure carrying the status code it should be rendered with."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Bad Request"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad Request"


class ForbiddenError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "The requested resource could not be found"


class ProviderError(Exception):
    """A provider could not produce a commit message."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UpstreamError(ProviderError):
    """The provider answered with a non-success status."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        super().__init__(message)
