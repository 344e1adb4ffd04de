"""
Domain-specific exceptions for the booking core.

Raised by the services and converted to HTTP errors at the route layer.
"""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class NotFoundException(DomainException):
    """Raised when a booking or room id does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when a candidate interval overlaps an existing booking."""

    status_code = status.HTTP_409_CONFLICT


class MalformedRangeException(DomainException):
    """Raised when a date range has its start after its end."""

    status_code = status.HTTP_400_BAD_REQUEST


class ValidationException(DomainException):
    """Raised when a request is incomplete before it reaches the booking core."""

    status_code = status.HTTP_400_BAD_REQUEST
