# backend/app/core/exceptions.py
"""
Domain-specific exceptions for the studio booking API.

These exceptions carry business-focused messages and are converted to
HTTP errors at the API layer via ``to_http_exception``.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
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


class ValidationException(DomainException):
    """Raised when request data is missing or malformed."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        merged = dict(details or {})
        if field:
            merged.setdefault("field", field)
        super().__init__(message, code=code or "VALIDATION_ERROR", details=merged)
        self.field = field


class NotFoundException(DomainException):
    """Raised when a resource or reservation is absent or not owned by the caller."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class UnauthorizedException(DomainException):
    """Raised when the caller is not authenticated."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, code="UNAUTHENTICATED")

    def to_http_exception(self) -> HTTPException:
        exc = super().to_http_exception()
        exc.headers = {"WWW-Authenticate": "Bearer"}
        return exc


class ServiceException(DomainException):
    """Raised when a service operation fails; the message shown to clients stays generic."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": "An error occurred processing your request",
                "code": self.code,
                "details": {},
            },
        )


# Specific business exceptions


class BookingConflictException(ConflictException):
    """Raised when a booking overlaps an active reservation of the same resource."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message or "This time slot is already booked",
            code="BOOKING_CONFLICT",
            details=details or {},
        )


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    Used when data access operations fail, such as database connection
    issues, query failures, or constraint violations.
    """
