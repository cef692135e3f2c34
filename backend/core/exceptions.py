"""
Custom Exception Classes for the Contact Inbox API.

HTTP-facing errors carry their status code and a message that is safe to
show to callers. StorageError and StartupError are internal and are
translated at the API boundary or abort startup.
"""
from typing import Optional

from fastapi import HTTPException, status


class ValidationError(HTTPException):
    """Exception raised when request validation fails."""

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=message)
        self.errors = list(errors or [])


class AuthorizationError(HTTPException):
    """Exception raised when a caller is not authorized to access a resource."""

    def __init__(self, message: str = "Access denied"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=message)


class InternalServerError(HTTPException):
    """Generic 500 that hides the underlying cause from the caller."""

    def __init__(self, message: str = "Internal server error"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


class ServiceUnavailableError(HTTPException):
    """Exception raised when a dependency is not ready to serve requests."""

    def __init__(self, message: str = "Service not ready"):
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=message)


class StorageError(Exception):
    """Any failure originating from the persistence layer."""


class StartupError(RuntimeError):
    """The storage backend could not be brought up at boot."""
