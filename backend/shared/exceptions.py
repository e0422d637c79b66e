"""
Base exception classes for the EduList backend.

Each module should define its own exceptions that inherit from these bases.
Every class carries an ErrorKind so that results handed to the UI layer
expose a stable, distinguishable failure kind.
"""

from typing import Optional, Any

from .models import ErrorKind


class EduListError(Exception):
    """
    Base exception for all EduList errors.

    All custom exceptions should inherit from this class.
    """

    kind: Optional[ErrorKind] = None

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for result payloads."""
        return {
            "error": self.code,
            "kind": self.kind.value if self.kind else None,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(EduListError):
    """Resource not found."""

    kind = ErrorKind.NOT_FOUND


class ValidationError(EduListError):
    """Input validation failed."""

    kind = ErrorKind.VALIDATION_FAILURE


class AuthenticationError(EduListError):
    """Authentication failed (invalid credentials or unusable account)."""

    kind = ErrorKind.INVALID_CREDENTIALS


class AuthorizationError(EduListError):
    """Authorization failed (insufficient permissions)."""

    pass


class StorageError(EduListError):
    """
    The record store could not complete a read or write.

    Never converted into a result: callers must treat the operation
    as not having taken effect.
    """

    kind = ErrorKind.STORAGE_FAILURE
