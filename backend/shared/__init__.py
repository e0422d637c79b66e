"""
Shared infrastructure for the EduList backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- exceptions: Base exception classes
- models: Roles, statuses, error kinds, sanitized identity, result base
- repository: Base class for record store repositories

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .exceptions import (
    EduListError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    StorageError,
)
from .models import (
    AccountStatus,
    ErrorKind,
    Identity,
    OperationResult,
    Role,
)
from .repository import BaseRepository

__all__ = [
    "Settings",
    "get_settings",
    "EduListError",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "StorageError",
    "AccountStatus",
    "ErrorKind",
    "Identity",
    "OperationResult",
    "Role",
    "BaseRepository",
]
