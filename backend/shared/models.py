"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class Role(str, Enum):
    """Account role, fixed at creation."""

    USER = "user"
    INSTITUTE = "institute"
    ADMIN = "admin"


class AccountStatus(str, Enum):
    """Approval status of a user or institute account."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ErrorKind(str, Enum):
    """Stable failure kinds handed to the UI layer."""

    INVALID_CREDENTIALS = "invalid_credentials"
    WRONG_PORTAL = "wrong_portal"
    PENDING_APPROVAL = "pending_approval"
    REJECTED = "rejected"
    DUPLICATE_EMAIL = "duplicate_email"
    VALIDATION_FAILURE = "validation_failure"
    STORAGE_FAILURE = "storage_failure"
    NOT_FOUND = "not_found"


class Identity(BaseModel):
    """
    Sanitized projection of an account.

    This is what login returns and what the session holds. It never
    carries credential fields; unknown fields are dropped on construction.
    """

    id: str = Field(..., description="Account ID")
    email: str = Field(..., description="Login email, stored exactly as registered")
    name: str = Field(default="", description="Display name")
    role: Role = Field(..., description="Account role")
    status: Optional[AccountStatus] = Field(
        None, description="Approval status (None for the admin account)"
    )
    rejection_reason: Optional[str] = None
    permissions: list[str] = Field(default_factory=list)

    created_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    last_login: Optional[datetime] = None
    login_count: int = 0

    profile: dict[str, Any] = Field(default_factory=dict)

    model_config = {
        "frozen": True,
        "extra": "ignore",
    }

    @property
    def is_approved(self) -> bool:
        """Admins are implicitly always authorized."""
        return self.role == Role.ADMIN or self.status == AccountStatus.APPROVED


class OperationResult(BaseModel):
    """
    Discriminated outcome of a business operation.

    Expected business failures (bad password, pending account, duplicate
    email) are reported here instead of being raised.
    """

    success: bool = Field(..., description="Whether the operation took effect")
    error: Optional[ErrorKind] = Field(None, description="Failure kind if unsuccessful")
    code: Optional[str] = Field(None, description="Specific error code")
    message: Optional[str] = Field(None, description="Human-readable message")
    details: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_error(cls, exc: Any, **fields: Any):
        """Build a failed result from an EduListError."""
        return cls(
            success=False,
            error=exc.kind,
            code=exc.code,
            message=exc.message,
            details=exc.details,
            **fields,
        )
