"""
Accounts module data models.

These models define the stored account record and the results the
identity resolver hands back to callers.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field

from shared.models import AccountStatus, Identity, OperationResult, Role


# Keys a profile update may never touch
PROTECTED_FIELDS = frozenset({
    "id",
    "email",
    "password",
    "password_hash",
    "role",
    "status",
    "approved",
    "approved_at",
    "rejection_reason",
    "permissions",
    "login_count",
    "last_login",
})


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Account(BaseModel):
    """
    Stored account record for a user, institute or the admin.

    This is the only model that carries the credential hash. Anything
    leaving the accounts module goes through to_identity().
    """

    id: str = Field(..., description="Opaque unique ID, immutable")
    email: str = Field(..., description="Login key, unique across all roles")
    password_hash: str = Field(..., description="bcrypt hash of the password")
    name: str = Field(default="", description="Display name")
    role: Role = Field(..., description="Account role, fixed at creation")
    status: Optional[AccountStatus] = Field(
        None, description="Approval status (None for the admin account)"
    )
    rejection_reason: Optional[str] = None
    permissions: list[str] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    last_login: Optional[datetime] = None
    login_count: int = Field(default=0, ge=0)

    admin_notes: str = ""
    admin_review_date: Optional[datetime] = None

    # Role-specific payload (profile fields, category, address...)
    profile: dict[str, Any] = Field(default_factory=dict)

    def to_identity(self) -> Identity:
        """Project the account to its sanitized identity."""
        return Identity.model_validate(self.model_dump(exclude={"password_hash"}))


class RegistrationRequest(BaseModel):
    """
    Request to register a user or institute account.

    Required fields are checked by the service so a missing field is
    reported as a validation result, not a pydantic error.
    """

    name: str = ""
    email: str = ""
    password: str = ""
    profile: dict[str, Any] = Field(default_factory=dict)


class AccountResult(OperationResult):
    """Outcome of registration, profile update or password change."""

    identity: Optional[Identity] = Field(None, description="Sanitized account on success")


class LoginResult(AccountResult):
    """Outcome of a credential check."""

    rejection_reason: Optional[str] = Field(
        None, description="Reason given by the administrator for a rejected account"
    )
