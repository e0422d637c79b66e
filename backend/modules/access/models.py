"""
Access module data models.

A Decision is the value the gate hands to a route guard. RoutePaths
bundles every path the gate can redirect to so that the gate never reads
settings itself.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from shared.config import Settings


class DecisionKind(str, Enum):
    ALLOW = "allow"
    REDIRECT = "redirect"
    DENY = "deny"


class Decision(BaseModel):
    """Outcome of an access check."""

    kind: DecisionKind
    target: Optional[str] = Field(None, description="Redirect target path")
    reason: Optional[str] = Field(None, description="Why access was not allowed")
    return_to: Optional[str] = Field(
        None, description="Originally requested path, for sending the user back after login"
    )

    model_config = {"frozen": True}

    @classmethod
    def allow(cls) -> "Decision":
        return cls(kind=DecisionKind.ALLOW)

    @classmethod
    def redirect(
        cls,
        target: str,
        reason: Optional[str] = None,
        return_to: Optional[str] = None,
    ) -> "Decision":
        return cls(kind=DecisionKind.REDIRECT, target=target, reason=reason, return_to=return_to)

    @classmethod
    def deny(cls, reason: Optional[str] = None) -> "Decision":
        return cls(kind=DecisionKind.DENY, reason=reason)

    @property
    def allowed(self) -> bool:
        return self.kind == DecisionKind.ALLOW


class RoutePaths(BaseModel):
    """Redirect targets used by the access gate."""

    login: str = "/login"
    admin_login: str = "/admin/login"
    institute_login: str = "/institute/login"
    unauthorized: str = "/unauthorized"
    pending_approval: str = "/institute/pending-approval"
    rejected: str = "/institute/application-rejected"
    user_pending_approval: str = "/user/pending-approval"
    institute_home: str = "/institute/dashboard"
    admin_home: str = "/admin/dashboard"
    user_home: str = "/dashboard"
    user_register: str = "/register"
    institute_register: str = "/institute/register"

    model_config = {"frozen": True}

    @classmethod
    def from_settings(cls, settings: Settings) -> "RoutePaths":
        return cls(
            login=settings.login_path,
            admin_login=settings.admin_login_path,
            institute_login=settings.institute_login_path,
            unauthorized=settings.unauthorized_path,
            pending_approval=settings.pending_approval_path,
            rejected=settings.rejected_path,
            user_pending_approval=settings.user_pending_approval_path,
            institute_home=settings.institute_home_path,
            admin_home=settings.admin_home_path,
            user_home=settings.user_home_path,
        )

    @property
    def public_entry_paths(self) -> frozenset[str]:
        """Login and registration pages an authenticated identity skips."""
        return frozenset({
            self.login,
            self.admin_login,
            self.institute_login,
            self.user_register,
            self.institute_register,
        })


DEFAULT_PATHS = RoutePaths()
