"""
Approvals module data models.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from shared.models import Identity, OperationResult, Role


class ApprovalOutcome(str, Enum):
    APPROVED = "approved"
    REJECTED = "rejected"


# Permissions granted on approval
ROLE_PERMISSIONS: dict[Role, tuple[str, ...]] = {
    Role.INSTITUTE: ("manage_courses", "view_enquiries", "manage_reviews"),
    Role.USER: ("submit_reviews", "submit_enquiries"),
}

DEFAULT_APPROVE_NOTES = "Approved by administrator"
DEFAULT_REJECT_NOTES = "Rejected by administrator"


class ApprovalDecision(BaseModel):
    """
    One administrator action on one account.

    Not persisted: applying it mutates the account and nothing else.
    """

    account_id: str
    outcome: ApprovalOutcome
    reason: Optional[str] = Field(None, description="Rejection reason")
    notes: Optional[str] = Field(None, description="Administrator notes")
    timestamp: datetime


class ApprovalResult(OperationResult):
    """Outcome of applying an approval decision."""

    identity: Optional[Identity] = Field(None, description="Account after the transition")
    changed: bool = Field(False, description="False when the call was a no-op")
    decision: Optional[ApprovalDecision] = None


class RoleStats(BaseModel):
    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0


class DashboardStats(BaseModel):
    """Counts derived from the canonical collections on every call."""

    users: RoleStats = Field(default_factory=RoleStats)
    institutes: RoleStats = Field(default_factory=RoleStats)
    total_courses: int = 0
    total_reviews: int = 0
    total_enquiries: int = 0

    @property
    def pending_approvals(self) -> int:
        return self.users.pending + self.institutes.pending
