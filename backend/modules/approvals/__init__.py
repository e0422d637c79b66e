"""
Approvals module.

The pending -> approved / rejected lifecycle of user and institute
accounts, plus the derived pending worklist and dashboard counts.

Public API:
- IApprovalService: Interface for approval operations
- ApprovalService: Implementation over the account repository
- ApprovalDecision, ApprovalResult, DashboardStats: Models
"""

from .interfaces import IApprovalService
from .models import (
    ROLE_PERMISSIONS,
    ApprovalDecision,
    ApprovalOutcome,
    ApprovalResult,
    DashboardStats,
    RoleStats,
)
from .exceptions import InvalidTransitionError, MissingRejectionReasonError
from .service import ApprovalService

__all__ = [
    # Interface
    "IApprovalService",
    # Models
    "ROLE_PERMISSIONS",
    "ApprovalDecision",
    "ApprovalOutcome",
    "ApprovalResult",
    "DashboardStats",
    "RoleStats",
    # Exceptions
    "InvalidTransitionError",
    "MissingRejectionReasonError",
    # Service
    "ApprovalService",
]
