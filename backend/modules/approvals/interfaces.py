"""
Approvals module interface.
"""

from typing import Optional, Protocol, runtime_checkable

from shared.models import Identity, Role

from .models import ApprovalDecision, ApprovalResult, DashboardStats


@runtime_checkable
class IApprovalService(Protocol):
    """
    Administrator-triggered transitions of the approval state machine.

    pending -> approved and pending -> rejected are the only real
    transitions; approving an approved account is a no-op success and
    nothing leaves the rejected state.
    """

    def approve(self, account_id: str, notes: Optional[str] = None) -> ApprovalResult:
        """
        Approve a pending account and grant its role's permissions.

        Returns:
            ApprovalResult; NOT_FOUND for an unknown ID, VALIDATION_FAILURE
            for a rejected account or the admin

        Raises:
            StorageFailureError: If the account could not be written
        """
        ...

    def reject(
        self,
        account_id: str,
        reason: str,
        notes: Optional[str] = None,
    ) -> ApprovalResult:
        """
        Reject an account with a mandatory reason.

        Returns:
            ApprovalResult; VALIDATION_FAILURE for an empty reason (the
            account is left unchanged), NOT_FOUND for an unknown ID

        Raises:
            StorageFailureError: If the account could not be written
        """
        ...

    def apply(self, decision: ApprovalDecision) -> ApprovalResult:
        """Apply a prepared decision record."""
        ...

    def list_pending(self, role: Optional[Role] = None) -> list[Identity]:
        """Accounts awaiting a decision, oldest first."""
        ...

    def get_stats(self) -> DashboardStats:
        """Dashboard counts derived from the stored collections."""
        ...
