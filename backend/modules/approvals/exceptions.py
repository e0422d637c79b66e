"""
Approvals module exceptions.
"""

from shared.exceptions import ValidationError


class MissingRejectionReasonError(ValidationError):
    """Raised when a rejection has no reason."""

    def __init__(self, account_id: str):
        super().__init__(
            "A rejection reason is required",
            code="REJECTION_REASON_REQUIRED",
            details={"account_id": account_id},
        )


class InvalidTransitionError(ValidationError):
    """Raised when an account cannot move to the requested state."""

    def __init__(self, account_id: str, current: str, target: str):
        super().__init__(
            f"Cannot move account {account_id} from {current} to {target}",
            code="INVALID_TRANSITION",
            details={"account_id": account_id, "current": current, "target": target},
        )
