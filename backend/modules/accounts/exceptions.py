"""
Accounts module exceptions.

These are raised inside the accounts service and converted into
LoginResult / AccountResult values at the public operation boundary.
"""

from typing import Optional

from shared.exceptions import AuthenticationError, NotFoundError, ValidationError
from shared.models import ErrorKind


class InvalidCredentialsError(AuthenticationError):
    """Raised when an email/password pair matches no account."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message, code="INVALID_CREDENTIALS")


class WrongPortalError(AuthenticationError):
    """Raised when valid credentials are used on another role's portal."""

    kind = ErrorKind.WRONG_PORTAL

    def __init__(self, expected_role: str, actual_role: str):
        super().__init__(
            f"Please use the {actual_role} login for {actual_role} accounts",
            code="WRONG_PORTAL",
            details={"expected_role": expected_role, "actual_role": actual_role},
        )


class PendingApprovalError(AuthenticationError):
    """Raised when the account has not been approved yet."""

    kind = ErrorKind.PENDING_APPROVAL

    def __init__(self, account_id: str):
        super().__init__(
            "Your account is pending approval. Please wait for administrator approval.",
            code="PENDING_APPROVAL",
            details={"account_id": account_id},
        )


class AccountRejectedError(AuthenticationError):
    """Raised when the account was rejected by an administrator."""

    kind = ErrorKind.REJECTED

    def __init__(self, account_id: str, rejection_reason: Optional[str] = None):
        super().__init__(
            "Your account has been rejected. Please contact support.",
            code="ACCOUNT_REJECTED",
            details={"account_id": account_id, "rejection_reason": rejection_reason},
        )
        self.rejection_reason = rejection_reason


class DuplicateEmailError(ValidationError):
    """Raised when registering an email that any account already uses."""

    kind = ErrorKind.DUPLICATE_EMAIL

    def __init__(self, email: str):
        super().__init__(
            "Email already registered",
            code="DUPLICATE_EMAIL",
            details={"email": email},
        )


class RegistrationValidationError(ValidationError):
    """Raised when required registration fields are missing or invalid."""

    def __init__(self, message: str, missing_fields: Optional[list[str]] = None):
        super().__init__(
            message,
            code="REGISTRATION_INVALID",
            details={"missing_fields": missing_fields or []},
        )


class AccountNotFoundError(NotFoundError):
    """Raised when an account ID does not exist."""

    def __init__(self, account_id: str):
        super().__init__(
            f"Account not found: {account_id}",
            code="ACCOUNT_NOT_FOUND",
            details={"account_id": account_id},
        )
