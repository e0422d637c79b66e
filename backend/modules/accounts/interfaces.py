"""
Accounts module interface.

Other modules should depend on IAccountService, not the concrete
implementation. This enables testing with mocks.
"""

from typing import Any, Optional, Protocol, runtime_checkable

from shared.models import AccountStatus, Identity, Role

from .models import AccountResult, LoginResult, RegistrationRequest


@runtime_checkable
class IAccountService(Protocol):
    """
    Interface for account registration and credential checks.

    Expected business failures are returned as results; only storage
    failures are raised.
    """

    def register(self, role: Role, request: RegistrationRequest) -> AccountResult:
        """
        Register a new user or institute account.

        Args:
            role: Role of the new account (user or institute)
            request: Name, email, password and profile fields

        Returns:
            AccountResult with the sanitized identity on success, or a
            DUPLICATE_EMAIL / VALIDATION_FAILURE error

        Raises:
            StorageFailureError: If the account could not be written
        """
        ...

    def authenticate(
        self,
        email: str,
        password: str,
        expected_role: Optional[Role] = None,
    ) -> LoginResult:
        """
        Verify a credential pair and return the sanitized identity.

        Args:
            email: Login email
            password: Plain text password
            expected_role: Role of the portal the login came from

        Returns:
            LoginResult; on failure the error is one of INVALID_CREDENTIALS,
            WRONG_PORTAL, PENDING_APPROVAL or REJECTED

        Raises:
            StorageFailureError: If the login bookkeeping could not be written
        """
        ...

    def get_account(self, account_id: str) -> Optional[Identity]:
        """Get a sanitized account by ID, or None."""
        ...

    def find_by_email(self, email: str) -> Optional[Identity]:
        """Get a sanitized account by email, or None."""
        ...

    def list_accounts(
        self,
        role: Optional[Role] = None,
        status: Optional[AccountStatus] = None,
    ) -> list[Identity]:
        """List sanitized accounts, optionally filtered by role and status."""
        ...

    def update_profile(self, account_id: str, updates: dict[str, Any]) -> AccountResult:
        """Merge profile fields into an account. Protected keys are ignored."""
        ...

    def change_password(
        self,
        account_id: str,
        current_password: str,
        new_password: str,
    ) -> AccountResult:
        """Replace the password after verifying the current one."""
        ...
