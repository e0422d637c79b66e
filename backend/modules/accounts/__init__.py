"""
Accounts module.

Handles registration, credential checks and self-service profile changes
for user, institute and admin accounts.

Public API:
- IAccountService: Interface for account operations
- Account: Stored account record (carries the password hash)
- RegistrationRequest, AccountResult, LoginResult: Request/result models
- AccountRepository: Canonical account collections
- Account exceptions: InvalidCredentialsError, WrongPortalError, etc.
"""

from .interfaces import IAccountService
from .models import Account, AccountResult, LoginResult, RegistrationRequest
from .exceptions import (
    InvalidCredentialsError,
    WrongPortalError,
    PendingApprovalError,
    AccountRejectedError,
    DuplicateEmailError,
    RegistrationValidationError,
    AccountNotFoundError,
)
from .repository import AccountRepository
from .service import AccountService

__all__ = [
    # Interface
    "IAccountService",
    # Models
    "Account",
    "AccountResult",
    "LoginResult",
    "RegistrationRequest",
    # Exceptions
    "InvalidCredentialsError",
    "WrongPortalError",
    "PendingApprovalError",
    "AccountRejectedError",
    "DuplicateEmailError",
    "RegistrationValidationError",
    "AccountNotFoundError",
    # Repository / Service
    "AccountRepository",
    "AccountService",
]
