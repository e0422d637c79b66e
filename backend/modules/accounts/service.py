"""
Accounts service implementation.

Registers accounts and resolves email/password pairs to sanitized
identities. Credentials are checked before role and status, and every
failure to match an account takes the same path.
"""

import logging
import uuid
from typing import Any, Optional

from shared.config import Settings, get_settings
from shared.exceptions import EduListError, StorageError
from shared.models import AccountStatus, Identity, Role

from .exceptions import (
    AccountNotFoundError,
    AccountRejectedError,
    DuplicateEmailError,
    InvalidCredentialsError,
    PendingApprovalError,
    RegistrationValidationError,
    WrongPortalError,
)
from .interfaces import IAccountService
from .models import (
    PROTECTED_FIELDS,
    Account,
    AccountResult,
    LoginResult,
    RegistrationRequest,
    utcnow,
)
from .passwords import dummy_hash, hash_password, verify_password
from .repository import AccountRepository

logger = logging.getLogger(__name__)

_ID_PREFIXES = {Role.USER: "user_", Role.INSTITUTE: "inst_", Role.ADMIN: "admin_"}


def generate_account_id(role: Role) -> str:
    return f"{_ID_PREFIXES[role]}{uuid.uuid4().hex[:12]}"


class AccountService(IAccountService):
    """
    Implementation of the accounts service.

    Reads and writes go through AccountRepository; every multi-step
    read-modify-write runs inside one record store transaction.
    """

    def __init__(
        self,
        repository: AccountRepository,
        settings: Optional[Settings] = None,
    ):
        self._repo = repository
        self._settings = settings or get_settings()

    @property
    def repository(self) -> AccountRepository:
        return self._repo

    # -------------------------------------------------------------------------
    # Admin seed
    # -------------------------------------------------------------------------

    def ensure_admin(self) -> Identity:
        """Seed the singleton admin record from settings if none is stored."""
        with self._repo.store.transaction():
            admin = self._repo.get_admin()
            if admin is None:
                admin = self._repo.add(Account(
                    id="admin",
                    email=self._settings.admin_email,
                    password_hash=hash_password(
                        self._settings.admin_password, self._settings.bcrypt_rounds
                    ),
                    name=self._settings.admin_name,
                    role=Role.ADMIN,
                ))
                logger.info("Seeded admin account %s", admin.email)
        return admin.to_identity()

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register(self, role: Role, request: RegistrationRequest) -> AccountResult:
        """Register a user or institute account in pending state."""
        try:
            identity = self._register(role, request)
        except StorageError:
            raise
        except EduListError as e:
            logger.info("Registration rejected (%s) for role %s", e.code, role.value)
            return AccountResult.from_error(e)
        return AccountResult(
            success=True,
            identity=identity,
            message="Registration successful! Please wait for admin approval."
            if identity.status == AccountStatus.PENDING
            else "Registration successful!",
        )

    def _register(self, role: Role, request: RegistrationRequest) -> Identity:
        if role == Role.ADMIN:
            raise RegistrationValidationError("Admin accounts cannot be registered")

        missing = [
            field for field in ("name", "email", "password")
            if not getattr(request, field).strip()
        ]
        if missing:
            raise RegistrationValidationError("All fields are required", missing)
        if "@" not in request.email:
            raise RegistrationValidationError("Please enter a valid email", ["email"])

        status = AccountStatus.PENDING
        if role == Role.USER and self._settings.auto_approve_users:
            status = AccountStatus.APPROVED

        password_hash = hash_password(request.password, self._settings.bcrypt_rounds)

        with self._repo.store.transaction():
            if self._repo.email_in_use(request.email):
                raise DuplicateEmailError(request.email)

            now = utcnow()
            account = self._repo.add(Account(
                id=generate_account_id(role),
                email=request.email,
                password_hash=password_hash,
                name=request.name,
                role=role,
                status=status,
                created_at=now,
                approved_at=now if status == AccountStatus.APPROVED else None,
                profile=dict(request.profile),
            ))

        logger.info("Registered %s account %s (%s)", role.value, account.id, status.value)
        return account.to_identity()

    # -------------------------------------------------------------------------
    # Credential checks
    # -------------------------------------------------------------------------

    def authenticate(
        self,
        email: str,
        password: str,
        expected_role: Optional[Role] = None,
    ) -> LoginResult:
        """Resolve credentials to an identity, recording the login."""
        try:
            identity = self._authenticate(email, password, expected_role)
        except StorageError:
            raise
        except EduListError as e:
            logger.info("Login failed (%s)", e.code)
            return LoginResult.from_error(
                e, rejection_reason=getattr(e, "rejection_reason", None)
            )
        logger.info("Login succeeded for %s account %s", identity.role.value, identity.id)
        return LoginResult(success=True, identity=identity)

    def _authenticate(
        self,
        email: str,
        password: str,
        expected_role: Optional[Role],
    ) -> Identity:
        if not email or not password:
            raise InvalidCredentialsError()

        with self._repo.store.transaction():
            account = self._repo.find_by_email(email)
            if account is None:
                verify_password(password, dummy_hash(self._settings.bcrypt_rounds))
                raise InvalidCredentialsError()
            if not verify_password(password, account.password_hash):
                raise InvalidCredentialsError()

            if expected_role is not None and account.role != expected_role:
                raise WrongPortalError(expected_role.value, account.role.value)

            if account.role != Role.ADMIN:
                if account.status == AccountStatus.PENDING:
                    raise PendingApprovalError(account.id)
                if account.status == AccountStatus.REJECTED:
                    raise AccountRejectedError(account.id, account.rejection_reason)

            account = self._repo.update(account.model_copy(update={
                "last_login": utcnow(),
                "login_count": account.login_count + 1,
            }))

        return account.to_identity()

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def get_account(self, account_id: str) -> Optional[Identity]:
        account = self._repo.get(account_id)
        return account.to_identity() if account else None

    def find_by_email(self, email: str) -> Optional[Identity]:
        account = self._repo.find_by_email(email)
        return account.to_identity() if account else None

    def list_accounts(
        self,
        role: Optional[Role] = None,
        status: Optional[AccountStatus] = None,
    ) -> list[Identity]:
        return [a.to_identity() for a in self._repo.list_all(role=role, status=status)]

    # -------------------------------------------------------------------------
    # Self-service updates
    # -------------------------------------------------------------------------

    def update_profile(self, account_id: str, updates: dict[str, Any]) -> AccountResult:
        """
        Merge profile fields into an account.

        The display name may be changed through the "name" key; identity,
        credential and approval fields are silently dropped.
        """
        safe = {k: v for k, v in updates.items() if k not in PROTECTED_FIELDS}
        try:
            with self._repo.store.transaction():
                account = self._repo.get(account_id)
                if account is None:
                    raise AccountNotFoundError(account_id)

                changes: dict[str, Any] = {"updated_at": utcnow()}
                if "name" in safe:
                    changes["name"] = str(safe.pop("name"))
                changes["profile"] = {**account.profile, **safe}
                account = self._repo.update(account.model_copy(update=changes))
        except StorageError:
            raise
        except EduListError as e:
            return AccountResult.from_error(e)
        return AccountResult(
            success=True,
            identity=account.to_identity(),
            message="Profile updated successfully",
        )

    def change_password(
        self,
        account_id: str,
        current_password: str,
        new_password: str,
    ) -> AccountResult:
        try:
            if not new_password:
                raise RegistrationValidationError("New password is required", ["new_password"])
            new_hash = hash_password(new_password, self._settings.bcrypt_rounds)
            with self._repo.store.transaction():
                account = self._repo.get(account_id)
                if account is None or not verify_password(current_password, account.password_hash):
                    raise InvalidCredentialsError("Current password is incorrect")
                account = self._repo.update(account.model_copy(update={
                    "password_hash": new_hash,
                    "updated_at": utcnow(),
                }))
        except StorageError:
            raise
        except EduListError as e:
            return AccountResult.from_error(e)
        logger.info("Password changed for account %s", account_id)
        return AccountResult(
            success=True,
            identity=account.to_identity(),
            message="Password changed successfully",
        )

