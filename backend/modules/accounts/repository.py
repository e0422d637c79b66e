"""
Account repository for record store access.

Encapsulates reads and writes of the three account collections:
- users
- institutes
- admin (singleton)

Status lives only on the stored account. Pending worklists and counts are
computed by filtering these collections.
"""

from typing import Optional

from shared.models import AccountStatus, Role
from shared.repository import BaseRepository
from modules.store.interfaces import IRecordStore
from modules.store.models import CollectionKey

from .exceptions import AccountNotFoundError
from .models import Account


ROLE_COLLECTIONS: dict[Role, str] = {
    Role.USER: CollectionKey.USERS.value,
    Role.INSTITUTE: CollectionKey.INSTITUTES.value,
}

ADMIN_KEY = CollectionKey.ADMIN.value


class AccountRepository(BaseRepository[Account]):
    """
    Repository for account data access.

    Lookups search users, then institutes, then the admin record.

    Note: This repository does NOT check credentials or approval status.
    The service layer is responsible for that.
    """

    def __init__(self, store: IRecordStore, email_case_sensitive: bool = True) -> None:
        super().__init__(store)
        self._email_case_sensitive = email_case_sensitive

    @property
    def store(self) -> IRecordStore:
        return self._store

    def emails_match(self, a: str, b: str) -> bool:
        """Compare emails under the configured case rule."""
        if self._email_case_sensitive:
            return a == b
        return a.casefold() == b.casefold()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_by_role(self, role: Role) -> list[Account]:
        """All accounts stored for one role."""
        if role == Role.ADMIN:
            admin = self.get_admin()
            return [admin] if admin else []
        return self._load_models(ROLE_COLLECTIONS[role], Account)

    def list_all(
        self,
        role: Optional[Role] = None,
        status: Optional[AccountStatus] = None,
    ) -> list[Account]:
        """
        List accounts, optionally filtered.

        Args:
            role: Only accounts with this role.
            status: Only accounts in this approval status.

        Returns:
            Accounts in lookup order (users, institutes, admin).
        """
        roles = [role] if role else [Role.USER, Role.INSTITUTE, Role.ADMIN]
        accounts: list[Account] = []
        for r in roles:
            accounts.extend(self.list_by_role(r))
        if status is not None:
            accounts = [a for a in accounts if a.status == status]
        return accounts

    def get(self, account_id: str) -> Optional[Account]:
        """Get an account by ID from any collection."""
        for account in self.list_all():
            if account.id == account_id:
                return account
        return None

    def find_by_email(self, email: str) -> Optional[Account]:
        """Find the account registered under an email, in lookup order."""
        for account in self.list_all():
            if self.emails_match(account.email, email):
                return account
        return None

    def email_in_use(self, email: str) -> bool:
        """
        Whether any stored record claims the email.

        Unreadable user and institute entries still count when they carry
        an email string.
        """
        if self.find_by_email(email) is not None:
            return True
        for key in ROLE_COLLECTIONS.values():
            _, unreadable = self._load_collection(key, Account)
            for entry in unreadable:
                claimed = entry.get("email") if isinstance(entry, dict) else None
                if isinstance(claimed, str) and self.emails_match(claimed, email):
                    return True
        return False

    def get_admin(self) -> Optional[Account]:
        """Get the singleton admin record."""
        admin = self._load_model(ADMIN_KEY, Account)
        if admin is not None and admin.role != Role.ADMIN:
            return None
        return admin

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def add(self, account: Account) -> Account:
        """Append a new user or institute account to its collection."""
        if account.role == Role.ADMIN:
            self._save_model(ADMIN_KEY, account)
            return account
        key = ROLE_COLLECTIONS[account.role]
        accounts, unreadable = self._load_collection(key, Account)
        accounts.append(account)
        self._save_models(key, accounts, unreadable)
        return account

    def update(self, account: Account) -> Account:
        """
        Replace a stored account with the given version.

        Raises:
            AccountNotFoundError: If no account with that ID is stored
                under the account's role.
        """
        if account.role == Role.ADMIN:
            if self.get_admin() is None:
                raise AccountNotFoundError(account.id)
            self._save_model(ADMIN_KEY, account)
            return account

        key = ROLE_COLLECTIONS[account.role]
        accounts, unreadable = self._load_collection(key, Account)
        for i, existing in enumerate(accounts):
            if existing.id == account.id:
                accounts[i] = account
                self._save_models(key, accounts, unreadable)
                return account
        raise AccountNotFoundError(account.id)
