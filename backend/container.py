"""
Service wiring.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations over one shared
record store and one session manager per process.
"""

from typing import TYPE_CHECKING, Optional

from shared.config import Settings, get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.access.models import RoutePaths
    from modules.accounts.repository import AccountRepository
    from modules.accounts.service import AccountService
    from modules.approvals.interfaces import IApprovalService
    from modules.directory.interfaces import IDirectoryService
    from modules.sessions.service import SessionManager
    from modules.store.interfaces import IRecordStore


class ServiceContainer:
    """
    Container for all service instances.

    Services are created lazily on first access and cached for the
    lifetime of the container. Use reset() to clear them in tests.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        store: Optional["IRecordStore"] = None,
    ) -> None:
        self._settings = settings
        self._store = store
        self._account_repository: "AccountRepository | None" = None
        self._account_service: "AccountService | None" = None
        self._session_manager: "SessionManager | None" = None
        self._approval_service: "IApprovalService | None" = None
        self._directory_service: "IDirectoryService | None" = None
        self._route_paths: "RoutePaths | None" = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def store(self) -> "IRecordStore":
        """Get the record store for the configured backend."""
        if self._store is None:
            from modules.store.service import get_record_store
            self._store = get_record_store()
        return self._store

    @property
    def account_repository(self) -> "AccountRepository":
        if self._account_repository is None:
            from modules.accounts.repository import AccountRepository
            self._account_repository = AccountRepository(
                self.store,
                email_case_sensitive=self.settings.email_case_sensitive,
            )
        return self._account_repository

    @property
    def accounts(self) -> "AccountService":
        """Get the account service, seeding the admin record on first use."""
        if self._account_service is None:
            from modules.accounts.service import AccountService
            service = AccountService(self.account_repository, self.settings)
            service.ensure_admin()
            self._account_service = service
        return self._account_service

    @property
    def sessions(self) -> "SessionManager":
        if self._session_manager is None:
            from modules.sessions.service import SessionManager
            self._session_manager = SessionManager(
                self.store, self.account_repository, self.settings
            )
        return self._session_manager

    @property
    def approvals(self) -> "IApprovalService":
        if self._approval_service is None:
            from modules.approvals.service import ApprovalService
            self._approval_service = ApprovalService(
                self.account_repository,
                sessions=self.sessions,
            )
        return self._approval_service

    @property
    def directory(self) -> "IDirectoryService":
        if self._directory_service is None:
            from modules.directory.repository import DirectoryRepository
            from modules.directory.service import DirectoryService
            self._directory_service = DirectoryService(
                DirectoryRepository(self.store),
                self.account_repository,
            )
        return self._directory_service

    @property
    def route_paths(self) -> "RoutePaths":
        if self._route_paths is None:
            from modules.access.models import RoutePaths
            self._route_paths = RoutePaths.from_settings(self.settings)
        return self._route_paths

    def reset(self) -> None:
        """
        Reset all cached services.

        The session manager's approval watch is cancelled first.
        """
        if self._session_manager is not None:
            self._session_manager.cancel_watch()
        self._account_repository = None
        self._account_service = None
        self._session_manager = None
        self._approval_service = None
        self._directory_service = None
        self._route_paths = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    The next call to get_container() creates a fresh container with new
    service instances. Primarily used for testing.
    """
    global _container
    if _container is not None:
        _container.reset()
    _container = None
