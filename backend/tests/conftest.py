"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules:
an in-memory record store, fast bcrypt settings and fully wired services.
"""

import pytest

from container import ServiceContainer, reset_container
from shared.config import Settings, get_settings
from shared.models import Identity, Role
from modules.accounts.models import RegistrationRequest
from modules.accounts.repository import AccountRepository
from modules.accounts.service import AccountService
from modules.approvals.service import ApprovalService
from modules.directory.repository import DirectoryRepository
from modules.directory.service import DirectoryService
from modules.sessions.service import SessionManager
from modules.store.service import InMemoryRecordStore, reset_record_store


# Test signing key (only for testing)
TEST_SESSION_SECRET = "test-session-secret-for-edulist-only"
TEST_PASSWORD = "pw123"


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset module-level singletons before and after each test."""
    get_settings.cache_clear()
    reset_record_store()
    reset_container()
    yield
    reset_container()
    reset_record_store()
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Settings with a memory store and the cheapest bcrypt cost."""
    return Settings(
        _env_file=None,
        store_backend="memory",
        bcrypt_rounds=4,
        session_secret=TEST_SESSION_SECRET,
    )


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def account_repo(store, settings) -> AccountRepository:
    return AccountRepository(store, email_case_sensitive=settings.email_case_sensitive)


@pytest.fixture
def accounts(account_repo, settings) -> AccountService:
    service = AccountService(account_repo, settings)
    service.ensure_admin()
    return service


@pytest.fixture
def sessions(store, account_repo, settings) -> SessionManager:
    return SessionManager(store, account_repo, settings)


@pytest.fixture
def approvals(account_repo, sessions) -> ApprovalService:
    return ApprovalService(account_repo, sessions=sessions)


@pytest.fixture
def directory(store, account_repo) -> DirectoryService:
    return DirectoryService(DirectoryRepository(store), account_repo)


@pytest.fixture
def container(settings, store) -> ServiceContainer:
    """A container wired to the test store and settings."""
    return ServiceContainer(settings=settings, store=store)


@pytest.fixture
def register(accounts):
    """Register an account and return its identity."""

    def _register(
        email: str,
        role: Role = Role.INSTITUTE,
        password: str = TEST_PASSWORD,
        name: str = "Test Account",
        **profile,
    ) -> Identity:
        result = accounts.register(
            role,
            RegistrationRequest(name=name, email=email, password=password, profile=profile),
        )
        assert result.success, result.message
        return result.identity

    return _register


@pytest.fixture
def approved(register, approvals):
    """Register and approve an account, returning the approved identity."""

    def _approved(email: str, role: Role = Role.INSTITUTE, **kwargs) -> Identity:
        identity = register(email, role=role, **kwargs)
        result = approvals.approve(identity.id)
        assert result.success, result.message
        return result.identity

    return _approved
