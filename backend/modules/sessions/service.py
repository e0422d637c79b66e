"""
Session manager implementation.

Holds the active identity for this runtime and mirrors it to the record
store as a signed snapshot so it survives a restart. The cached status
may go stale when an administrator acts in another process; refresh()
re-reads the account explicitly.
"""

import logging
from datetime import timedelta
from typing import Callable, Optional

from shared.config import Settings, get_settings
from shared.exceptions import AuthenticationError, StorageError
from shared.models import Identity
from modules.accounts.repository import AccountRepository
from modules.store.interfaces import IRecordStore
from modules.store.models import CollectionKey

from .interfaces import ISessionManager
from .poller import ApprovalPoller
from .tokens import decode_snapshot, encode_snapshot

logger = logging.getLogger(__name__)

SESSION_KEY = CollectionKey.SESSION.value


def _approval_state(identity: Identity) -> tuple:
    return (identity.status, identity.rejection_reason, tuple(identity.permissions))


class SessionManager(ISessionManager):
    """
    Process-wide session state, injected wherever "who is logged in"
    matters instead of being read from a global.
    """

    def __init__(
        self,
        store: IRecordStore,
        accounts: AccountRepository,
        settings: Optional[Settings] = None,
    ):
        self._store = store
        self._accounts = accounts
        self._settings = settings or get_settings()
        self._identity: Optional[Identity] = None
        self._poller: Optional[ApprovalPoller] = None

    def current(self) -> Optional[Identity]:
        return self._identity

    def establish(self, identity: Identity) -> None:
        self.cancel_watch()
        self._persist(identity)
        logger.info("Session established for %s account %s", identity.role.value, identity.id)

    def rehydrate(self) -> Optional[Identity]:
        token = self._store.load(SESSION_KEY)
        if token is None:
            self._identity = None
            return None

        try:
            snapshot = decode_snapshot(token, self._settings.session_secret)
        except AuthenticationError as e:
            logger.warning("Discarding persisted session (%s)", e.code)
            self._discard_snapshot()
            return None

        if self._accounts.get(snapshot.identity.id) is None:
            logger.warning("Discarding persisted session for missing account %s", snapshot.identity.id)
            self._discard_snapshot()
            return None

        self._identity = snapshot.identity
        logger.debug("Session rehydrated for account %s", self._identity.id)
        return self._identity

    def clear(self) -> None:
        self.cancel_watch()
        if self._identity is None and self._store.load(SESSION_KEY) is None:
            return
        self._store.delete(SESSION_KEY)
        if self._identity is not None:
            logger.info("Session cleared for account %s", self._identity.id)
        self._identity = None

    def refresh(self) -> bool:
        if self._identity is None:
            return False

        account = self._accounts.get(self._identity.id)
        if account is None:
            logger.info("Account %s no longer exists, ending session", self._identity.id)
            self.clear()
            return False

        latest = account.to_identity()
        if _approval_state(latest) != _approval_state(self._identity):
            logger.info(
                "Session status for %s changed: %s -> %s",
                account.id,
                self._identity.status.value if self._identity.status else None,
                latest.status.value if latest.status else None,
            )
            self._persist(latest)

        return self._identity.is_approved

    def watch_approval(
        self,
        interval: Optional[float] = None,
        on_approved: Optional[Callable[[Identity], None]] = None,
    ) -> ApprovalPoller:
        """
        Start an approval poll tied to this session.

        Any previous poll is cancelled first. Must be called from within
        a running event loop.
        """
        self.cancel_watch()
        self._poller = ApprovalPoller(
            self,
            interval or self._settings.approval_poll_interval,
            on_approved,
        ).start()
        return self._poller

    def cancel_watch(self) -> None:
        if self._poller is not None:
            self._poller.cancel()
            self._poller = None

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _persist(self, identity: Identity) -> None:
        token = encode_snapshot(
            identity,
            self._settings.session_secret,
            timedelta(hours=self._settings.session_ttl_hours),
        )
        # Raises StorageFailureError before any in-memory change
        self._store.save(SESSION_KEY, token)
        self._identity = identity

    def _discard_snapshot(self) -> None:
        self._identity = None
        try:
            self._store.delete(SESSION_KEY)
        except StorageError as e:
            logger.warning("Could not remove discarded session snapshot: %s", e.message)
