"""
Periodic approval-status check for a pending session.

Runs as an asyncio task on the caller's event loop. The poller belongs
to the session that started it: clearing or replacing the session
cancels it.
"""

import asyncio
import logging
from typing import TYPE_CHECKING, Callable, Optional

from shared.models import AccountStatus, Identity

if TYPE_CHECKING:
    from .service import SessionManager

logger = logging.getLogger(__name__)


class ApprovalPoller:
    """
    Calls SessionManager.refresh() every interval seconds.

    Stops with True once the session is approved (after firing the
    on_approved callback once), or with False when the account is rejected
    or the session goes away.
    """

    def __init__(
        self,
        sessions: "SessionManager",
        interval: float,
        on_approved: Optional[Callable[[Identity], None]] = None,
    ):
        if interval <= 0:
            raise ValueError("Poll interval must be positive")
        self._sessions = sessions
        self._interval = interval
        self._on_approved = on_approved
        self._task: Optional[asyncio.Task] = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def cancelled(self) -> bool:
        return self._task is not None and self._task.cancelled()

    def start(self) -> "ApprovalPoller":
        """
        Schedule the poll loop on the running event loop.

        Raises:
            RuntimeError: If called outside a running event loop
        """
        if self._task is None:
            loop = asyncio.get_running_loop()
            self._task = loop.create_task(self._run())
        return self

    def cancel(self) -> None:
        """Stop polling. Safe to call more than once."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
            logger.debug("Approval poll cancelled")

    async def wait(self) -> bool:
        """
        Wait for the poll loop to finish.

        Returns:
            True if the session became approved, False if it ended otherwise
            (rejected, cleared, forced logout, or cancelled).
        """
        if self._task is None:
            return False
        try:
            return await self._task
        except asyncio.CancelledError:
            if self._task.cancelled():
                return False
            raise

    async def _run(self) -> bool:
        while True:
            await asyncio.sleep(self._interval)
            if self._sessions.current() is None:
                return False
            if self._sessions.refresh():
                identity = self._sessions.current()
                logger.info("Account %s approved while polling", identity.id if identity else "?")
                if self._on_approved is not None and identity is not None:
                    self._on_approved(identity)
                return True
            identity = self._sessions.current()
            if identity is None:
                return False
            if identity.status == AccountStatus.REJECTED:
                logger.info("Account %s rejected while polling", identity.id)
                return False
