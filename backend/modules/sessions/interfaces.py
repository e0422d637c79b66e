"""
Sessions module interface.

The access gate and the approval service depend on ISessionManager, not
the concrete implementation.
"""

from typing import Callable, Optional, Protocol, runtime_checkable

from shared.models import Identity


@runtime_checkable
class ISessionManager(Protocol):
    """
    Single source of truth for who is authenticated in this runtime.

    At most one identity is active; establishing a new one replaces the
    previous one.
    """

    def current(self) -> Optional[Identity]:
        """Get the active identity, or None."""
        ...

    def establish(self, identity: Identity) -> None:
        """
        Make an identity the active session and persist a snapshot.

        Raises:
            StorageFailureError: If the snapshot could not be written; the
                previous session stays active in that case
        """
        ...

    def rehydrate(self) -> Optional[Identity]:
        """
        Restore the session persisted by a previous process.

        Never raises: a missing, corrupt or expired snapshot, or one that
        refers to a deleted account, leaves the session empty.
        """
        ...

    def clear(self) -> None:
        """End the session and remove the snapshot. Idempotent."""
        ...

    def refresh(self) -> bool:
        """
        Re-read the active account and update the cached status.

        Returns:
            True if the session is now approved (admins always are).
            If the account no longer exists the session is cleared and
            False is returned.
        """
        ...

    def watch_approval(
        self,
        interval: Optional[float] = None,
        on_approved: Optional[Callable[[Identity], None]] = None,
    ):
        """Start polling refresh() until approved or the session ends."""
        ...
