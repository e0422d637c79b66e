"""
Approvals service implementation.

Applies administrator decisions to the single stored copy of an account.
The pending worklist and dashboard counts are filters over the account
collections, so there is no second copy of a status to keep in sync.
"""

import logging
from typing import TYPE_CHECKING, Optional

from shared.exceptions import EduListError, StorageError
from shared.models import AccountStatus, Identity, Role
from modules.accounts.exceptions import AccountNotFoundError
from modules.accounts.models import Account, utcnow
from modules.accounts.repository import AccountRepository
from modules.store.models import CollectionKey

from .exceptions import InvalidTransitionError, MissingRejectionReasonError
from .interfaces import IApprovalService
from .models import (
    DEFAULT_APPROVE_NOTES,
    DEFAULT_REJECT_NOTES,
    ROLE_PERMISSIONS,
    ApprovalDecision,
    ApprovalOutcome,
    ApprovalResult,
    DashboardStats,
    RoleStats,
)

if TYPE_CHECKING:
    from modules.sessions.interfaces import ISessionManager

logger = logging.getLogger(__name__)


class ApprovalService(IApprovalService):
    """
    Implementation of the approval state machine.

    When a session manager is given, an active session for the account
    being decided is refreshed right after the decision is written.
    """

    def __init__(
        self,
        repository: AccountRepository,
        sessions: Optional["ISessionManager"] = None,
    ):
        self._repo = repository
        self._sessions = sessions

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def approve(self, account_id: str, notes: Optional[str] = None) -> ApprovalResult:
        return self.apply(ApprovalDecision(
            account_id=account_id,
            outcome=ApprovalOutcome.APPROVED,
            notes=notes,
            timestamp=utcnow(),
        ))

    def reject(
        self,
        account_id: str,
        reason: str,
        notes: Optional[str] = None,
    ) -> ApprovalResult:
        return self.apply(ApprovalDecision(
            account_id=account_id,
            outcome=ApprovalOutcome.REJECTED,
            reason=reason,
            notes=notes,
            timestamp=utcnow(),
        ))

    def apply(self, decision: ApprovalDecision) -> ApprovalResult:
        try:
            account, changed = self._apply(decision)
        except StorageError:
            raise
        except EduListError as e:
            logger.info(
                "Decision %s on %s refused (%s)",
                decision.outcome.value,
                decision.account_id,
                e.code,
            )
            return ApprovalResult.from_error(e, decision=decision)

        if changed:
            logger.info("Account %s %s", account.id, decision.outcome.value)
            self._sync_session(account.id)

        return ApprovalResult(
            success=True,
            identity=account.to_identity(),
            changed=changed,
            decision=decision,
            message=f"Account {decision.outcome.value}" if changed else "Account already approved",
        )

    def _apply(self, decision: ApprovalDecision) -> tuple[Account, bool]:
        reason = (decision.reason or "").strip()
        if decision.outcome == ApprovalOutcome.REJECTED and not reason:
            raise MissingRejectionReasonError(decision.account_id)

        with self._repo.store.transaction():
            account = self._repo.get(decision.account_id)
            if account is None:
                raise AccountNotFoundError(decision.account_id)
            if account.role == Role.ADMIN:
                raise InvalidTransitionError(account.id, "admin", decision.outcome.value)

            if decision.outcome == ApprovalOutcome.APPROVED:
                if account.status == AccountStatus.APPROVED:
                    return account, False
                if account.status == AccountStatus.REJECTED:
                    raise InvalidTransitionError(
                        account.id, account.status.value, decision.outcome.value
                    )
                updated = account.model_copy(update={
                    "status": AccountStatus.APPROVED,
                    "approved_at": decision.timestamp,
                    "rejection_reason": None,
                    "permissions": list(ROLE_PERMISSIONS.get(account.role, ())),
                    "admin_notes": decision.notes or DEFAULT_APPROVE_NOTES,
                    "admin_review_date": decision.timestamp,
                    "updated_at": decision.timestamp,
                })
            else:
                updated = account.model_copy(update={
                    "status": AccountStatus.REJECTED,
                    "rejection_reason": reason,
                    "permissions": [],
                    "admin_notes": decision.notes or DEFAULT_REJECT_NOTES,
                    "admin_review_date": decision.timestamp,
                    "updated_at": decision.timestamp,
                })

            return self._repo.update(updated), True

    def _sync_session(self, account_id: str) -> None:
        if self._sessions is None:
            return
        current = self._sessions.current()
        if current is None or current.id != account_id:
            return
        try:
            self._sessions.refresh()
        except StorageError as e:
            # The decision is already stored; the next refresh picks it up
            logger.error("Could not refresh session for %s: %s", account_id, e.message)

    # -------------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------------

    def list_pending(self, role: Optional[Role] = None) -> list[Identity]:
        if role == Role.ADMIN:
            return []
        pending = self._repo.list_all(role=role, status=AccountStatus.PENDING)
        pending.sort(key=lambda a: a.created_at)
        return [a.to_identity() for a in pending]

    def get_stats(self) -> DashboardStats:
        store = self._repo.store
        return DashboardStats(
            users=self._role_stats(Role.USER),
            institutes=self._role_stats(Role.INSTITUTE),
            total_courses=_count(store.load(CollectionKey.COURSES.value)),
            total_reviews=_count(store.load(CollectionKey.REVIEWS.value)),
            total_enquiries=_count(store.load(CollectionKey.ENQUIRIES.value)),
        )

    def _role_stats(self, role: Role) -> RoleStats:
        accounts = self._repo.list_by_role(role)
        return RoleStats(
            total=len(accounts),
            pending=sum(1 for a in accounts if a.status == AccountStatus.PENDING),
            approved=sum(1 for a in accounts if a.status == AccountStatus.APPROVED),
            rejected=sum(1 for a in accounts if a.status == AccountStatus.REJECTED),
        )


def _count(value: object) -> int:
    return len(value) if isinstance(value, list) else 0
