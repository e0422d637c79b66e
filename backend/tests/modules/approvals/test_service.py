"""Tests for the approval state machine."""

from datetime import timedelta
from unittest.mock import patch

import pytest

from shared.exceptions import StorageError
from shared.models import AccountStatus, ErrorKind, Role
from modules.approvals.interfaces import IApprovalService
from modules.approvals.models import ApprovalDecision, ApprovalOutcome
from modules.approvals.service import ApprovalService
from modules.accounts.models import utcnow
from modules.sessions.service import SessionManager
from modules.store.exceptions import StorageFailureError

PW = "pw123"


class TestApprove:
    def test_implements_interface(self, approvals):
        assert isinstance(approvals, IApprovalService)

    def test_approve_pending_institute(self, approvals, register, account_repo):
        identity = register("edu@x.com")

        result = approvals.approve(identity.id)

        assert result.success is True
        assert result.changed is True
        assert result.identity.status == AccountStatus.APPROVED
        assert result.identity.approved_at is not None
        assert result.identity.permissions == [
            "manage_courses", "view_enquiries", "manage_reviews",
        ]
        stored = account_repo.get(identity.id)
        assert stored.admin_notes == "Approved by administrator"
        assert stored.admin_review_date == stored.approved_at

    def test_approve_user_grants_user_permissions(self, approvals, register):
        identity = register("s@x.com", role=Role.USER)

        result = approvals.approve(identity.id)

        assert result.identity.permissions == ["submit_reviews", "submit_enquiries"]

    def test_approve_with_notes(self, approvals, register, account_repo):
        identity = register("edu@x.com")

        approvals.approve(identity.id, notes="Documents verified")

        assert account_repo.get(identity.id).admin_notes == "Documents verified"

    def test_approve_twice_is_noop(self, approvals, register, account_repo):
        """Second approval succeeds without touching approvedAt."""
        identity = register("edu@x.com")

        first = approvals.approve(identity.id)
        approved_at = account_repo.get(identity.id).approved_at
        second = approvals.approve(identity.id)

        assert first.changed is True
        assert second.success is True
        assert second.changed is False
        assert second.error is None
        stored = account_repo.get(identity.id)
        assert stored.status == AccountStatus.APPROVED
        assert stored.approved_at == approved_at

    def test_approve_missing_account(self, approvals):
        result = approvals.approve("inst_missing")

        assert result.success is False
        assert result.error == ErrorKind.NOT_FOUND

    def test_approve_rejected_account_fails(self, approvals, register, account_repo):
        """There is no way back out of rejected."""
        identity = register("edu@x.com")
        approvals.reject(identity.id, "incomplete documents")

        result = approvals.approve(identity.id)

        assert result.error == ErrorKind.VALIDATION_FAILURE
        assert result.code == "INVALID_TRANSITION"
        assert account_repo.get(identity.id).status == AccountStatus.REJECTED

    def test_approve_admin_fails(self, approvals, accounts):
        result = approvals.approve("admin")
        assert result.error == ErrorKind.VALIDATION_FAILURE

    def test_approve_affects_only_that_account(self, approvals, register, account_repo):
        target = register("a@x.com")
        other = register("b@x.com")

        approvals.approve(target.id)

        assert account_repo.get(other.id).status == AccountStatus.PENDING


class TestReject:
    def test_reject_with_reason(self, approvals, register, account_repo):
        identity = register("edu@x.com")

        result = approvals.reject(identity.id, reason="incomplete documents")

        assert result.success is True
        assert result.identity.status == AccountStatus.REJECTED
        assert result.identity.rejection_reason == "incomplete documents"
        assert result.identity.approved_at is None
        stored = account_repo.get(identity.id)
        assert stored.admin_notes == "Rejected by administrator"
        assert stored.permissions == []

    @pytest.mark.parametrize("reason", ["", "   ", None])
    def test_reject_without_reason_fails(self, approvals, register, account_repo, reason):
        """A rejection without a reason is a validation failure."""
        identity = register("edu@x.com")

        result = approvals.reject(identity.id, reason=reason)

        assert result.success is False
        assert result.error == ErrorKind.VALIDATION_FAILURE
        assert result.code == "REJECTION_REASON_REQUIRED"
        assert account_repo.get(identity.id).status == AccountStatus.PENDING

    def test_reject_approved_keeps_approved_at(self, approvals, register, account_repo):
        identity = register("edu@x.com")
        approvals.approve(identity.id)
        approved_at = account_repo.get(identity.id).approved_at

        approvals.reject(identity.id, "policy violation")

        stored = account_repo.get(identity.id)
        assert stored.status == AccountStatus.REJECTED
        assert stored.approved_at == approved_at
        assert stored.permissions == []

    def test_reject_missing_account(self, approvals):
        result = approvals.reject("missing", "reason")
        assert result.error == ErrorKind.NOT_FOUND


class TestApply:
    def test_apply_decision_record(self, approvals, register):
        identity = register("edu@x.com")
        decision = ApprovalDecision(
            account_id=identity.id,
            outcome=ApprovalOutcome.APPROVED,
            timestamp=utcnow() - timedelta(hours=1),
        )

        result = approvals.apply(decision)

        assert result.decision == decision
        assert result.identity.approved_at == decision.timestamp

    def test_failed_result_carries_decision(self, approvals):
        decision = ApprovalDecision(
            account_id="missing", outcome=ApprovalOutcome.REJECTED, reason="x", timestamp=utcnow()
        )
        assert approvals.apply(decision).decision == decision


class TestStorageFailure:
    def test_failed_write_leaves_account_pending(self, approvals, register, account_repo):
        identity = register("edu@x.com")

        with patch.object(
            account_repo.store, "_write_raw", side_effect=StorageFailureError("institutes")
        ):
            with pytest.raises(StorageError):
                approvals.approve(identity.id)

        assert account_repo.get(identity.id).status == AccountStatus.PENDING


class TestSessionSync:
    def test_active_session_is_refreshed(self, approvals, register, sessions):
        """Deciding the logged-in account updates the session in the same runtime."""
        identity = register("edu@x.com")
        sessions.establish(identity)

        approvals.approve(identity.id)

        assert sessions.current().status == AccountStatus.APPROVED

    def test_rejection_reaches_session(self, approvals, register, sessions):
        identity = register("edu@x.com")
        sessions.establish(identity)

        approvals.reject(identity.id, "incomplete documents")

        assert sessions.current().status == AccountStatus.REJECTED
        assert sessions.current().rejection_reason == "incomplete documents"

    def test_other_session_untouched(self, approvals, register, sessions):
        mine = register("me@x.com")
        other = register("other@x.com")
        sessions.establish(mine)

        approvals.approve(other.id)

        assert sessions.current().id == mine.id
        assert sessions.current().status == AccountStatus.PENDING

    def test_session_in_other_runtime_stays_stale(self, store, account_repo, settings, register):
        """Without refresh(), a session held elsewhere keeps the old status."""
        identity = register("edu@x.com")
        elsewhere = SessionManager(store, account_repo, settings)
        elsewhere.establish(identity)
        admin_side = ApprovalService(account_repo)

        admin_side.approve(identity.id)

        assert elsewhere.current().status == AccountStatus.PENDING
        assert elsewhere.refresh() is True
        assert elsewhere.current().status == AccountStatus.APPROVED


class TestDerivedViews:
    def test_list_pending_oldest_first(self, approvals, register):
        first = register("first@x.com", role=Role.USER)
        second = register("second@x.com", role=Role.INSTITUTE)
        third = register("third@x.com", role=Role.USER)
        approvals.approve(third.id)

        pending = approvals.list_pending()

        assert [i.id for i in pending] == [first.id, second.id]

    def test_list_pending_by_role(self, approvals, register):
        register("u@x.com", role=Role.USER)
        inst = register("i@x.com", role=Role.INSTITUTE)

        assert [i.id for i in approvals.list_pending(Role.INSTITUTE)] == [inst.id]
        assert approvals.list_pending(Role.ADMIN) == []

    def test_processed_entry_leaves_worklist(self, approvals, register):
        identity = register("edu@x.com")
        approvals.reject(identity.id, "duplicate")

        assert approvals.list_pending() == []

    def test_stats(self, approvals, register, approved, store):
        register("p@x.com", role=Role.USER)
        approved("a@x.com", role=Role.USER)
        rejected = register("r@x.com", role=Role.INSTITUTE)
        approvals.reject(rejected.id, "no")
        store.save("courses", [{"id": "c1"}, {"id": "c2"}])
        store.save("reviews", [{"id": "r1"}])

        stats = approvals.get_stats()

        assert stats.users.total == 2
        assert stats.users.pending == 1
        assert stats.users.approved == 1
        assert stats.institutes.rejected == 1
        assert stats.pending_approvals == 1
        assert stats.total_courses == 2
        assert stats.total_reviews == 1
        assert stats.total_enquiries == 0
