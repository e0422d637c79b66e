"""Tests for the operator command line."""

from unittest.mock import patch

import pytest

from main import EXIT_FAILURE, EXIT_OK, EXIT_STORAGE, build_parser, main
from shared.models import AccountStatus, Role
from modules.approvals.service import ApprovalService
from modules.store.exceptions import StorageQuotaExceededError


def run(container, *argv):
    return main(list(argv), container=container)


@pytest.fixture
def admin_login(container):
    settings = container.settings

    def _login():
        return run(
            container, "login",
            "--email", settings.admin_email,
            "--password", settings.admin_password,
            "--portal", "admin",
        )

    return _login


class TestRegisterAndLogin:
    def test_register_establishes_pending_session(self, container):
        code = run(
            container, "register", "--role", "institute",
            "--name", "Edu", "--email", "edu@x.com", "--password", "pw123",
            "-p", "city=Pune",
        )

        assert code == EXIT_OK
        current = container.sessions.current()
        assert current.status == AccountStatus.PENDING
        assert current.profile == {"city": "Pune"}

    def test_duplicate_register_fails(self, container):
        args = ("register", "--name", "S", "--email", "dup@x.com", "--password", "pw123")
        assert run(container, *args) == EXIT_OK
        assert run(container, *args) == EXIT_FAILURE

    def test_pending_login_fails(self, container):
        run(container, "register", "--role", "institute", "--name", "Edu",
            "--email", "edu@x.com", "--password", "pw123")
        run(container, "logout")

        code = run(container, "login", "--email", "edu@x.com", "--password", "pw123",
                   "--portal", "institute")

        assert code == EXIT_FAILURE
        assert container.sessions.current() is None

    def test_logout_clears_session(self, container, admin_login):
        assert admin_login() == EXIT_OK
        assert run(container, "logout") == EXIT_OK
        assert run(container, "whoami") == EXIT_FAILURE


class TestAdminCommands:
    def test_admin_commands_require_admin_session(self, container):
        assert run(container, "pending") == EXIT_FAILURE
        assert run(container, "stats") == EXIT_FAILURE
        assert run(container, "approve", "inst_x") == EXIT_FAILURE

    def test_non_admin_session_is_refused(self, container):
        run(container, "register", "--name", "S", "--email", "s@x.com", "--password", "pw123")
        assert run(container, "pending") == EXIT_FAILURE

    def test_approve_flow(self, container, admin_login):
        """Register, approve as admin, then log in as the institute."""
        run(container, "register", "--role", "institute", "--name", "Edu",
            "--email", "edu@x.com", "--password", "pw123")
        institute = container.accounts.find_by_email("edu@x.com")

        assert admin_login() == EXIT_OK
        assert run(container, "pending") == EXIT_OK
        assert run(container, "approve", institute.id, "--notes", "ok") == EXIT_OK
        assert run(container, "stats") == EXIT_OK

        code = run(container, "login", "--email", "edu@x.com", "--password", "pw123",
                   "--portal", "institute")
        assert code == EXIT_OK
        assert container.sessions.current().status == AccountStatus.APPROVED

    def test_reject_requires_reason_flag(self, container):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["reject", "inst_x"])

    def test_reject_blank_reason_fails(self, container, admin_login):
        run(container, "register", "--role", "institute", "--name", "Edu",
            "--email", "edu@x.com", "--password", "pw123")
        institute = container.accounts.find_by_email("edu@x.com")
        admin_login()

        assert run(container, "reject", institute.id, "--reason", " ") == EXIT_FAILURE
        assert container.accounts.get_account(institute.id).status == AccountStatus.PENDING


class TestCheck:
    def test_anonymous_check_redirects(self, container):
        assert run(container, "check", "/admin/dashboard", "--role", "admin") == EXIT_FAILURE

    def test_pending_institute_check(self, container):
        run(container, "register", "--role", "institute", "--name", "Edu",
            "--email", "edu@x.com", "--password", "pw123")

        assert run(container, "check", "/institute/dashboard", "--role", "institute") == EXIT_OK
        assert run(
            container, "check", "/institute/dashboard",
            "--role", "institute", "--require-approval",
        ) == EXIT_FAILURE


class TestWaitApproval:
    def test_not_logged_in(self, container):
        assert run(container, "wait-approval") == EXIT_FAILURE

    def test_already_approved(self, container, admin_login):
        assert admin_login() == EXIT_OK
        assert run(container, "wait-approval") == EXIT_OK

    def test_already_rejected_prints_reason(self, container, capsys):
        run(container, "register", "--role", "institute", "--name", "Edu",
            "--email", "edu@x.com", "--password", "pw123")
        institute = container.accounts.find_by_email("edu@x.com")
        container.approvals.reject(institute.id, reason="incomplete documents")
        capsys.readouterr()

        assert run(container, "wait-approval", "--interval", "0.01") == EXIT_FAILURE
        out = capsys.readouterr().out
        assert "Application rejected" in out
        assert "incomplete documents" in out

    def test_rejected_while_waiting_prints_reason(self, container, capsys):
        """A rejection seen by the poll ends the wait instead of hanging."""
        run(container, "register", "--role", "institute", "--name", "Edu",
            "--email", "edu@x.com", "--password", "pw123")
        institute = container.accounts.find_by_email("edu@x.com")
        sessions = container.sessions
        refresh = sessions.refresh
        calls = []

        def refresh_then_reject():
            result = refresh()
            if not calls:
                calls.append(result)
                ApprovalService(container.account_repository).reject(
                    institute.id, reason="incomplete documents"
                )
            return result

        capsys.readouterr()
        with patch.object(sessions, "refresh", side_effect=refresh_then_reject):
            code = run(container, "wait-approval", "--interval", "0.01")

        assert code == EXIT_FAILURE
        assert calls == [False]
        assert sessions.current().status == AccountStatus.REJECTED
        out = capsys.readouterr().out
        assert "Application rejected" in out
        assert "incomplete documents" in out


class TestStorageFailure:
    def test_storage_failure_exit_code(self, container, store):
        container.accounts
        with patch.object(
            store, "_write_raw", side_effect=StorageQuotaExceededError("users", 10, 1)
        ):
            code = run(container, "register", "--name", "S", "--email", "s@x.com",
                       "--password", "pw123")

        assert code == EXIT_STORAGE
        assert container.accounts.find_by_email("s@x.com") is None


class TestContainer:
    def test_services_are_cached(self, container):
        assert container.accounts is container.accounts
        assert container.sessions is container.sessions
        assert container.approvals is container.approvals

    def test_admin_seeded_on_first_use(self, container):
        admin = container.accounts.find_by_email(container.settings.admin_email)
        assert admin.role == Role.ADMIN

    def test_reset_gives_fresh_services(self, container):
        sessions = container.sessions
        container.reset()
        assert container.sessions is not sessions
