"""Tests for the account repository."""

import pytest

from shared.models import AccountStatus, Role
from modules.accounts.exceptions import AccountNotFoundError
from modules.accounts.models import Account
from modules.accounts.repository import AccountRepository


def make_account(account_id: str, email: str, role: Role = Role.USER, **fields) -> Account:
    status = None if role == Role.ADMIN else fields.pop("status", AccountStatus.PENDING)
    return Account(
        id=account_id,
        email=email,
        password_hash="$2b$04$notarealhash",
        role=role,
        status=status,
        **fields,
    )


class TestAccountRepository:
    @pytest.fixture
    def repo(self, store):
        return AccountRepository(store)

    def test_accounts_go_to_role_collection(self, repo, store):
        repo.add(make_account("u1", "u@x.com", Role.USER))
        repo.add(make_account("i1", "i@x.com", Role.INSTITUTE))
        repo.add(make_account("admin", "a@x.com", Role.ADMIN))

        assert [a["id"] for a in store.load("users")] == ["u1"]
        assert [a["id"] for a in store.load("institutes")] == ["i1"]
        assert store.load("admin")["id"] == "admin"

    def test_lookup_order_is_users_institutes_admin(self, repo):
        repo.add(make_account("admin", "a@x.com", Role.ADMIN))
        repo.add(make_account("i1", "i@x.com", Role.INSTITUTE))
        repo.add(make_account("u1", "u@x.com", Role.USER))

        assert [a.id for a in repo.list_all()] == ["u1", "i1", "admin"]

    def test_find_by_email(self, repo):
        repo.add(make_account("i1", "edu@x.com", Role.INSTITUTE))

        assert repo.find_by_email("edu@x.com").id == "i1"
        assert repo.find_by_email("EDU@x.com") is None

    def test_find_by_email_case_insensitive(self, store):
        repo = AccountRepository(store, email_case_sensitive=False)
        repo.add(make_account("i1", "edu@x.com", Role.INSTITUTE))

        assert repo.find_by_email("EDU@X.COM").id == "i1"

    def test_get_across_collections(self, repo):
        repo.add(make_account("u1", "u@x.com", Role.USER))
        repo.add(make_account("admin", "a@x.com", Role.ADMIN))

        assert repo.get("u1").role == Role.USER
        assert repo.get("admin").role == Role.ADMIN
        assert repo.get("missing") is None

    def test_list_all_filters(self, repo):
        repo.add(make_account("u1", "u1@x.com", Role.USER))
        repo.add(make_account("u2", "u2@x.com", Role.USER, status=AccountStatus.APPROVED))
        repo.add(make_account("i1", "i1@x.com", Role.INSTITUTE))

        assert [a.id for a in repo.list_all(status=AccountStatus.PENDING)] == ["u1", "i1"]
        assert [a.id for a in repo.list_all(role=Role.USER, status=AccountStatus.APPROVED)] == ["u2"]

    def test_update_replaces_in_place(self, repo):
        repo.add(make_account("u1", "u1@x.com"))
        repo.add(make_account("u2", "u2@x.com"))

        repo.update(repo.get("u1").model_copy(update={"name": "Renamed"}))

        assert [a.id for a in repo.list_by_role(Role.USER)] == ["u1", "u2"]
        assert repo.get("u1").name == "Renamed"

    def test_update_missing_raises(self, repo):
        with pytest.raises(AccountNotFoundError):
            repo.update(make_account("ghost", "g@x.com"))

    def test_update_missing_admin_raises(self, repo):
        with pytest.raises(AccountNotFoundError):
            repo.update(make_account("admin", "a@x.com", Role.ADMIN))

    def test_admin_record_with_wrong_role_is_ignored(self, repo, store):
        store.save("admin", make_account("u9", "u9@x.com").model_dump(mode="json"))

        assert repo.get_admin() is None

    def test_malformed_records_are_skipped(self, repo, store):
        repo.add(make_account("u1", "u1@x.com"))
        store.save("users", store.load("users") + [{"id": "broken"}])

        assert [a.id for a in repo.list_by_role(Role.USER)] == ["u1"]

    def test_add_keeps_unreadable_records(self, repo, store):
        legacy = {"id": "legacy", "email": "old@x.com"}
        store.save("institutes", [legacy])

        repo.add(make_account("i1", "new@x.com", Role.INSTITUTE))

        stored = store.load("institutes")
        assert [a["id"] for a in stored] == ["i1", "legacy"]
        assert stored[1] == legacy

    def test_update_keeps_unreadable_records(self, repo, store):
        account = repo.add(make_account("u1", "u1@x.com"))
        store.save("users", store.load("users") + [{"id": "broken"}])

        repo.update(account.model_copy(update={"name": "Renamed"}))

        assert store.load("users")[1] == {"id": "broken"}
        assert repo.get("u1").name == "Renamed"

    def test_email_in_use_counts_unreadable_records(self, repo, store):
        store.save("institutes", [{"id": "legacy", "email": "old@x.com"}, "junk"])

        assert repo.email_in_use("old@x.com") is True
        assert repo.email_in_use("free@x.com") is False
