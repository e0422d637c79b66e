"""Tests for bcrypt password hashing."""

from modules.accounts.passwords import dummy_hash, hash_password, verify_password


class TestPasswords:
    def test_hash_verifies(self):
        hashed = hash_password("pw123", rounds=4)
        assert hashed.startswith("$2")
        assert verify_password("pw123", hashed) is True
        assert verify_password("pw124", hashed) is False

    def test_hashes_are_salted(self):
        assert hash_password("pw123", rounds=4) != hash_password("pw123", rounds=4)

    def test_malformed_hash_is_mismatch(self):
        """A stored value that is not a bcrypt hash never matches."""
        assert verify_password("pw123", "pw123") is False

    def test_long_passwords_are_truncated_consistently(self):
        long_password = "x" * 100
        hashed = hash_password(long_password, rounds=4)
        assert verify_password(long_password, hashed) is True

    def test_dummy_hash_is_cached(self):
        assert dummy_hash(4) is dummy_hash(4)
        assert verify_password("anything", dummy_hash(4)) is False
