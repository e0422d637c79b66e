"""Tests for shared/config.py."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from shared.config import Settings, get_settings


class TestSettings:
    def test_default_values(self):
        """Settings should have sensible defaults."""
        settings = Settings(_env_file=None)
        assert settings.app_name == "EduList"
        assert settings.debug is False
        assert settings.store_backend == "file"
        assert settings.data_dir == Path(".edulist")
        assert settings.bcrypt_rounds == 12
        assert settings.email_case_sensitive is True
        assert settings.auto_approve_users is False
        assert settings.approval_poll_interval == 30.0

    def test_default_route_paths(self):
        settings = Settings(_env_file=None)
        assert settings.admin_login_path == "/admin/login"
        assert settings.institute_login_path == "/institute/login"
        assert settings.pending_approval_path == "/institute/pending-approval"
        assert settings.user_pending_approval_path == "/user/pending-approval"
        assert settings.rejected_path == "/institute/application-rejected"

    def test_loads_from_env(self):
        """Settings should load prefixed environment variables."""
        with patch.dict(os.environ, {
            "EDULIST_DEBUG": "true",
            "EDULIST_STORE_BACKEND": "memory",
            "EDULIST_BCRYPT_ROUNDS": "5",
        }):
            settings = Settings(_env_file=None)
            assert settings.debug is True
            assert settings.store_backend == "memory"
            assert settings.bcrypt_rounds == 5

    def test_ignores_unprefixed_env(self):
        with patch.dict(os.environ, {"DEBUG": "true"}):
            settings = Settings(_env_file=None)
            assert settings.debug is False

    def test_rejects_low_bcrypt_cost(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, bcrypt_rounds=2)

    def test_rejects_unknown_backend(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, store_backend="sqlite")


class TestGetSettings:
    def test_returns_cached_instance(self):
        """get_settings should return the same instance."""
        assert get_settings() is get_settings()
