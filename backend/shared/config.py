"""
Centralized configuration for the EduList backend.

All settings are loaded from environment variables with sensible defaults.
Every variable is prefixed with EDULIST_ (e.g., EDULIST_DATA_DIR).
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EDULIST_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "EduList"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Record store
    store_backend: Literal["memory", "file"] = "file"
    data_dir: Path = Path(".edulist")
    store_quota_bytes: int = Field(default=5 * 1024 * 1024, ge=1)

    # Credentials
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)
    email_case_sensitive: bool = True

    # Sessions
    session_secret: str = "edulist-dev-session-secret-change-me"
    session_ttl_hours: int = Field(default=24 * 7, ge=1)
    approval_poll_interval: float = Field(default=30.0, gt=0)

    # Registration
    auto_approve_users: bool = False

    # Singleton admin record, seeded when the store holds none
    admin_email: str = "admin@edulist.com"
    admin_password: str = "admin123"
    admin_name: str = "System Administrator"

    # Navigation targets used by the access gate
    login_path: str = "/login"
    admin_login_path: str = "/admin/login"
    institute_login_path: str = "/institute/login"
    unauthorized_path: str = "/unauthorized"
    pending_approval_path: str = "/institute/pending-approval"
    rejected_path: str = "/institute/application-rejected"
    user_pending_approval_path: str = "/user/pending-approval"
    institute_home_path: str = "/institute/dashboard"
    admin_home_path: str = "/admin/dashboard"
    user_home_path: str = "/dashboard"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
