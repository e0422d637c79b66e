"""
Access module.

Pure route-guard decisions over the active identity.

Public API:
- decide: Allow / Redirect / Deny for a role-guarded view
- decide_public: Redirect authenticated identities away from login pages
- Decision, DecisionKind, RoutePaths
"""

from .gate import (
    ROLE_PRIORITY,
    decide,
    decide_public,
    is_admin_path,
    is_institute_path,
    landing_path_for,
    login_path_for,
    status_path,
)
from .models import DEFAULT_PATHS, Decision, DecisionKind, RoutePaths

__all__ = [
    # Gate
    "ROLE_PRIORITY",
    "decide",
    "decide_public",
    "is_admin_path",
    "is_institute_path",
    "landing_path_for",
    "login_path_for",
    "status_path",
    # Models
    "DEFAULT_PATHS",
    "Decision",
    "DecisionKind",
    "RoutePaths",
]
