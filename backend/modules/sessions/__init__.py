"""
Sessions module.

Tracks the single active identity, persists it across restarts and
polls for approval of pending accounts.

Public API:
- ISessionManager: Interface for session operations
- SessionManager: Store-backed implementation
- ApprovalPoller: Cancellable approval-status poll
- SessionSnapshot: Decoded persisted session
"""

from .interfaces import ISessionManager
from .models import SessionSnapshot
from .exceptions import InvalidSessionTokenError, ExpiredSessionError
from .poller import ApprovalPoller
from .service import SessionManager, SESSION_KEY
from .tokens import encode_snapshot, decode_snapshot

__all__ = [
    # Interface
    "ISessionManager",
    # Models
    "SessionSnapshot",
    # Exceptions
    "InvalidSessionTokenError",
    "ExpiredSessionError",
    # Service
    "ApprovalPoller",
    "SessionManager",
    "SESSION_KEY",
    "encode_snapshot",
    "decode_snapshot",
]
