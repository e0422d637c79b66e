"""
Sessions module exceptions.

Raised while decoding a persisted session token. rehydrate() catches
these and starts with an empty session instead.
"""

from shared.exceptions import AuthenticationError


class InvalidSessionTokenError(AuthenticationError):
    """Raised when a persisted session token is malformed or tampered with."""

    def __init__(self, message: str = "Invalid session token"):
        super().__init__(message, code="INVALID_SESSION")


class ExpiredSessionError(AuthenticationError):
    """Raised when a persisted session token has expired."""

    def __init__(self, message: str = "Session has expired"):
        super().__init__(message, code="SESSION_EXPIRED")
