"""Password hashing with bcrypt."""

import logging
from functools import lru_cache

import bcrypt

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes
_MAX_PASSWORD_BYTES = 72


def _to_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_MAX_PASSWORD_BYTES]


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a password with a fresh salt.

    Args:
        password: Plain text password.
        rounds: bcrypt cost factor.

    Returns:
        bcrypt hash string.
    """
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_to_bytes(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a bcrypt hash.

    A malformed hash counts as a mismatch.
    """
    try:
        return bcrypt.checkpw(_to_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


@lru_cache(maxsize=8)
def dummy_hash(rounds: int = 12) -> str:
    """Hash compared against when no account matches, to keep failures uniform."""
    return hash_password("edulist-no-such-account", rounds)
