"""
Signed session snapshots.

The active identity is persisted as an HS256 JWT so that a snapshot that
was edited, truncated or has outlived its TTL is rejected on rehydrate.
"""

from datetime import datetime, timedelta, timezone

import jwt
from pydantic import ValidationError as PydanticValidationError

from shared.models import Identity

from .exceptions import ExpiredSessionError, InvalidSessionTokenError
from .models import SessionSnapshot

ALGORITHM = "HS256"


def encode_snapshot(identity: Identity, secret: str, ttl: timedelta) -> str:
    """
    Serialize an identity into a signed session token.

    Args:
        identity: Sanitized identity to persist
        secret: Signing key
        ttl: How long the snapshot stays valid

    Returns:
        Encoded JWT string
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": identity.id,
        "role": identity.role.value,
        "identity": identity.model_dump(mode="json"),
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def decode_snapshot(token: object, secret: str) -> SessionSnapshot:
    """
    Verify and parse a session token.

    Raises:
        ExpiredSessionError: If the token is past its expiry
        InvalidSessionTokenError: If the token is not a valid, well-formed snapshot
    """
    if not isinstance(token, str) or not token:
        raise InvalidSessionTokenError("Session snapshot is not a token")

    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise ExpiredSessionError()
    except jwt.InvalidTokenError as e:
        raise InvalidSessionTokenError(str(e))

    try:
        identity = Identity.model_validate(payload["identity"])
        if identity.id != payload["sub"]:
            raise InvalidSessionTokenError("Session subject does not match identity")
        return SessionSnapshot(
            identity=identity,
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (KeyError, TypeError, PydanticValidationError) as e:
        raise InvalidSessionTokenError(f"Malformed session snapshot: {e}")
