"""
Sessions module data models.
"""

from datetime import datetime
from pydantic import BaseModel, Field

from shared.models import Identity


class SessionSnapshot(BaseModel):
    """
    Decoded contents of the persisted session token.

    The token is what survives a restart; this is its parsed form.
    """

    identity: Identity = Field(..., description="Sanitized identity of the active account")
    issued_at: datetime = Field(..., description="When the session was established")
    expires_at: datetime = Field(..., description="When the snapshot stops being accepted")

    model_config = {"frozen": True}
