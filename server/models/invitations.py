"""Invitation schema."""

from datetime import datetime, timezone
from typing import Literal, Optional

from models.common import EntityModel

InvitationStatus = Literal["pending", "accepted", "expired"]


class Invitation(EntityModel):
    email: str = ""
    role: str = ""
    token: str = ""
    status: InvitationStatus = "pending"
    invited_by: str = ""
    created_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    accepted_at: Optional[datetime] = None

    def is_expired(self, now: datetime) -> bool:
        if self.expires_at is None:
            return False
        expires = self.expires_at
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=timezone.utc)
        return now > expires
