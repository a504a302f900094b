"""Invitation service: single-use tokens that grant a role when accepted."""

import secrets
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from core.document_store import DESCENDING, SERVER_TIMESTAMP, DocumentStore, query
from core.exceptions import ConflictError, DocumentNotFoundError, InvitationError
from core.logging import get_logger
from models.invitations import Invitation
from services.base import CachedCollectionService

logger = get_logger(__name__)

DEFAULT_EXPIRY_DAYS = 7


def new_token() -> str:
    return secrets.token_urlsafe(24)


class InvitationService(CachedCollectionService[Invitation]):
    collection = "invitations"
    entity = Invitation

    def __init__(self, store: DocumentStore, expiry_days: int = DEFAULT_EXPIRY_DAYS, **kwargs):
        super().__init__(store, **kwargs)
        self.expiry_days = expiry_days

    def _now(self) -> datetime:
        return datetime.fromtimestamp(self.clock() / 1000, tz=timezone.utc)

    def _expiry(self) -> datetime:
        return self._now() + timedelta(days=self.expiry_days)

    async def get_pending(self) -> List[Invitation]:
        q = query(self.collection).where("status", "==", "pending").order_by("createdAt", DESCENDING)
        return await self._query(q)

    async def get_by_token(self, token: str) -> Optional[Invitation]:
        found = await self._query(query(self.collection).where("token", "==", token).limit(1))
        return found[0] if found else None

    async def create(self, email: str, role: str, invited_by: str) -> str:
        """Create a pending invitation. Only one pending invitation per email."""
        try:
            existing = await self.store.list(
                query(self.collection).where("email", "==", email).where("status", "==", "pending"))
            if existing:
                raise ConflictError("There is already a pending invitation for this email")
        except Exception as e:
            logger.error("Invitation create failed", email=email, error=str(e))
            raise

        return await super().create({
            "email": email,
            "role": role,
            "token": new_token(),
            "status": "pending",
            "invitedBy": invited_by,
            "createdAt": SERVER_TIMESTAMP,
            "expiresAt": self._expiry(),
        })

    async def accept(self, token: str, user_id: str) -> bool:
        """Accept a pending invitation and grant its role to ``user_id``.

        An invitation past its expiry is marked expired and rejected.
        """
        try:
            invitation = await self.get_by_token(token)
            if invitation is None:
                raise InvitationError("Invitation not found")
            if invitation.status != "pending":
                raise InvitationError("Invitation is no longer valid")
        except Exception as e:
            logger.error("Invitation accept failed", error=str(e))
            raise

        if invitation.is_expired(self._now()):
            await super().update(invitation.id, {"status": "expired", "updatedAt": SERVER_TIMESTAMP})
            logger.warning("Invitation expired", invitation_id=invitation.id)
            raise InvitationError("Invitation has expired")

        await super().update(invitation.id, {
            "status": "accepted",
            "acceptedAt": SERVER_TIMESTAMP,
            "updatedAt": SERVER_TIMESTAMP,
        })
        try:
            await self.store.update("users", user_id, {"role": invitation.role, "updatedAt": SERVER_TIMESTAMP})
        except Exception as e:
            logger.error("Granting invited role failed", user_id=user_id, error=str(e))
            raise
        logger.info("Invitation accepted", invitation_id=invitation.id, user_id=user_id, role=invitation.role)
        return True

    async def resend(self, invitation_id: str) -> str:
        """Issue a new token and expiry and return the invitation to pending."""
        try:
            if await self.store.get(self.collection, invitation_id) is None:
                raise DocumentNotFoundError(self.collection, invitation_id)
        except Exception as e:
            logger.error("Invitation resend failed", invitation_id=invitation_id, error=str(e))
            raise
        token = new_token()
        await super().update(invitation_id, {
            "token": token,
            "status": "pending",
            "expiresAt": self._expiry(),
            "updatedAt": SERVER_TIMESTAMP,
        })
        return token

    async def cancel(self, invitation_id: str) -> None:
        await super().delete(invitation_id)
