"""Admin user service over the admin documents of ``users``."""

from typing import Any, Dict, Optional

from core.document_store import SERVER_TIMESTAMP, DocumentStore, Query, query
from core.exceptions import ConflictError
from core.logging import get_logger
from models.users import ADMIN_ROLE, AdminUser
from services.base import CachedCollectionService
from services.invitations import InvitationService

logger = get_logger(__name__)

DEFAULT_PERMISSIONS = ["view"]


class AdminService(CachedCollectionService[AdminUser]):
    collection = "users"
    entity = AdminUser
    order_field = None

    def __init__(self, store: DocumentStore, invitations: InvitationService, **kwargs):
        super().__init__(store, **kwargs)
        self.invitations = invitations

    def default_query(self) -> Query:
        return query(self.collection).where("role", "==", ADMIN_ROLE)

    async def get_by_id(self, user_id: str) -> Optional[AdminUser]:
        admin = await super().get_by_id(user_id)
        if admin is None or admin.role != ADMIN_ROLE:
            return None
        return admin

    async def check_admin_status(self, user_id: str) -> bool:
        """True when the user document exists and carries the admin role. Never raises."""
        try:
            doc = await self.store.get(self.collection, user_id)
        except Exception as e:
            logger.error("Admin status check failed", user_id=user_id, error=str(e))
            return False
        return doc is not None and doc.data.get("role") == ADMIN_ROLE

    async def create(self, data: Dict[str, Any], created_by: str = "") -> str:
        document = {
            **data,
            "role": ADMIN_ROLE,
            "permissions": data.get("permissions") or list(DEFAULT_PERMISSIONS),
            "createdAt": SERVER_TIMESTAMP,
            "createdBy": created_by,
        }
        return await super().create(document)

    async def update(self, user_id: str, data: Dict[str, Any]) -> None:
        await super().update(user_id, {**data, "updatedAt": SERVER_TIMESTAMP})

    async def create_admin_invitation(self, email: str, invited_by: str) -> str:
        """Invite a new admin by email. Rejects emails that already belong to a user."""
        try:
            existing = await self.store.list(query(self.collection).where("email", "==", email).limit(1))
            if existing:
                raise ConflictError("User with this email already exists")
        except Exception as e:
            logger.error("Admin invitation failed", email=email, error=str(e))
            raise
        return await self.invitations.create(email, ADMIN_ROLE, invited_by)

    async def promote(self, user_id: str, email: str, display_name: str) -> None:
        """Write ``user_id`` as an admin, creating or overwriting the user document."""
        await self._mutate("promote", self.store.set(self.collection, user_id, {
            "email": email,
            "displayName": display_name,
            "role": ADMIN_ROLE,
            "permissions": list(DEFAULT_PERMISSIONS),
            "createdAt": SERVER_TIMESTAMP,
        }, merge=True), doc_id=user_id)
