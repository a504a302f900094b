"""Admin user and invitation routes."""

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException

from core.container import container
from models.common import CamelModel, to_wire
from models.users import AdminUserCreate, AdminUserUpdate
from services.admins import AdminService
from services.invitations import InvitationService

router = APIRouter(prefix="/api", tags=["admins"])


class AdminInviteRequest(CamelModel):
    email: str
    invited_by: str = ""


class InvitationRequest(CamelModel):
    email: str
    role: Literal["admin", "customer"] = "admin"
    invited_by: str = ""


class AcceptRequest(CamelModel):
    token: str
    user_id: str


def admins_service() -> AdminService:
    return container.admin_service()


def invitations_service() -> InvitationService:
    return container.invitation_service()


# =============================================================================
# Admin users
# =============================================================================

@router.get("/admins")
async def get_admins(admins: AdminService = Depends(admins_service)):
    return {"success": True, "admins": to_wire(await admins.get_all())}


@router.get("/admins/{user_id}/status")
async def check_admin_status(user_id: str, admins: AdminService = Depends(admins_service)):
    return {"success": True, "isAdmin": await admins.check_admin_status(user_id)}


@router.get("/admins/{user_id}")
async def get_admin(user_id: str, admins: AdminService = Depends(admins_service)):
    admin = await admins.get_by_id(user_id)
    if admin is None:
        raise HTTPException(status_code=404, detail=f"Admin {user_id} not found")
    return {"success": True, "admin": to_wire(admin)}


@router.post("/admins", status_code=201)
async def create_admin(
    request: AdminUserCreate,
    created_by: str = "",
    admins: AdminService = Depends(admins_service)
):
    user_id = await admins.create(request.to_document(), created_by=created_by)
    return {"success": True, "id": user_id}


@router.patch("/admins/{user_id}")
async def update_admin(user_id: str, request: AdminUserUpdate, admins: AdminService = Depends(admins_service)):
    await admins.update(user_id, request.to_document())
    return {"success": True}


@router.delete("/admins/{user_id}")
async def delete_admin(user_id: str, admins: AdminService = Depends(admins_service)):
    await admins.delete(user_id)
    return {"success": True}


@router.post("/admins/invite", status_code=201)
async def invite_admin(request: AdminInviteRequest, admins: AdminService = Depends(admins_service)):
    invitation_id = await admins.create_admin_invitation(request.email, request.invited_by)
    return {"success": True, "id": invitation_id}


# =============================================================================
# Invitations
# =============================================================================

@router.get("/invitations")
async def get_pending(invitations: InvitationService = Depends(invitations_service)):
    return {"success": True, "invitations": to_wire(await invitations.get_pending())}


@router.get("/invitations/token/{token}")
async def get_by_token(token: str, invitations: InvitationService = Depends(invitations_service)):
    invitation = await invitations.get_by_token(token)
    if invitation is None:
        raise HTTPException(status_code=404, detail="Invitation not found")
    return {"success": True, "invitation": to_wire(invitation)}


@router.post("/invitations", status_code=201)
async def create_invitation(
    request: InvitationRequest,
    invitations: InvitationService = Depends(invitations_service)
):
    invitation_id = await invitations.create(request.email, request.role, request.invited_by)
    return {"success": True, "id": invitation_id}


@router.post("/invitations/accept")
async def accept_invitation(request: AcceptRequest, invitations: InvitationService = Depends(invitations_service)):
    await invitations.accept(request.token, request.user_id)
    return {"success": True}


@router.post("/invitations/{invitation_id}/resend")
async def resend_invitation(invitation_id: str, invitations: InvitationService = Depends(invitations_service)):
    token = await invitations.resend(invitation_id)
    return {"success": True, "token": token}


@router.delete("/invitations/{invitation_id}")
async def cancel_invitation(invitation_id: str, invitations: InvitationService = Depends(invitations_service)):
    await invitations.cancel(invitation_id)
    return {"success": True}
