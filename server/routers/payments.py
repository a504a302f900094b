"""Payment provider and payment method routes.

Stored credentials are never returned in full; responses carry the masked view.
"""

from fastapi import APIRouter, Depends, HTTPException

from core.container import container
from models.common import CamelModel, to_wire
from models.payments import PaymentMethodCreate, PaymentMethodUpdate
from services.payments import PaymentService

router = APIRouter(prefix="/api/payments", tags=["payments"])


class ToggleRequest(CamelModel):
    is_active: bool


def payments_service() -> PaymentService:
    return container.payment_service()


@router.get("/providers")
async def get_providers(payments: PaymentService = Depends(payments_service)):
    return {"success": True, "providers": to_wire(payments.get_providers())}


@router.get("/methods")
async def get_methods(payments: PaymentService = Depends(payments_service)):
    methods = await payments.get_all()
    return {"success": True, "methods": [m.public_view() for m in methods]}


@router.get("/methods/{method_id}")
async def get_method(method_id: str, payments: PaymentService = Depends(payments_service)):
    method = await payments.get_by_id(method_id)
    if method is None:
        raise HTTPException(status_code=404, detail=f"Payment method {method_id} not found")
    return {"success": True, "method": method.public_view()}


@router.post("/methods", status_code=201)
async def create_method(request: PaymentMethodCreate, payments: PaymentService = Depends(payments_service)):
    method_id = await payments.create(request.to_document())
    return {"success": True, "id": method_id}


@router.patch("/methods/{method_id}")
async def update_method(
    method_id: str,
    request: PaymentMethodUpdate,
    payments: PaymentService = Depends(payments_service)
):
    await payments.update(method_id, request.to_document())
    return {"success": True}


@router.put("/methods/{method_id}/active")
async def toggle_method(method_id: str, request: ToggleRequest, payments: PaymentService = Depends(payments_service)):
    await payments.toggle(method_id, request.is_active)
    return {"success": True}


@router.delete("/methods/{method_id}")
async def delete_method(method_id: str, payments: PaymentService = Depends(payments_service)):
    await payments.delete(method_id)
    return {"success": True}
