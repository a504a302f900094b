"""Order routes."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from core.container import container
from models.common import CamelModel, to_wire
from models.orders import OrderCreate, OrderStatus, OrderUpdate
from services.listing import ALL, DEFAULT_PER_PAGE, list_orders
from services.orders import OrderService

router = APIRouter(prefix="/api/orders", tags=["orders"])


class StatusRequest(CamelModel):
    status: OrderStatus


class TrackingRequest(CamelModel):
    tracking_number: str


class NoteRequest(CamelModel):
    text: str
    created_by: str = ""


class RefundRequest(CamelModel):
    amount: Optional[float] = None


def orders_service() -> OrderService:
    return container.order_service()


@router.get("")
async def get_orders(
    search: str = "",
    status: str = ALL,
    sort: Optional[str] = None,
    page: int = Query(1, ge=1),
    per_page: int = Query(DEFAULT_PER_PAGE, ge=1, le=100),
    orders: OrderService = Depends(orders_service)
):
    result = list_orders(await orders.get_all(), search, status, sort, page, per_page)
    return {"success": True, **result.to_wire()}


@router.get("/user/{user_id}")
async def get_user_orders(user_id: str, orders: OrderService = Depends(orders_service)):
    return {"success": True, "orders": to_wire(await orders.get_by_user(user_id))}


@router.get("/status/{status}")
async def get_orders_by_status(status: OrderStatus, orders: OrderService = Depends(orders_service)):
    return {"success": True, "orders": to_wire(await orders.get_by_status(status))}


@router.get("/{order_id}")
async def get_order(order_id: str, orders: OrderService = Depends(orders_service)):
    order = await orders.get_by_id(order_id)
    if order is None:
        raise HTTPException(status_code=404, detail=f"Order {order_id} not found")
    return {"success": True, "order": to_wire(order)}


@router.post("", status_code=201)
async def create_order(request: OrderCreate, orders: OrderService = Depends(orders_service)):
    """Checkout: write the order, then decrement product stock."""
    order_id = await orders.create(request.to_document())
    return {"success": True, "id": order_id}


@router.patch("/{order_id}")
async def update_order(order_id: str, request: OrderUpdate, orders: OrderService = Depends(orders_service)):
    await orders.update(order_id, request.to_document())
    return {"success": True}


@router.put("/{order_id}/status")
async def update_status(order_id: str, request: StatusRequest, orders: OrderService = Depends(orders_service)):
    await orders.update_status(order_id, request.status)
    return {"success": True}


@router.put("/{order_id}/tracking")
async def update_tracking(order_id: str, request: TrackingRequest, orders: OrderService = Depends(orders_service)):
    await orders.update_tracking_number(order_id, request.tracking_number)
    return {"success": True}


@router.post("/{order_id}/notes", status_code=201)
async def add_note(order_id: str, request: NoteRequest, orders: OrderService = Depends(orders_service)):
    note = await orders.add_note(order_id, request.text, request.created_by)
    return {"success": True, "note": note}


@router.post("/{order_id}/refund")
async def refund(order_id: str, request: RefundRequest, orders: OrderService = Depends(orders_service)):
    amount = await orders.process_refund(order_id, request.amount)
    return {"success": True, "refundAmount": amount}
