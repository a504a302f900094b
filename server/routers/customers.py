"""Customer routes."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from core.container import container
from models.common import CamelModel, to_wire
from models.users import CustomerStatus, CustomerUpdate
from services.customers import CustomerService
from services.listing import ALL, DEFAULT_PER_PAGE, list_customers

router = APIRouter(prefix="/api/customers", tags=["customers"])


class CustomerStatusRequest(CamelModel):
    status: CustomerStatus


def customers_service() -> CustomerService:
    return container.customer_service()


@router.get("")
async def get_customers(
    search: str = "",
    status: str = ALL,
    sort: Optional[str] = None,
    page: int = Query(1, ge=1),
    per_page: int = Query(DEFAULT_PER_PAGE, ge=1, le=100),
    customers: CustomerService = Depends(customers_service)
):
    result = list_customers(await customers.get_all(), search, status, sort, page, per_page)
    return {"success": True, **result.to_wire()}


@router.get("/high-value")
async def get_high_value(
    limit: int = Query(10, ge=1, le=100),
    customers: CustomerService = Depends(customers_service)
):
    return {"success": True, "customers": to_wire(await customers.get_high_value(limit))}


@router.get("/recent")
async def get_recent(
    limit: int = Query(10, ge=1, le=100),
    customers: CustomerService = Depends(customers_service)
):
    return {"success": True, "customers": to_wire(await customers.get_recent(limit))}


@router.get("/{customer_id}")
async def get_customer(customer_id: str, customers: CustomerService = Depends(customers_service)):
    customer = await customers.get_by_id(customer_id)
    if customer is None:
        raise HTTPException(status_code=404, detail=f"Customer {customer_id} not found")
    return {"success": True, "customer": to_wire(customer)}


@router.patch("/{customer_id}")
async def update_customer(
    customer_id: str,
    request: CustomerUpdate,
    customers: CustomerService = Depends(customers_service)
):
    await customers.update(customer_id, request.to_document())
    return {"success": True}


@router.put("/{customer_id}/status")
async def update_status(
    customer_id: str,
    request: CustomerStatusRequest,
    customers: CustomerService = Depends(customers_service)
):
    await customers.update_status(customer_id, request.status)
    return {"success": True}
