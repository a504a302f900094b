"""Customer and admin user schemas.

Both live in the ``users`` collection and are told apart by ``role``.
"""

from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import BeforeValidator, Field, field_validator

from models.common import Address, CamelModel, EntityModel, Note, parse_money

ADMIN_ROLE = "admin"
CUSTOMER_ROLE = "customer"

CustomerStatus = Literal["active", "suspended", "banned"]


class Customer(EntityModel):
    email: str = ""
    display_name: str = ""
    name: str = ""
    phone: Optional[str] = None
    addresses: List[Address] = Field(default_factory=list)
    default_address: Optional[Address] = None
    total_orders: int = 0
    total_spent: Annotated[float, BeforeValidator(parse_money)] = 0.0
    role: str = CUSTOMER_ROLE
    status: CustomerStatus = "active"
    notes: List[Note] = Field(default_factory=list)
    subscribed_to_newsletter: bool = False
    is_high_value: bool = False
    is_recent_customer: bool = False
    last_order_date: Optional[datetime] = None
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "Customer":
        customer = super().from_document(doc_id, data)
        if not customer.name:
            customer.name = customer.display_name
        return customer

    @field_validator("display_name", "name", "email", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return v or ""

    @field_validator("total_orders", mode="before")
    @classmethod
    def none_to_zero(cls, v):
        return v or 0

    @field_validator("role", mode="before")
    @classmethod
    def default_role(cls, v):
        return v or CUSTOMER_ROLE

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v):
        return v or "active"

    @field_validator("addresses", "notes", mode="before")
    @classmethod
    def none_to_list(cls, v):
        return v or []

    @property
    def is_active(self) -> bool:
        return self.status == "active"


class CustomerUpdate(CamelModel):
    display_name: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    addresses: Optional[List[Address]] = None
    default_address: Optional[Address] = None
    status: Optional[CustomerStatus] = None
    subscribed_to_newsletter: Optional[bool] = None
    is_high_value: Optional[bool] = None


class AdminUser(EntityModel):
    email: str = ""
    display_name: str = ""
    role: str = ADMIN_ROLE
    permissions: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    created_by: str = ""
    last_login: Optional[datetime] = None

    @field_validator("display_name", "created_by", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return v or ""

    @field_validator("permissions", mode="before")
    @classmethod
    def none_to_list(cls, v):
        return v or []


class AdminUserCreate(CamelModel):
    email: str
    display_name: str = ""
    permissions: Optional[List[str]] = None


class AdminUserUpdate(CamelModel):
    display_name: Optional[str] = None
    permissions: Optional[List[str]] = None
