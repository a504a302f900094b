"""Order schemas."""

from datetime import datetime, timezone
from typing import Annotated, Any, List, Literal, Optional

from pydantic import BeforeValidator, Field, field_validator

from models.common import Address, CamelModel, EntityModel, Note, parse_money

Money = Annotated[float, BeforeValidator(parse_money)]

OrderStatus = Literal["pending", "processing", "shipped", "delivered", "cancelled", "refunded", "completed"]
PaymentStatus = Literal["pending", "paid", "failed", "refunded"]

ORDER_STATUSES = ("pending", "processing", "shipped", "delivered", "cancelled", "refunded", "completed")


class OrderItem(CamelModel):
    product_id: str = ""
    title: str = ""
    price: Money = 0.0
    quantity: int = 1
    size: Optional[str] = None
    color: Optional[str] = None
    image: Optional[str] = None

    @field_validator("quantity", mode="before")
    @classmethod
    def default_quantity(cls, v):
        return v or 1

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


def _notes_list(value: Any) -> Any:
    # Older documents stored a single free-text note
    if isinstance(value, str):
        return [{"id": "note-0", "text": value}] if value else []
    return value or []


class Order(EntityModel):
    user_id: str = ""
    customer_name: str = ""
    customer_email: str = ""
    customer_phone: Optional[str] = None
    items: List[OrderItem] = Field(default_factory=list)
    subtotal: Money = 0.0
    tax: Money = 0.0
    shipping: Money = 0.0
    total: Money = 0.0
    discount: Optional[Money] = None
    status: OrderStatus = "pending"
    payment_method: str = ""
    payment_status: PaymentStatus = "pending"
    shipping_address: Optional[Address] = None
    billing_address: Optional[Address] = None
    notes: Annotated[List[Note], BeforeValidator(_notes_list)] = Field(default_factory=list)
    tracking_number: Optional[str] = None
    refund_amount: Optional[Money] = None
    refunded_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("status", "payment_status", mode="before")
    @classmethod
    def default_pending(cls, v):
        return v or "pending"

    @field_validator("created_at", "updated_at", "refunded_at")
    @classmethod
    def assume_utc(cls, v):
        # Timestamps written without an offset are UTC
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)


class OrderCreate(CamelModel):
    user_id: str
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    items: List[OrderItem]
    subtotal: Money
    tax: Money = 0.0
    shipping: Money = 0.0
    total: Money
    discount: Optional[Money] = None
    payment_method: str
    payment_status: PaymentStatus = "pending"
    shipping_address: Address
    billing_address: Optional[Address] = None

    def to_document(self):
        return self.model_dump(by_alias=True, exclude_none=True)


class OrderUpdate(CamelModel):
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = None
    shipping_address: Optional[Address] = None
    billing_address: Optional[Address] = None
    tracking_number: Optional[str] = None
