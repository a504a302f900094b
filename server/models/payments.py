"""Payment method configuration and the supported provider catalogue."""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from models.common import CamelModel, EntityModel

PaymentMode = Literal["test", "live"]


class PaymentProvider(CamelModel):
    id: str
    name: str
    logo: str
    description: str
    supported_currencies: List[str]
    documentation_url: str


PAYMENT_PROVIDERS: List[PaymentProvider] = [
    PaymentProvider(
        id="stripe",
        name="Stripe",
        logo="https://upload.wikimedia.org/wikipedia/commons/b/ba/Stripe_Logo%2C_revised_2016.svg",
        description="Global payment processor with support for credit cards, wallets, and local payment methods.",
        supported_currencies=["USD", "EUR", "GBP", "AUD", "CAD", "JPY"],
        documentation_url="https://stripe.com/docs",
    ),
    PaymentProvider(
        id="paypal",
        name="PayPal",
        logo="https://upload.wikimedia.org/wikipedia/commons/a/a4/Paypal_2014_logo.png",
        description="Online payment system supporting transfers and payments.",
        supported_currencies=["USD", "EUR", "GBP", "AUD", "CAD", "JPY"],
        documentation_url="https://developer.paypal.com/docs",
    ),
    PaymentProvider(
        id="square",
        name="Square",
        logo="https://upload.wikimedia.org/wikipedia/commons/e/e2/Square_Logo.svg",
        description="Payment processor with POS integration.",
        supported_currencies=["USD", "CAD", "GBP", "AUD", "JPY"],
        documentation_url="https://developer.squareup.com/docs",
    ),
    PaymentProvider(
        id="bank-transfer",
        name="Bank Transfer",
        logo="https://cdn-icons-png.flaticon.com/512/2830/2830284.png",
        description="Direct bank transfer payment method.",
        supported_currencies=["USD", "EUR", "GBP", "AUD", "CAD", "JPY"],
        documentation_url="#",
    ),
]


def mask_secret(value: Optional[str]) -> Optional[str]:
    """Keep the last four characters of a credential visible."""
    if not value:
        return value
    if len(value) <= 4:
        return "*" * len(value)
    return "*" * (len(value) - 4) + value[-4:]


class PaymentMethod(EntityModel):
    name: str = ""
    provider: str = ""
    is_active: bool = False
    api_key: Optional[str] = None
    secret_key: Optional[str] = None
    mode: PaymentMode = "test"
    supported_currencies: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def public_view(self) -> Dict[str, Any]:
        data = self.model_dump(by_alias=True, mode="json")
        data["apiKey"] = mask_secret(self.api_key)
        data["secretKey"] = mask_secret(self.secret_key)
        return data


class PaymentMethodCreate(CamelModel):
    name: str
    provider: str
    mode: PaymentMode = "test"
    api_key: Optional[str] = None
    secret_key: Optional[str] = None
    supported_currencies: Optional[List[str]] = None
    is_active: bool = True

    def to_document(self):
        return self.model_dump(by_alias=True, exclude_none=True)


class PaymentMethodUpdate(CamelModel):
    name: Optional[str] = None
    mode: Optional[PaymentMode] = None
    api_key: Optional[str] = None
    secret_key: Optional[str] = None
    supported_currencies: Optional[List[str]] = None
    is_active: Optional[bool] = None
