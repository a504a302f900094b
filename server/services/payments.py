"""Payment method configuration."""

from typing import Any, Dict, List, Optional

from core.document_store import SERVER_TIMESTAMP
from core.exceptions import ValidationError
from core.logging import get_logger
from models.payments import PAYMENT_PROVIDERS, PaymentMethod, PaymentProvider
from services.base import CachedCollectionService

logger = get_logger(__name__)


def find_provider(provider_id: str) -> Optional[PaymentProvider]:
    return next((p for p in PAYMENT_PROVIDERS if p.id == provider_id), None)


class PaymentService(CachedCollectionService[PaymentMethod]):
    collection = "paymentMethods"
    entity = PaymentMethod

    def get_providers(self) -> List[PaymentProvider]:
        return list(PAYMENT_PROVIDERS)

    async def create(self, data: Dict[str, Any]) -> str:
        """Add a payment method for a known provider.

        Currencies default to the first three the provider supports.
        """
        provider = find_provider(data.get("provider", ""))
        if provider is None:
            logger.error("Unknown payment provider", provider=data.get("provider"))
            raise ValidationError(f"Unknown payment provider: {data.get('provider')}")
        document = {
            **data,
            "supportedCurrencies": data.get("supportedCurrencies") or provider.supported_currencies[:3],
            "createdAt": SERVER_TIMESTAMP,
            "updatedAt": SERVER_TIMESTAMP,
        }
        return await super().create(document)

    async def update(self, method_id: str, data: Dict[str, Any]) -> None:
        await super().update(method_id, {**data, "updatedAt": SERVER_TIMESTAMP})

    async def toggle(self, method_id: str, is_active: bool) -> None:
        await self.update(method_id, {"isActive": is_active})
