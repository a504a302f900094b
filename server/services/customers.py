"""Customer service over the non-admin documents of ``users``."""

from typing import Any, Dict, List, Optional

from core.document_store import DESCENDING, SERVER_TIMESTAMP, Query, query
from models.users import ADMIN_ROLE, Customer
from services.base import CachedCollectionService


class CustomerService(CachedCollectionService[Customer]):
    """Users whose role is anything but admin (a missing role counts as customer)."""

    collection = "users"
    entity = Customer

    def _customers(self) -> Query:
        return query(self.collection).where("role", "!=", ADMIN_ROLE)

    def default_query(self) -> Query:
        return self._customers().order_by("createdAt", DESCENDING)

    async def get_by_id(self, customer_id: str) -> Optional[Customer]:
        customer = await super().get_by_id(customer_id)
        if customer is None or customer.role == ADMIN_ROLE:
            return None
        return customer

    async def update(self, customer_id: str, data: Dict[str, Any]) -> None:
        await super().update(customer_id, {**data, "updatedAt": SERVER_TIMESTAMP})

    async def update_status(self, customer_id: str, status: str) -> None:
        await self.update(customer_id, {"status": status})

    async def get_high_value(self, limit: int = 10) -> List[Customer]:
        """Top spenders. Spend may be stored as a display string, so rank after decoding."""
        customers = await self._query(self._customers())
        customers.sort(key=lambda c: c.total_spent, reverse=True)
        return customers[:limit]

    async def get_recent(self, limit: int = 10) -> List[Customer]:
        return await self._query(self.default_query().limit(limit))
