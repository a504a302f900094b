"""Order service."""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from core.document_store import DESCENDING, SERVER_TIMESTAMP, DocumentStore, format_timestamp, query
from core.exceptions import DocumentNotFoundError
from core.logging import get_logger
from models.orders import Order
from services.base import CachedCollectionService
from services.products import ProductService

logger = get_logger(__name__)


class OrderService(CachedCollectionService[Order]):
    """Orders, newest first. Status changes follow no transition table."""

    collection = "orders"
    entity = Order

    def __init__(self, store: DocumentStore, products: Optional[ProductService] = None, **kwargs):
        super().__init__(store, **kwargs)
        self.products = products

    async def get_by_user(self, user_id: str) -> List[Order]:
        q = query(self.collection).where("userId", "==", user_id).order_by("createdAt", DESCENDING)
        return await self._query(q)

    async def get_by_status(self, status: str) -> List[Order]:
        q = query(self.collection).where("status", "==", status).order_by("createdAt", DESCENDING)
        return await self._query(q)

    async def create(self, data: Dict[str, Any]) -> str:
        """Write a new order, then decrement stock for each line item.

        The stock updates are separate product writes. A failed decrement is
        logged and does not undo the order.
        """
        document = {
            "status": "pending",
            "paymentStatus": "pending",
            **data,
            "createdAt": SERVER_TIMESTAMP,
            "updatedAt": SERVER_TIMESTAMP,
        }
        order_id = await super().create(document)

        if self.products is not None:
            for item in data.get("items") or []:
                product_id = item.get("productId")
                if not product_id:
                    continue
                try:
                    await self.products.adjust_inventory(product_id, -int(item.get("quantity") or 1))
                except Exception as e:
                    logger.warning("Stock decrement failed", order_id=order_id,
                                   product_id=product_id, error=str(e))
        return order_id

    async def update(self, order_id: str, data: Dict[str, Any]) -> None:
        await super().update(order_id, {**data, "updatedAt": SERVER_TIMESTAMP})

    async def update_status(self, order_id: str, status: str) -> None:
        await self.update(order_id, {"status": status})

    async def update_tracking_number(self, order_id: str, tracking_number: str) -> None:
        await self.update(order_id, {"trackingNumber": tracking_number})

    async def add_note(self, order_id: str, text: str, created_by: str = "") -> Dict[str, Any]:
        """Append a note to the order's note list and return it."""
        order = await self._require(order_id)
        note = {
            "id": uuid.uuid4().hex[:12],
            "text": text,
            "createdAt": format_timestamp(datetime.now(timezone.utc)),
            "createdBy": created_by,
        }
        notes = [n.model_dump(by_alias=True, exclude_none=True) for n in order.notes]
        await self.update(order_id, {"notes": notes + [note]})
        return note

    async def process_refund(self, order_id: str, amount: Optional[float] = None) -> float:
        """Mark the order refunded. The refund amount defaults to the order total."""
        order = await self._require(order_id)
        refund_amount = order.total if amount is None else amount
        await self.update(order_id, {
            "status": "refunded",
            "paymentStatus": "refunded",
            "refundAmount": refund_amount,
            "refundedAt": SERVER_TIMESTAMP,
        })
        return refund_amount

    async def _require(self, order_id: str) -> Order:
        try:
            doc = await self.store.get(self.collection, order_id)
            if doc is None:
                raise DocumentNotFoundError(self.collection, order_id)
            return self.decode(doc)
        except Exception as e:
            logger.error("Order lookup for write failed", order_id=order_id, error=str(e))
            raise
