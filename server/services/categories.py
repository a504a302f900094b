"""Category service."""

from typing import Any, Dict, List, Optional, Union

from core.document_store import ASCENDING, query
from core.logging import get_logger
from models.catalog import Category
from services.base import CachedCollectionService

logger = get_logger(__name__)

_PLACEHOLDER = "https://via.placeholder.com/800x600"

DEFAULT_CATEGORIES: List[Dict[str, Any]] = [
    {
        "id": 1,
        "name": "T-Shirts",
        "description": "Premium quality T-Shirts with unique designs and comfortable fabrics.",
        "image": "/TrueBeliever.jpg",
        "productCount": 3,
        "status": "available",
        "order": 1,
    },
    {
        "id": 2,
        "name": "Men's Shorts",
        "description": "High-quality shorts designed for comfort and style.",
        "image": f"{_PLACEHOLDER}/BD9526/000000?text=Men's+Shorts",
        "productCount": 0,
        "status": "coming-soon",
        "order": 2,
    },
    {
        "id": 3,
        "name": "Joggers",
        "description": "Comfortable and stylish joggers for everyday wear.",
        "image": f"{_PLACEHOLDER}/000000/BD9526?text=Joggers",
        "productCount": 0,
        "status": "coming-soon",
        "order": 3,
    },
    {
        "id": 4,
        "name": "Hoodies",
        "description": "Premium hoodies to keep you warm and stylish.",
        "image": f"{_PLACEHOLDER}/14452F/FFFFFF?text=Hoodies",
        "productCount": 0,
        "status": "coming-soon",
        "order": 4,
    },
]


class CategoryService(CachedCollectionService[Category]):
    """Categories ordered by their ``order`` field, keyed by numeric id."""

    collection = "categories"
    entity = Category
    order_field = "order"
    order_direction = ASCENDING
    fallback_on_empty = True

    def fallback(self) -> List[Category]:
        return [Category.from_document(str(c["id"]), c) for c in DEFAULT_CATEGORIES]

    async def get_by_id(self, category_id: Union[int, str]) -> Optional[Category]:
        key = str(category_id)
        category = await super().get_by_id(key)
        if category is not None:
            return category
        return next((c for c in self.fallback() if c.id == key), None)

    async def get_available(self) -> List[Category]:
        q = query(self.collection).where("status", "==", "available").order_by("order", ASCENDING)
        return await self._query(
            q, fallback=lambda: [c for c in self.fallback() if c.status == "available"])

    async def _next_id(self) -> int:
        docs = await self.store.list(query(self.collection))
        ids = [int(d.data.get("id") or d.id) for d in docs if str(d.data.get("id") or d.id).isdigit()]
        return max(ids, default=0) + 1

    async def create(self, data: Dict[str, Any]) -> str:
        """Create a category stored under its numeric id; assigns the next id when absent."""
        document = dict(data)
        try:
            if document.get("id") in (None, ""):
                document["id"] = await self._next_id()
            document.setdefault("productCount", 0)
            document.setdefault("status", "coming-soon")
        except Exception as e:
            logger.error("Category create failed", error=str(e))
            raise
        key = str(document["id"])
        await self._mutate("create", self.store.set(self.collection, key, document), doc_id=key)
        return key

    async def update(self, category_id: Union[int, str], data: Dict[str, Any]) -> None:
        changes = {k: v for k, v in data.items() if k != "id"}
        await super().update(str(category_id), changes)

    async def delete(self, category_id: Union[int, str]) -> None:
        await super().delete(str(category_id))

    async def seed(self, categories: Optional[List[Dict[str, Any]]] = None) -> int:
        """Replace every category document with ``categories`` (the defaults when omitted)."""
        categories = DEFAULT_CATEGORIES if categories is None else categories

        async def replace_all():
            for doc in await self.store.list(query(self.collection)):
                await self.store.delete(self.collection, doc.id)
            for category in categories:
                await self.store.set(self.collection, str(category["id"]), category)
            return len(categories)

        return await self._mutate("seed", replace_all(), count=len(categories))
