"""Product catalogue service."""

from typing import Any, Dict, List, Optional

from core.document_store import SERVER_TIMESTAMP, DocumentStore, query
from core.exceptions import DocumentNotFoundError
from core.logging import get_logger
from core.object_storage import ObjectStorage, StoredObject, timestamped_path
from models.catalog import DEFAULT_SIZES, Product, ProductVariant
from services.base import CachedCollectionService

logger = get_logger(__name__)

IMAGE_PREFIX = "products"


def _fallback(id, title, image, price, description, inventory):
    return Product(id=id, title=title, image=image, price=price, category="T-Shirts",
                   description=description, featured=True, inventory=inventory,
                   sizes=list(DEFAULT_SIZES))


FALLBACK_PRODUCTS: List[Product] = [
    _fallback("1", 'BITD "True Believer" Black T-Shirt', "/glowing-lamp/TrueBeliever.jpg", "$3000",
              "Premium quality True Believer black T-Shirt with unique design.", 10),
    _fallback("2", 'BITD "True Believer" White T-Shirt', "/glowing-lamp/WhiteTruBlv.jpg", "$3000",
              "Premium quality True Believer white T-Shirt with unique design.", 8),
    _fallback("3", "Believe in the Designs T-Shirt, Black", "/glowing-lamp/BelieveDesigns.jpg", "$3500",
              "Premium quality Believe in the Designs black T-Shirt.", 12),
]


def matches_search(product: Product, text: str) -> bool:
    needle = text.lower()
    return (needle in product.title.lower()
            or needle in product.description.lower()
            or needle in product.category.lower())


class ProductService(CachedCollectionService[Product]):
    """Products, their images and variants.

    An empty or unreachable store answers with a three-item fallback
    catalogue, which is never cached.
    """

    collection = "products"
    entity = Product
    fallback_on_empty = True

    def __init__(self, store: DocumentStore, storage: ObjectStorage, **kwargs):
        super().__init__(store, **kwargs)
        self.storage = storage

    def fallback(self) -> List[Product]:
        return [p.model_copy(deep=True) for p in FALLBACK_PRODUCTS]

    async def get_by_id(self, product_id: str) -> Optional[Product]:
        product = await super().get_by_id(product_id)
        if product is not None:
            return product
        return next((p for p in self.fallback() if p.id == product_id), None)

    async def get_by_category(self, category: str) -> List[Product]:
        q = query(self.collection).where("category", "==", category).order_by("createdAt", "desc")
        return await self._query(
            q, fallback=lambda: [p for p in self.fallback() if p.category == category])

    async def get_featured(self, count: int = 3) -> List[Product]:
        q = query(self.collection).where("featured", "==", True).limit(count)
        return await self._query(
            q, fallback=lambda: [p for p in self.fallback() if p.featured][:count])

    async def search(self, text: str) -> List[Product]:
        """Case-insensitive match on title, description and category."""
        products = await self.get_all()
        if not text.strip():
            return products
        return [p for p in products if matches_search(p, text)]

    async def _upload_image(self, image: StoredObject) -> str:
        return await self.storage.upload(timestamped_path(IMAGE_PREFIX, image.filename), image)

    async def create(self, data: Dict[str, Any], image: Optional[StoredObject] = None) -> str:
        """Create a product, uploading ``image`` first when given."""
        document = dict(data)
        try:
            if image is not None:
                document["image"] = await self._upload_image(image)
        except Exception as e:
            logger.error("Product image upload failed", error=str(e))
            raise
        document["createdAt"] = SERVER_TIMESTAMP
        document["updatedAt"] = SERVER_TIMESTAMP
        if document.get("isPublished") is None:
            document["isPublished"] = True
        return await super().create(document)

    async def update(self, product_id: str, data: Dict[str, Any], image: Optional[StoredObject] = None) -> None:
        """Update fields; a new image replaces (and deletes) an owned old one."""
        changes = {**data, "updatedAt": SERVER_TIMESTAMP}
        try:
            if image is not None:
                existing = await self.store.get(self.collection, product_id)
                if existing is not None:
                    # Failure to remove the old object never blocks the update
                    await self.storage.delete_url(existing.data.get("image"))
                changes["image"] = await self._upload_image(image)
        except Exception as e:
            logger.error("Product image replacement failed", product_id=product_id, error=str(e))
            raise
        await super().update(product_id, changes)

    async def delete(self, product_id: str) -> None:
        """Delete a product and its owned image. Raises when the product does not exist."""
        try:
            existing = await self.store.get(self.collection, product_id)
            if existing is None:
                raise DocumentNotFoundError(self.collection, product_id)
        except Exception as e:
            logger.error("Product delete failed", product_id=product_id, error=str(e))
            raise
        await super().delete(product_id)
        await self.storage.delete_url(existing.data.get("image"))

    async def set_published(self, product_id: str, is_published: bool) -> None:
        await super().update(product_id, {"isPublished": is_published, "updatedAt": SERVER_TIMESTAMP})

    async def set_featured(self, product_id: str, featured: bool) -> None:
        await super().update(product_id, {"featured": featured, "updatedAt": SERVER_TIMESTAMP})

    async def update_variants(self, product_id: str, variants: List[ProductVariant]) -> None:
        """Replace variants and set inventory to their total stock."""
        total_stock = sum(v.stock for v in variants)
        await super().update(product_id, {
            "variants": [v.model_dump(by_alias=True, exclude_none=True) for v in variants],
            "inventory": total_stock,
            "updatedAt": SERVER_TIMESTAMP,
        })

    async def adjust_inventory(self, product_id: str, delta: int) -> int:
        """Add ``delta`` to a product's inventory, floored at zero. Returns the new level."""
        try:
            existing = await self.store.get(self.collection, product_id)
            if existing is None:
                raise DocumentNotFoundError(self.collection, product_id)
        except Exception as e:
            logger.error("Inventory adjustment failed", product_id=product_id, error=str(e))
            raise
        level = max(0, int(existing.data.get("inventory") or 0) + delta)
        await super().update(product_id, {"inventory": level, "updatedAt": SERVER_TIMESTAMP})
        return level

    async def bulk_import(self, products: List[Dict[str, Any]]) -> int:
        """Add each product in turn and return how many were written.

        Not atomic: on failure the products already added stay, the cache is
        cleared for them and the error propagates.
        """
        imported = 0
        try:
            for data in products:
                document = {**data, "createdAt": SERVER_TIMESTAMP, "updatedAt": SERVER_TIMESTAMP}
                if document.get("isPublished") is None:
                    document["isPublished"] = True
                await self.store.add(self.collection, document)
                imported += 1
        except Exception as e:
            logger.error("Bulk import failed", imported=imported, total=len(products), error=str(e))
            if imported:
                self.clear_cache()
            raise
        self.clear_cache()
        logger.info("Bulk import completed", imported=imported)
        return imported
