"""Site configuration, navigation menu and custom pages.

Three independent cache slots: the single ``config/site`` document, the
``navigation`` collection and the ``pages`` collection. Navigation items and
pages are soft-deleted and hidden from reads.
"""

from typing import Any, Dict, List, Optional

from core.cache import DEFAULT_TTL_MS, Clock, TimeBoxedCache, now_ms
from core.document_store import ASCENDING, SERVER_TIMESTAMP, Document, DocumentStore, query
from core.exceptions import ConflictError
from core.logging import get_logger
from core.object_storage import ObjectStorage, StoredObject
from models.site import CustomPage, NavigationItem, SiteConfig
from services.base import CachedCollectionService

logger = get_logger(__name__)

CONFIG_COLLECTION = "config"
CONFIG_ID = "site"

DEFAULT_NAVIGATION = [
    ("home", "Home", "/", 1),
    ("products", "Products", "/products", 2),
    ("categories", "Categories", "/categories", 3),
    ("about", "About", "/about", 4),
    ("contact", "Contact", "/contact", 5),
]


def default_navigation() -> List[NavigationItem]:
    return [NavigationItem(id=i, title=t, url=u, order=o) for i, t, u, o in DEFAULT_NAVIGATION]


class NavigationCollection(CachedCollectionService[NavigationItem]):
    collection = "navigation"
    entity = NavigationItem
    order_field = "order"
    order_direction = ASCENDING
    fallback_on_empty = True

    def fallback(self) -> List[NavigationItem]:
        return default_navigation()

    def decode_all(self, docs: List[Document]) -> List[NavigationItem]:
        return [item for item in super().decode_all(docs) if not item.deleted]


class PageCollection(CachedCollectionService[CustomPage]):
    collection = "pages"
    entity = CustomPage
    order_field = None

    def decode_all(self, docs: List[Document]) -> List[CustomPage]:
        return [page for page in super().decode_all(docs) if not page.deleted]

    async def find_by_slug(self, slug: str) -> Optional[CustomPage]:
        found = await self._query(query(self.collection).where("slug", "==", slug))
        return found[0] if found else None


class SiteConfigService:
    """Storefront branding, menu and content pages."""

    def __init__(self, store: DocumentStore, storage: ObjectStorage,
                 ttl_ms: int = DEFAULT_TTL_MS, clock: Clock = now_ms):
        self.store = store
        self.storage = storage
        self.config_cache: TimeBoxedCache[SiteConfig] = TimeBoxedCache(
            f"{CONFIG_COLLECTION}/{CONFIG_ID}", ttl_ms=ttl_ms, clock=clock)
        self.navigation = NavigationCollection(store, ttl_ms=ttl_ms, clock=clock)
        self.pages = PageCollection(store, ttl_ms=ttl_ms, clock=clock)

    # ------------------------------------------------------------------
    # Site configuration
    # ------------------------------------------------------------------

    async def get_config(self) -> SiteConfig:
        """The stored configuration, or the defaults (uncached) when missing or unreadable."""
        cached = self.config_cache.get()
        if cached is not None:
            return cached
        try:
            doc = await self.store.get(CONFIG_COLLECTION, CONFIG_ID)
        except Exception as e:
            logger.error("Failed to fetch site config", error=str(e))
            return SiteConfig()
        if doc is None:
            return SiteConfig()
        config = SiteConfig.from_document(doc.data)
        self.config_cache.set(config)
        return config

    async def _upload_asset(self, name: str, upload: StoredObject) -> str:
        return await self.storage.upload(f"site/{name}.{upload.extension}", upload)

    async def update_config(self, data: Dict[str, Any], logo: Optional[StoredObject] = None,
                            favicon: Optional[StoredObject] = None,
                            hero_image: Optional[StoredObject] = None) -> None:
        """Merge ``data`` into the configuration, creating it from defaults when missing."""
        changes = dict(data)
        try:
            if logo is not None:
                changes["logo"] = await self._upload_asset("logo", logo)
            if favicon is not None:
                changes["favicon"] = await self._upload_asset("favicon", favicon)
            if hero_image is not None:
                hero = changes.get("hero")
                if hero is None:
                    hero = (await self.get_config()).hero.model_dump(by_alias=True)
                changes["hero"] = {**hero, "image": await self._upload_asset("hero", hero_image)}
            changes["updatedAt"] = SERVER_TIMESTAMP

            existing = await self.store.get(CONFIG_COLLECTION, CONFIG_ID)
            if existing is not None:
                await self.store.update(CONFIG_COLLECTION, CONFIG_ID, changes)
            else:
                await self.store.set(CONFIG_COLLECTION, CONFIG_ID,
                                     {**SiteConfig().to_full_document(), **changes})
        except Exception as e:
            logger.error("Site config update failed", error=str(e))
            raise
        self.clear_config_cache()
        logger.info("Site config updated", fields=sorted(data))

    def clear_config_cache(self) -> None:
        self.config_cache.clear()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    async def get_navigation(self) -> List[NavigationItem]:
        return await self.navigation.get_all()

    async def create_navigation_item(self, data: Dict[str, Any]) -> str:
        """Append an item after the current highest ``order``."""
        try:
            docs = await self.store.list(query(NavigationCollection.collection))
        except Exception as e:
            logger.error("Navigation item create failed", error=str(e))
            raise
        highest = max((int(d.data.get("order") or 0) for d in docs), default=0)
        return await self.navigation.create({
            **data,
            "order": highest + 1,
            "createdAt": SERVER_TIMESTAMP,
            "updatedAt": SERVER_TIMESTAMP,
        })

    async def update_navigation_item(self, item_id: str, data: Dict[str, Any]) -> None:
        await self.navigation.update(item_id, {**data, "updatedAt": SERVER_TIMESTAMP})

    async def delete_navigation_item(self, item_id: str) -> None:
        await self.navigation.soft_delete(item_id)

    def clear_navigation_cache(self) -> None:
        self.navigation.clear_cache()

    # ------------------------------------------------------------------
    # Custom pages
    # ------------------------------------------------------------------

    async def get_pages(self) -> List[CustomPage]:
        return await self.pages.get_all()

    async def get_page_by_slug(self, slug: str) -> Optional[CustomPage]:
        """Answer from a fresh pages slot when it has the slug, otherwise query the store."""
        cached = self.pages.cache.get()
        if cached is not None:
            hit = next((p for p in cached if p.slug == slug), None)
            if hit is not None:
                return hit
        return await self.pages.find_by_slug(slug)

    async def _ensure_slug_free(self, slug: str, page_id: Optional[str] = None) -> None:
        docs = await self.store.list(query(PageCollection.collection).where("slug", "==", slug))
        for doc in docs:
            if doc.id != page_id and not doc.data.get("deleted"):
                raise ConflictError(f'Page with slug "{slug}" already exists')

    async def create_page(self, data: Dict[str, Any]) -> str:
        try:
            await self._ensure_slug_free(data["slug"])
        except Exception as e:
            logger.error("Page create failed", slug=data.get("slug"), error=str(e))
            raise
        return await self.pages.create({
            **data,
            "createdAt": SERVER_TIMESTAMP,
            "updatedAt": SERVER_TIMESTAMP,
        })

    async def update_page(self, page_id: str, data: Dict[str, Any]) -> None:
        try:
            if data.get("slug"):
                await self._ensure_slug_free(data["slug"], page_id)
        except Exception as e:
            logger.error("Page update failed", page_id=page_id, error=str(e))
            raise
        await self.pages.update(page_id, {**data, "updatedAt": SERVER_TIMESTAMP})

    async def delete_page(self, page_id: str) -> None:
        await self.pages.soft_delete(page_id)

    def clear_pages_cache(self) -> None:
        self.pages.clear_cache()

    def clear_cache(self) -> None:
        self.clear_config_cache()
        self.clear_navigation_cache()
        self.clear_pages_cache()
