"""Coupons, email campaigns and banners, one cache slot each."""

from typing import Any, Dict, List, Optional

from core.cache import DEFAULT_TTL_MS, Clock, now_ms
from core.document_store import SERVER_TIMESTAMP, DocumentStore, query
from core.exceptions import ConflictError
from core.logging import get_logger
from models.marketing import Banner, Coupon, EmailCampaign
from services.base import CachedCollectionService

logger = get_logger(__name__)


class CouponCollection(CachedCollectionService[Coupon]):
    collection = "coupons"
    entity = Coupon

    async def _ensure_code_free(self, code: str, coupon_id: Optional[str] = None) -> None:
        docs = await self.store.list(query(self.collection).where("code", "==", code))
        if any(doc.id != coupon_id for doc in docs):
            raise ConflictError("Coupon code already exists")

    async def get_by_code(self, code: str) -> Optional[Coupon]:
        found = await self._query(query(self.collection).where("code", "==", code).limit(1))
        return found[0] if found else None

    async def create(self, data: Dict[str, Any]) -> str:
        try:
            await self._ensure_code_free(data["code"])
        except Exception as e:
            logger.error("Coupon create failed", code=data.get("code"), error=str(e))
            raise
        return await super().create({**data, "usedCount": 0, "createdAt": SERVER_TIMESTAMP})

    async def update(self, coupon_id: str, data: Dict[str, Any]) -> None:
        try:
            if data.get("code"):
                await self._ensure_code_free(data["code"], coupon_id)
        except Exception as e:
            logger.error("Coupon update failed", coupon_id=coupon_id, error=str(e))
            raise
        await super().update(coupon_id, {**data, "updatedAt": SERVER_TIMESTAMP})


class CampaignCollection(CachedCollectionService[EmailCampaign]):
    collection = "emailCampaigns"
    entity = EmailCampaign

    async def create(self, data: Dict[str, Any]) -> str:
        return await super().create({**data, "createdAt": SERVER_TIMESTAMP})

    async def update(self, campaign_id: str, data: Dict[str, Any]) -> None:
        await super().update(campaign_id, {**data, "updatedAt": SERVER_TIMESTAMP})


class BannerCollection(CachedCollectionService[Banner]):
    collection = "banners"
    entity = Banner

    async def create(self, data: Dict[str, Any]) -> str:
        return await super().create({**data, "createdAt": SERVER_TIMESTAMP})

    async def update(self, banner_id: str, data: Dict[str, Any]) -> None:
        await super().update(banner_id, {**data, "updatedAt": SERVER_TIMESTAMP})


class MarketingService:
    """Facade over the three marketing collections."""

    def __init__(self, store: DocumentStore, ttl_ms: int = DEFAULT_TTL_MS, clock: Clock = now_ms):
        self.coupons = CouponCollection(store, ttl_ms=ttl_ms, clock=clock)
        self.campaigns = CampaignCollection(store, ttl_ms=ttl_ms, clock=clock)
        self.banners = BannerCollection(store, ttl_ms=ttl_ms, clock=clock)

    async def get_active_banners(self, position: Optional[str] = None) -> List[Banner]:
        banners = [b for b in await self.banners.get_all() if b.is_active]
        if position:
            banners = [b for b in banners if b.position == position]
        return banners

    def clear_cache(self) -> None:
        self.coupons.clear_cache()
        self.campaigns.clear_cache()
        self.banners.clear_cache()
