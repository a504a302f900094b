"""Coupon, email campaign and banner routes."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from core.container import container
from models.common import to_wire
from models.marketing import BannerPosition, BannerWrite, CouponWrite, EmailCampaignWrite
from services.marketing import MarketingService

router = APIRouter(prefix="/api/marketing", tags=["marketing"])


def marketing_service() -> MarketingService:
    return container.marketing_service()


# =============================================================================
# Coupons
# =============================================================================

@router.get("/coupons")
async def get_coupons(marketing: MarketingService = Depends(marketing_service)):
    return {"success": True, "coupons": to_wire(await marketing.coupons.get_all())}


@router.get("/coupons/code/{code}")
async def get_coupon_by_code(code: str, marketing: MarketingService = Depends(marketing_service)):
    coupon = await marketing.coupons.get_by_code(code)
    if coupon is None:
        raise HTTPException(status_code=404, detail=f"Coupon {code} not found")
    return {"success": True, "coupon": to_wire(coupon)}


@router.post("/coupons", status_code=201)
async def create_coupon(request: CouponWrite, marketing: MarketingService = Depends(marketing_service)):
    if not request.code or request.type is None or request.value is None:
        raise HTTPException(status_code=422, detail="code, type and value are required")
    coupon_id = await marketing.coupons.create(request.to_document())
    return {"success": True, "id": coupon_id}


@router.patch("/coupons/{coupon_id}")
async def update_coupon(coupon_id: str, request: CouponWrite, marketing: MarketingService = Depends(marketing_service)):
    await marketing.coupons.update(coupon_id, request.to_document())
    return {"success": True}


@router.delete("/coupons/{coupon_id}")
async def delete_coupon(coupon_id: str, marketing: MarketingService = Depends(marketing_service)):
    await marketing.coupons.delete(coupon_id)
    return {"success": True}


# =============================================================================
# Email campaigns
# =============================================================================

@router.get("/campaigns")
async def get_campaigns(marketing: MarketingService = Depends(marketing_service)):
    return {"success": True, "campaigns": to_wire(await marketing.campaigns.get_all())}


@router.post("/campaigns", status_code=201)
async def create_campaign(request: EmailCampaignWrite, marketing: MarketingService = Depends(marketing_service)):
    campaign_id = await marketing.campaigns.create(request.to_document())
    return {"success": True, "id": campaign_id}


@router.patch("/campaigns/{campaign_id}")
async def update_campaign(
    campaign_id: str,
    request: EmailCampaignWrite,
    marketing: MarketingService = Depends(marketing_service)
):
    await marketing.campaigns.update(campaign_id, request.to_document())
    return {"success": True}


@router.delete("/campaigns/{campaign_id}")
async def delete_campaign(campaign_id: str, marketing: MarketingService = Depends(marketing_service)):
    await marketing.campaigns.delete(campaign_id)
    return {"success": True}


# =============================================================================
# Banners
# =============================================================================

@router.get("/banners")
async def get_banners(marketing: MarketingService = Depends(marketing_service)):
    return {"success": True, "banners": to_wire(await marketing.banners.get_all())}


@router.get("/banners/active")
async def get_active_banners(
    position: Optional[BannerPosition] = None,
    marketing: MarketingService = Depends(marketing_service)
):
    return {"success": True, "banners": to_wire(await marketing.get_active_banners(position))}


@router.post("/banners", status_code=201)
async def create_banner(request: BannerWrite, marketing: MarketingService = Depends(marketing_service)):
    banner_id = await marketing.banners.create(request.to_document())
    return {"success": True, "id": banner_id}


@router.patch("/banners/{banner_id}")
async def update_banner(banner_id: str, request: BannerWrite, marketing: MarketingService = Depends(marketing_service)):
    await marketing.banners.update(banner_id, request.to_document())
    return {"success": True}


@router.delete("/banners/{banner_id}")
async def delete_banner(banner_id: str, marketing: MarketingService = Depends(marketing_service)):
    await marketing.banners.delete(banner_id)
    return {"success": True}
