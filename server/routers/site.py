"""Site configuration, navigation and custom page routes."""

from typing import Literal

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from core.container import container
from core.object_storage import read_upload
from models.common import to_wire
from models.site import (
    CustomPageCreate,
    CustomPageUpdate,
    NavigationItemWrite,
    SiteConfigUpdate,
)
from services.site_config import SiteConfigService

router = APIRouter(prefix="/api/site", tags=["site"])

SiteAsset = Literal["logo", "favicon", "hero"]


def site_service() -> SiteConfigService:
    return container.site_config_service()


@router.get("/config")
async def get_config(site: SiteConfigService = Depends(site_service)):
    return {"success": True, "config": to_wire(await site.get_config())}


@router.patch("/config")
async def update_config(request: SiteConfigUpdate, site: SiteConfigService = Depends(site_service)):
    await site.update_config(request.to_document())
    return {"success": True}


@router.put("/config/{asset}")
async def upload_asset(
    asset: SiteAsset,
    file: UploadFile = File(...),
    site: SiteConfigService = Depends(site_service)
):
    """Store an uploaded file as the logo, favicon or hero image."""
    uploads = {"logo": None, "favicon": None, "hero_image": None}
    uploads["hero_image" if asset == "hero" else asset] = await read_upload(file)
    await site.update_config({}, **uploads)
    return {"success": True, "config": to_wire(await site.get_config())}


# =============================================================================
# Navigation
# =============================================================================

@router.get("/navigation")
async def get_navigation(site: SiteConfigService = Depends(site_service)):
    return {"success": True, "navigation": to_wire(await site.get_navigation())}


@router.post("/navigation", status_code=201)
async def create_navigation_item(request: NavigationItemWrite, site: SiteConfigService = Depends(site_service)):
    item_id = await site.create_navigation_item(request.to_document())
    return {"success": True, "id": item_id}


@router.patch("/navigation/{item_id}")
async def update_navigation_item(
    item_id: str,
    request: NavigationItemWrite,
    site: SiteConfigService = Depends(site_service)
):
    await site.update_navigation_item(item_id, request.to_document())
    return {"success": True}


@router.delete("/navigation/{item_id}")
async def delete_navigation_item(item_id: str, site: SiteConfigService = Depends(site_service)):
    await site.delete_navigation_item(item_id)
    return {"success": True}


# =============================================================================
# Custom pages
# =============================================================================

@router.get("/pages")
async def get_pages(site: SiteConfigService = Depends(site_service)):
    return {"success": True, "pages": to_wire(await site.get_pages())}


@router.get("/pages/slug/{slug}")
async def get_page_by_slug(slug: str, site: SiteConfigService = Depends(site_service)):
    page = await site.get_page_by_slug(slug)
    if page is None:
        raise HTTPException(status_code=404, detail=f"Page '{slug}' not found")
    return {"success": True, "page": to_wire(page)}


@router.post("/pages", status_code=201)
async def create_page(request: CustomPageCreate, site: SiteConfigService = Depends(site_service)):
    page_id = await site.create_page(request.to_document())
    return {"success": True, "id": page_id}


@router.patch("/pages/{page_id}")
async def update_page(page_id: str, request: CustomPageUpdate, site: SiteConfigService = Depends(site_service)):
    await site.update_page(page_id, request.to_document())
    return {"success": True}


@router.delete("/pages/{page_id}")
async def delete_page(page_id: str, site: SiteConfigService = Depends(site_service)):
    await site.delete_page(page_id)
    return {"success": True}
