"""Product catalogue routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile

from core.container import container
from core.logging import get_logger
from core.object_storage import read_upload
from models.catalog import ProductCreate, ProductUpdate, ProductVariant
from models.common import to_wire
from services.listing import ALL, DEFAULT_PER_PAGE, list_products
from services.products import ProductService

logger = get_logger(__name__)
router = APIRouter(prefix="/api/products", tags=["products"])


def products_service() -> ProductService:
    return container.product_service()


@router.get("")
async def get_products(
    search: str = "",
    category: str = ALL,
    status: str = ALL,
    sort: Optional[str] = None,
    page: int = Query(1, ge=1),
    per_page: int = Query(DEFAULT_PER_PAGE, ge=1, le=100),
    products: ProductService = Depends(products_service)
):
    """Admin product list: search, category and stock filters, sort, page."""
    result = list_products(await products.get_all(), search, category, status, sort, page, per_page)
    return {"success": True, **result.to_wire()}


@router.get("/featured")
async def get_featured(
    count: int = Query(3, ge=1, le=50),
    products: ProductService = Depends(products_service)
):
    return {"success": True, "products": to_wire(await products.get_featured(count))}


@router.get("/search")
async def search_products(q: str = "", products: ProductService = Depends(products_service)):
    return {"success": True, "products": to_wire(await products.search(q))}


@router.get("/category/{category}")
async def get_by_category(category: str, products: ProductService = Depends(products_service)):
    return {"success": True, "products": to_wire(await products.get_by_category(category))}


@router.get("/{product_id}")
async def get_product(product_id: str, products: ProductService = Depends(products_service)):
    product = await products.get_by_id(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail=f"Product {product_id} not found")
    return {"success": True, "product": to_wire(product)}


@router.post("", status_code=201)
async def create_product(request: ProductCreate, products: ProductService = Depends(products_service)):
    product_id = await products.create(request.to_document())
    return {"success": True, "id": product_id}


@router.patch("/{product_id}")
async def update_product(
    product_id: str,
    request: ProductUpdate,
    products: ProductService = Depends(products_service)
):
    await products.update(product_id, request.to_document())
    return {"success": True}


@router.put("/{product_id}/image")
async def upload_product_image(
    product_id: str,
    file: UploadFile = File(...),
    products: ProductService = Depends(products_service)
):
    """Replace the product image with an uploaded file."""
    await products.update(product_id, {}, image=await read_upload(file))
    product = await products.get_by_id(product_id)
    return {"success": True, "image": product.image if product else None}


@router.delete("/{product_id}")
async def delete_product(product_id: str, products: ProductService = Depends(products_service)):
    await products.delete(product_id)
    return {"success": True}


@router.put("/{product_id}/published")
async def set_published(
    product_id: str,
    is_published: bool = Query(..., alias="isPublished"),
    products: ProductService = Depends(products_service)
):
    await products.set_published(product_id, is_published)
    return {"success": True}


@router.put("/{product_id}/featured")
async def set_featured(
    product_id: str,
    featured: bool = Query(...),
    products: ProductService = Depends(products_service)
):
    await products.set_featured(product_id, featured)
    return {"success": True}


@router.put("/{product_id}/variants")
async def update_variants(
    product_id: str,
    variants: List[ProductVariant],
    products: ProductService = Depends(products_service)
):
    await products.update_variants(product_id, variants)
    return {"success": True, "inventory": sum(v.stock for v in variants)}


@router.post("/import")
async def bulk_import(items: List[ProductCreate], products: ProductService = Depends(products_service)):
    count = await products.bulk_import([item.to_document() for item in items])
    logger.info("Product import request handled", requested=len(items), imported=count)
    return {"success": True, "imported": count}
