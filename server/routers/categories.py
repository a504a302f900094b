"""Category routes."""

from fastapi import APIRouter, Depends, HTTPException

from core.container import container
from models.catalog import CategoryWrite
from models.common import to_wire
from services.categories import CategoryService

router = APIRouter(prefix="/api/categories", tags=["categories"])


def categories_service() -> CategoryService:
    return container.category_service()


@router.get("")
async def get_categories(categories: CategoryService = Depends(categories_service)):
    return {"success": True, "categories": to_wire(await categories.get_all())}


@router.get("/available")
async def get_available(categories: CategoryService = Depends(categories_service)):
    return {"success": True, "categories": to_wire(await categories.get_available())}


@router.get("/{category_id}")
async def get_category(category_id: int, categories: CategoryService = Depends(categories_service)):
    category = await categories.get_by_id(category_id)
    if category is None:
        raise HTTPException(status_code=404, detail=f"Category {category_id} not found")
    return {"success": True, "category": to_wire(category)}


@router.post("", status_code=201)
async def create_category(request: CategoryWrite, categories: CategoryService = Depends(categories_service)):
    category_id = await categories.create(request.to_document())
    return {"success": True, "id": category_id}


@router.patch("/{category_id}")
async def update_category(
    category_id: int,
    request: CategoryWrite,
    categories: CategoryService = Depends(categories_service)
):
    await categories.update(category_id, request.to_document())
    return {"success": True}


@router.delete("/{category_id}")
async def delete_category(category_id: int, categories: CategoryService = Depends(categories_service)):
    await categories.delete(category_id)
    return {"success": True}
