from __future__ import annotations

"""Menu categories and demo seeding."""

from typing import Optional

from fastapi import APIRouter, Depends

from .deps import get_catalog
from .repos_redis import RedisMenuCatalog
from .schemas import CategoryIn
from .utils.responses import ok

router = APIRouter()


@router.get("/api/categories")
async def list_categories(catalog: RedisMenuCatalog = Depends(get_catalog)) -> dict:
    return ok(categories=await catalog.list_categories())


@router.post("/api/categories")
async def create_category(
    payload: CategoryIn, catalog: RedisMenuCatalog = Depends(get_catalog)
) -> dict:
    category = await catalog.create_category(payload.name)
    return ok(category=category, message="Category created successfully")


@router.delete("/api/categories")
async def delete_category(
    name: Optional[str] = None, catalog: RedisMenuCatalog = Depends(get_catalog)
) -> dict:
    """Remove a category that no longer holds any items."""

    category = await catalog.delete_category(name)
    return ok(category=category, message="Category deleted successfully")


@router.post("/api/seed")
async def seed_menu(catalog: RedisMenuCatalog = Depends(get_catalog)) -> dict:
    """Reset the catalog to the default café menu."""

    items = await catalog.seed()
    return ok(message="Menu seeded successfully", itemsAdded=len(items), items=items)


@router.get("/api/seed")
async def seed_status(catalog: RedisMenuCatalog = Depends(get_catalog)) -> dict:
    total, categories = await catalog.seed_status()
    message = "Database has menu items" if total else "Database is empty"
    return ok(message=message, totalItems=total, categories=categories)


__all__ = ["router"]
