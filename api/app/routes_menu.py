from __future__ import annotations

"""Menu catalog endpoints backed by Redis."""

from typing import Optional

from fastapi import APIRouter, Depends

from .deps import get_catalog
from .errors import NotFoundError
from .repos_redis import RedisMenuCatalog
from .schemas import BulkStockIn, MenuItemIn, MenuItemUpdate, StockUpdateIn
from .utils.responses import ok

router = APIRouter()


@router.get("/api/menu")
async def list_menu(
    category: Optional[str] = None,
    catalog: RedisMenuCatalog = Depends(get_catalog),
) -> dict:
    """Return menu items, newest first within each category."""

    menus = await catalog.list(category)
    if category:
        return ok(menus=menus)
    return ok(menus=menus, categories=await catalog.categories())


@router.post("/api/menu")
async def create_menu(
    payload: MenuItemIn, catalog: RedisMenuCatalog = Depends(get_catalog)
) -> dict:
    menu = await catalog.create(payload.model_dump())
    return ok(menu=menu, message="Menu created successfully")


@router.patch("/api/menu/stock")
async def adjust_stock(
    payload: StockUpdateIn, catalog: RedisMenuCatalog = Depends(get_catalog)
) -> dict:
    """Apply a signed stock change to one item."""

    adjustment = await catalog.adjust_stock(payload.id, payload.category, payload.quantity)
    return ok(
        **adjustment.to_dict(),
        message=f"Stock updated from {adjustment.previous_stock} to {adjustment.new_stock}",
    )


@router.post("/api/menu/stock")
async def bulk_adjust_stock(
    payload: BulkStockIn, catalog: RedisMenuCatalog = Depends(get_catalog)
) -> dict:
    results = await catalog.bulk_adjust_stock(u.model_dump() for u in payload.updates)
    return ok(results=results, message=f"Processed {len(results)} stock updates")


@router.get("/api/menu/{item_id}")
async def get_menu(item_id: str, catalog: RedisMenuCatalog = Depends(get_catalog)) -> dict:
    menu = await catalog.get_by_id(item_id)
    if menu is None:
        raise NotFoundError("Menu not found")
    return ok(menu=menu)


@router.put("/api/menu/{item_id}")
async def update_menu(
    item_id: str,
    payload: MenuItemUpdate,
    catalog: RedisMenuCatalog = Depends(get_catalog),
) -> dict:
    """Update the fields sent; a new category moves the item."""

    menu = await catalog.update(item_id, payload.model_dump(exclude_unset=True))
    return ok(menu=menu, message="Menu updated successfully")


@router.delete("/api/menu/{item_id}")
async def delete_menu(item_id: str, catalog: RedisMenuCatalog = Depends(get_catalog)) -> dict:
    await catalog.delete(item_id)
    return ok(id=item_id, message="Menu deleted successfully")


__all__ = ["router"]
