"""Customer checkout: turn a table's cart into a ledger order."""

from __future__ import annotations

import logging
from collections import Counter

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from .deps import get_catalog, get_gateway, get_guard
from .errors import ValidationError
from .repos_redis import RedisMenuCatalog
from .routes_metrics import table_occupied_denied_total
from .schemas import CheckoutIn
from .services.occupancy import TableOccupancyGuard
from .services.order_gateway import OrderGateway
from .utils.responses import err

router = APIRouter()
logger = logging.getLogger("checkout")


@router.post("/api/checkout")
async def checkout(
    payload: CheckoutIn,
    guard: TableOccupancyGuard = Depends(get_guard),
    catalog: RedisMenuCatalog = Depends(get_catalog),
    gateway: OrderGateway = Depends(get_gateway),
):
    """Place an order for a table.

    The table must not have an order in progress. Names, categories and
    prices are copied from the catalog so the order keeps them even if the
    menu changes later. Stock is checked but not decremented.
    """

    table = str(payload.table).strip()
    if not table or not payload.items:
        raise ValidationError("Missing required fields: table, items")

    availability = await guard.check_availability(table)
    if not availability.available:
        table_occupied_denied_total.inc()
        logger.info("checkout refused, table %s is occupied", table)
        return err(
            "Table already has an active order",
            activeOrder=availability.active_order,
        )

    requested = Counter()
    for line in payload.items:
        requested[line.id] += line.quantity

    items = []
    for line in payload.items:
        menu = await catalog.get_by_id(line.id, line.category)
        if menu is None:
            return err(f"Menu item not found: {line.id}")
        if not menu["available"] or menu["stock"] < requested[line.id]:
            return err(f"{menu['name']} is not available in the requested quantity")
        items.append(
            {
                "id": menu["id"],
                "name": menu["name"],
                "category": menu["category"],
                "price": menu["price"],
                "quantity": line.quantity,
                "notes": line.notes,
            }
        )

    response = await gateway.create_order(
        {
            "table": table,
            "items": items,
            "notes": payload.notes,
            "customerName": payload.customerName,
        }
    )
    return JSONResponse(response.body, status_code=response.status_code)


__all__ = ["router"]
