from __future__ import annotations

"""Order ledger protocol served at ``/ledger``.

Requests select an operation with the ``action`` query parameter, the same
wire format the gateway speaks to any ledger backend. Business failures
answer HTTP 200 with ``success: false``.
"""

from typing import Any, Awaitable, Callable, Mapping

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from .deps import get_lifecycle
from .errors import ValidationError
from .services.order_lifecycle import OrderLifecycle
from .utils.clock import now_iso
from .utils.responses import err, ok

router = APIRouter()

Handler = Callable[[OrderLifecycle, Mapping[str, Any]], Awaitable[dict]]


def _flag(value: Any) -> bool:
    return str(value).lower() in {"1", "true", "yes"}


def _limit(value: Any) -> int | None:
    if value in (None, ""):
        return None
    try:
        limit = int(value)
    except ValueError as exc:
        raise ValidationError(f"Invalid limit: {value}") from exc
    if limit < 0:
        raise ValidationError(f"Invalid limit: {value}")
    return limit


async def _get_orders(lifecycle: OrderLifecycle, params: Mapping[str, Any]) -> dict:
    orders = await lifecycle.list_orders(
        table=params.get("table"),
        status=params.get("status"),
        today=_flag(params.get("today")),
        limit=_limit(params.get("limit")),
    )
    return ok(orders=[o.to_dict() for o in orders], count=len(orders))


async def _get_orders_by_table(
    lifecycle: OrderLifecycle, params: Mapping[str, Any]
) -> dict:
    if not params.get("table"):
        return err("table is required")
    orders = await lifecycle.list_orders(table=params["table"], today=True)
    return ok(orders=[o.to_dict() for o in orders], count=len(orders))


async def _get_order_by_id(lifecycle: OrderLifecycle, params: Mapping[str, Any]) -> dict:
    order = await lifecycle.get_order(params.get("orderId"))
    return ok(order=order.to_dict(with_items=True))


async def _get_stats(lifecycle: OrderLifecycle, params: Mapping[str, Any]) -> dict:
    return ok(stats=await lifecycle.stats())


async def _get_config(lifecycle: OrderLifecycle, params: Mapping[str, Any]) -> dict:
    return ok(config=await lifecycle.get_config())


async def _health(lifecycle: OrderLifecycle, params: Mapping[str, Any]) -> dict:
    return ok(status="ok", timestamp=now_iso())


async def _create_order(lifecycle: OrderLifecycle, data: Mapping[str, Any]) -> dict:
    order = await lifecycle.create_order(
        data.get("table"),
        data.get("items"),
        notes=data.get("notes"),
        customer_name=data.get("customerName"),
    )
    return ok(
        orderId=order.order_id,
        table=order.table,
        total=order.total,
        itemCount=order.item_count,
        status=order.status,
        createdAt=order.created_at,
        message="Order created successfully",
    )


async def _update_order_status(
    lifecycle: OrderLifecycle, data: Mapping[str, Any]
) -> dict:
    order = await lifecycle.advance_status(data.get("orderId"), data.get("status"))
    return ok(orderId=order.order_id, status=order.status, updatedAt=order.updated_at)


async def _delete_order(lifecycle: OrderLifecycle, data: Mapping[str, Any]) -> dict:
    order_id = await lifecycle.delete_order(data.get("orderId"))
    return ok(orderId=order_id, message="Order deleted successfully")


async def _update_config(lifecycle: OrderLifecycle, data: Mapping[str, Any]) -> dict:
    key, value = await lifecycle.update_config(data.get("key"), data.get("value"))
    return ok(key=key, value=value)


GET_ACTIONS: dict[str, Handler] = {
    "getOrders": _get_orders,
    "getOrderById": _get_order_by_id,
    "getOrdersByTable": _get_orders_by_table,
    "getConfig": _get_config,
    "getStats": _get_stats,
    "health": _health,
}

POST_ACTIONS: dict[str, Handler] = {
    "createOrder": _create_order,
    "updateOrderStatus": _update_order_status,
    "deleteOrder": _delete_order,
    "updateConfig": _update_config,
}


def _invalid_action(actions: Mapping[str, Handler]) -> dict:
    return err("Invalid action. Available: " + ", ".join(actions))


@router.get("/ledger")
async def ledger_get(
    request: Request, lifecycle: OrderLifecycle = Depends(get_lifecycle)
) -> dict:
    """Read orders, one order, statistics, config or liveness."""

    params = request.query_params
    handler = GET_ACTIONS.get(params.get("action", ""))
    if handler is None:
        return _invalid_action(GET_ACTIONS)
    return await handler(lifecycle, params)


@router.post("/ledger")
async def ledger_post(
    request: Request, lifecycle: OrderLifecycle = Depends(get_lifecycle)
):
    """Create, update or delete orders and update ledger config."""

    try:
        data = await request.json()
    except ValueError:
        return JSONResponse(err("Invalid JSON body"), status_code=400)
    if not isinstance(data, dict):
        return JSONResponse(err("Invalid JSON body"), status_code=400)

    handler = POST_ACTIONS.get(request.query_params.get("action", ""))
    if handler is None:
        return _invalid_action(POST_ACTIONS)
    return await handler(lifecycle, data)


__all__ = ["router", "GET_ACTIONS", "POST_ACTIONS"]
