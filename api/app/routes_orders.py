from __future__ import annotations

"""Order API for the customer and staff apps, proxied to the ledger."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from .deps import get_gateway
from .services.order_gateway import GatewayResponse, OrderGateway
from .utils.responses import err

router = APIRouter()


def _reply(response: GatewayResponse) -> JSONResponse:
    headers = {"X-Cache": response.cache} if response.cache else None
    return JSONResponse(response.body, status_code=response.status_code, headers=headers)


@router.get("/api/orders")
async def orders_get(
    request: Request, gateway: OrderGateway = Depends(get_gateway)
) -> JSONResponse:
    """Forward a read; ``noCache=true`` skips the response cache."""

    params = dict(request.query_params)
    action = params.pop("action", None) or "getOrders"
    skip_cache = params.pop("noCache", "").lower() == "true"
    return _reply(await gateway.read(action, params, skip_cache=skip_cache))


@router.post("/api/orders")
async def orders_post(
    request: Request, gateway: OrderGateway = Depends(get_gateway)
) -> JSONResponse:
    action = request.query_params.get("action")
    if not action:
        return JSONResponse(err("action is required"), status_code=400)
    try:
        body = await request.json()
    except ValueError:
        return JSONResponse(err("Invalid JSON body"), status_code=400)
    return _reply(await gateway.write(action, body))


__all__ = ["router"]
