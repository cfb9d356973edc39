from __future__ import annotations

"""Table availability, QR codes and scan resolution."""

from fastapi import APIRouter, Depends, Request, Response

from .deps import get_guard
from .qr import render_table_qr, resolve_table_code
from .services.occupancy import TableOccupancyGuard
from .utils.responses import ok

router = APIRouter()


@router.get("/api/tables/resolve")
async def resolve_table(code: str = "") -> dict:
    """Turn a scanned QR payload or a typed table number into a table id."""

    return ok(table=resolve_table_code(code))


@router.get("/api/tables/{table}/availability")
async def table_availability(
    table: str, guard: TableOccupancyGuard = Depends(get_guard)
) -> dict:
    availability = await guard.check_availability(table)
    return ok(table=table, **availability.to_dict())


@router.get("/api/tables/{table}/qr.png")
async def table_qr(table: str, request: Request) -> Response:
    """Return the PNG QR code customers scan at ``table``."""

    settings = request.app.state.settings
    png = render_table_qr(table, settings.public_base_url)
    return Response(png, media_type="image/png")


__all__ = ["router"]
