"""Service layer for ordering: ledger lifecycle, gateway and occupancy."""

from .notifications import OrderNotifier
from .occupancy import TableAvailability, TableOccupancyGuard
from .order_gateway import GatewayResponse, OrderGateway
from .order_lifecycle import OrderLifecycle

__all__ = [
    "GatewayResponse",
    "OrderGateway",
    "OrderLifecycle",
    "OrderNotifier",
    "TableAvailability",
    "TableOccupancyGuard",
]
