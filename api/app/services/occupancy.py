from __future__ import annotations

"""Refuse a new order while the same table still has one in progress."""

import logging
from dataclasses import dataclass
from typing import Any

from ..domain import is_active
from ..errors import OrderingError
from ..routes_metrics import occupancy_check_failed_open_total
from .order_gateway import OrderGateway

logger = logging.getLogger("occupancy")


@dataclass
class TableAvailability:
    available: bool
    active_order: dict | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"available": self.available}
        if self.active_order is not None:
            data["activeOrder"] = self.active_order
        if self.error:
            data["error"] = self.error
        return data


class TableOccupancyGuard:
    """Check today's orders for a table before a checkout is accepted.

    The lookup always bypasses the gateway cache and never accepts a stale
    body in place of a failed read. When the ledger cannot be
    reached the table is reported available so a ledger outage never blocks
    ordering. Check then create is not atomic: two checkouts racing on the
    same table can both pass.
    """

    def __init__(self, gateway: OrderGateway) -> None:
        self.gateway = gateway

    def _fail_open(self, table: str, reason: Any) -> TableAvailability:
        occupancy_check_failed_open_total.inc()
        logger.warning("occupancy check for table %s failed open: %s", table, reason)
        return TableAvailability(True, error="Could not verify table status")

    async def check_availability(self, table: Any) -> TableAvailability:
        table_id = str(table).strip()
        try:
            response = await self.gateway.get_orders(
                skip_cache=True, allow_stale=False, table=table_id, today="true"
            )
        except OrderingError as exc:
            return self._fail_open(table_id, exc.message)

        if not response.succeeded:
            return self._fail_open(table_id, response.body)

        for order in response.body.get("orders") or []:
            if not isinstance(order, dict):
                continue
            if str(order.get("table")) == table_id and is_active(order.get("status")):
                return TableAvailability(False, active_order=order)
        return TableAvailability(True)


__all__ = ["TableAvailability", "TableOccupancyGuard"]
