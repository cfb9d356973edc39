"""Order and line item records as exchanged over the ledger protocol."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class LineItem:
    """One catalog item quantity within an order.

    ``menu_id``, ``name``, ``category`` and ``unit_price`` are a snapshot of
    the catalog entry at order time and never follow later catalog edits.
    """

    item_id: str
    order_id: str
    menu_id: str
    name: str
    category: str
    quantity: int
    unit_price: int
    subtotal: int
    notes: str = ""
    created_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "itemId": self.item_id,
            "menuId": self.menu_id,
            "name": self.name,
            "category": self.category,
            "quantity": self.quantity,
            "price": self.unit_price,
            "subtotal": self.subtotal,
            "notes": self.notes,
        }


@dataclass
class Order:
    """A customer transaction bound to a table."""

    order_id: str
    table: str
    customer_name: str
    status: str
    total: int
    item_count: int
    notes: str
    created_at: str
    updated_at: str
    completed_at: str = ""
    items: list[LineItem] = field(default_factory=list)

    def to_dict(self, with_items: bool = False) -> dict[str, Any]:
        data: dict[str, Any] = {
            "orderId": self.order_id,
            "table": self.table,
            "customerName": self.customer_name,
            "status": self.status,
            "total": self.total,
            "itemCount": self.item_count,
            "notes": self.notes,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "completedAt": self.completed_at,
        }
        if with_items:
            data["items"] = [item.to_dict() for item in self.items]
        return data


@dataclass
class OrderQuery:
    """Conjunctive filters accepted by ``getOrders``."""

    table: str | None = None
    status: str | None = None
    created_from: str | None = None  # inclusive ISO-8601 UTC bound
    created_before: str | None = None  # exclusive ISO-8601 UTC bound
    limit: int | None = None
