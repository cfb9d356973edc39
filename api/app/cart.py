# cart.py

"""Per-table cart kept on the customer's device until checkout.

The server never stores carts. This model mirrors the client behaviour so
that the checkout payload it produces matches what ``/api/checkout``
expects, and so the cart rules can be tested in one place.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Optional

STORAGE_PREFIX = "hapiyo_cart_"


def storage_key(table: str) -> str:
    """Return the local storage key for ``table``'s cart."""

    return f"{STORAGE_PREFIX}{table}"


@dataclass
class CartItem:
    id: str
    name: str
    category: str
    price: int
    quantity: int = 1

    @property
    def subtotal(self) -> int:
        return self.price * self.quantity


@dataclass
class Cart:
    table: Optional[str] = None
    items: list[CartItem] = field(default_factory=list)

    def _find(self, item_id: str) -> Optional[CartItem]:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def add_item(self, menu_item: dict[str, Any]) -> bool:
        """Add one unit of ``menu_item``; unavailable items are refused."""

        if menu_item.get("available") is False:
            return False
        existing = self._find(str(menu_item["id"]))
        if existing is not None:
            existing.quantity += 1
            return True
        self.items.append(
            CartItem(
                id=str(menu_item["id"]),
                name=str(menu_item.get("name", "")),
                category=str(menu_item.get("category", "")),
                price=int(menu_item.get("price") or 0),
            )
        )
        return True

    def remove_item(self, item_id: str) -> None:
        self.items = [item for item in self.items if item.id != item_id]

    def update_quantity(self, item_id: str, quantity: int) -> None:
        if quantity <= 0:
            self.remove_item(item_id)
            return
        item = self._find(item_id)
        if item is not None:
            item.quantity = quantity

    def clear(self) -> None:
        self.items = []

    def set_table(self, table: str) -> None:
        self.table = str(table)

    def quantity_of(self, item_id: str) -> int:
        item = self._find(item_id)
        return item.quantity if item is not None else 0

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def total_price(self) -> int:
        return sum(item.subtotal for item in self.items)

    @property
    def storage_key(self) -> str:
        return storage_key(self.table or "")

    def to_json(self) -> str:
        return json.dumps({"table": self.table, "items": [asdict(i) for i in self.items]})

    @classmethod
    def from_json(cls, raw: str) -> "Cart":
        data = json.loads(raw)
        return cls(
            table=data.get("table"),
            items=[CartItem(**item) for item in data.get("items", [])],
        )

    def to_checkout_payload(self, notes: str = "", customer_name: str = "") -> dict:
        """Return the body for ``POST /api/checkout``."""

        return {
            "table": self.table,
            "items": [
                {"id": i.id, "category": i.category, "quantity": i.quantity}
                for i in self.items
            ],
            "notes": notes,
            "customerName": customer_name,
        }


__all__ = ["Cart", "CartItem", "storage_key", "STORAGE_PREFIX"]
