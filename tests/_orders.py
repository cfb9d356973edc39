"""Shared order payloads for the ordering tests."""

# table 5 ordering two lattes and a croissant: 2 x 25000 + 20000
EXAMPLE_ITEMS = [
    {"id": "coffee_001", "name": "Hapiyo Latte", "category": "coffee", "price": 25000, "quantity": 2},
    {"id": "snack_001", "name": "Butter Croissant", "category": "snacks", "price": 20000, "quantity": 1},
]


def ledger_body(orders):
    """Return a ``getOrders`` response body for ``orders``."""

    return {"success": True, "orders": orders, "count": len(orders)}
