"""Domain models and helpers."""

from .order import LineItem, Order, OrderQuery
from .order_status import (
    ACTIVE_STATUSES,
    TERMINAL_STATUSES,
    TRANSITIONS,
    OrderStatus,
    can_transition,
    is_active,
    parse_status,
)

__all__ = [
    "ACTIVE_STATUSES",
    "TERMINAL_STATUSES",
    "TRANSITIONS",
    "LineItem",
    "Order",
    "OrderQuery",
    "OrderStatus",
    "can_transition",
    "is_active",
    "parse_status",
]
