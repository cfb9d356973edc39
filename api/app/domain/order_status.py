"""Order status enumeration and allowed transitions."""

from __future__ import annotations

from enum import Enum

from config import TransitionPolicy


class OrderStatus(str, Enum):
    """Enumerate the lifecycle states for an order."""

    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Statuses that still occupy a table.
ACTIVE_STATUSES: frozenset[OrderStatus] = frozenset(
    {OrderStatus.PENDING, OrderStatus.PREPARING, OrderStatus.READY}
)
TERMINAL_STATUSES: frozenset[OrderStatus] = frozenset(
    {OrderStatus.COMPLETED, OrderStatus.CANCELLED}
)

TRANSITIONS: dict[OrderStatus, list[OrderStatus]] = {
    OrderStatus.PENDING: [OrderStatus.PREPARING, OrderStatus.CANCELLED],
    OrderStatus.PREPARING: [OrderStatus.READY],
    OrderStatus.READY: [OrderStatus.COMPLETED],
    OrderStatus.COMPLETED: [],
    OrderStatus.CANCELLED: [],
}


def parse_status(value: object) -> OrderStatus | None:
    """Return the :class:`OrderStatus` named by ``value`` or ``None``."""

    try:
        return OrderStatus(str(value))
    except ValueError:
        return None


def is_active(status: object) -> bool:
    """Return ``True`` if ``status`` is one of the table-occupying statuses."""

    return parse_status(status) in ACTIVE_STATUSES


def can_transition(
    src: OrderStatus,
    dst: OrderStatus,
    policy: TransitionPolicy = TransitionPolicy.TERMINAL_LOCKED,
) -> bool:
    """Return ``True`` if an order can move from ``src`` to ``dst``.

    The answer depends on ``policy``; see :class:`config.TransitionPolicy`.
    """

    if policy is TransitionPolicy.PERMISSIVE:
        return True
    if policy is TransitionPolicy.FORWARD_ONLY:
        return dst in TRANSITIONS.get(src, [])
    return src not in TERMINAL_STATUSES
