from __future__ import annotations

"""Order creation and status lifecycle on top of an :class:`OrderLedger`.

This is the only place that decides order identifiers, totals and which
status changes are allowed. The ledger underneath just stores rows.
"""

import logging
import random
from typing import Any, Iterable

from config import TransitionPolicy

from ..domain import (
    TERMINAL_STATUSES,
    LineItem,
    Order,
    OrderQuery,
    OrderStatus,
    can_transition,
    parse_status,
)
from ..errors import (
    ConflictError,
    InvalidStatusError,
    NotFoundError,
    NotificationError,
    ValidationError,
)
from ..repos.orders_repo import OrderLedger
from ..routes_metrics import (
    notifications_failed_total,
    order_status_updates_total,
    orders_created_total,
    orders_deleted_total,
)
from ..utils.clock import local_date_stamp, local_day_bounds, now_iso
from .notifications import OrderNotifier

logger = logging.getLogger("orders")

VALID_STATUSES = ", ".join(status.value for status in OrderStatus)
ORDER_ID_ATTEMPTS = 5


def _as_int(value: Any, default: int, field: str) -> int:
    # falsy values (missing, null, 0, "") fall back to the default
    if not value:
        return default
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f"Invalid {field}: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid {field}: {value!r}") from exc


def build_line_items(
    order_id: str, raw_items: Iterable[Any], created_at: str
) -> list[LineItem]:
    """Snapshot request items into line items, preserving request order.

    Missing quantities count as 1 and missing prices as 0.
    """

    items: list[LineItem] = []
    for index, raw in enumerate(raw_items, start=1):
        if not isinstance(raw, dict):
            raise ValidationError(f"Invalid item at position {index}")
        quantity = _as_int(raw.get("quantity"), 1, "quantity")
        price = _as_int(raw.get("price"), 0, "price")
        if quantity < 1:
            raise ValidationError(f"Invalid quantity: {quantity}")
        if price < 0:
            raise ValidationError(f"Invalid price: {price}")
        items.append(
            LineItem(
                item_id=f"{order_id}-{index}",
                order_id=order_id,
                menu_id=str(raw.get("id") or raw.get("menuId") or ""),
                name=str(raw.get("name") or ""),
                category=str(raw.get("category") or ""),
                quantity=quantity,
                unit_price=price,
                subtotal=quantity * price,
                notes=str(raw.get("notes") or ""),
                created_at=created_at,
            )
        )
    return items


class OrderLifecycle:
    """Create orders and move them through the fulfilment pipeline."""

    def __init__(
        self,
        ledger: OrderLedger,
        *,
        timezone: str = "Asia/Jakarta",
        order_prefix: str = "HPY",
        policy: TransitionPolicy = TransitionPolicy.TERMINAL_LOCKED,
        notifier: OrderNotifier | None = None,
        notification_email: str | None = None,
    ) -> None:
        self.ledger = ledger
        self.timezone = timezone
        self.order_prefix = order_prefix
        self.policy = policy
        self.notifier = notifier
        self.notification_email = notification_email

    async def _new_order_id(self, prefix: str) -> str:
        stamp = local_date_stamp(self.timezone)
        for _ in range(ORDER_ID_ATTEMPTS):
            order_id = f"{prefix}-{stamp}-{random.randint(0, 9999):04d}"
            if await self.ledger.get(order_id) is None:
                return order_id
        raise ConflictError("Could not allocate a unique order id")

    async def create_order(
        self,
        table: Any,
        items: Any,
        notes: str | None = None,
        customer_name: str | None = None,
    ) -> Order:
        """Validate, price and append a new ``pending`` order."""

        table_id = str(table).strip() if table is not None else ""
        if not table_id or not isinstance(items, list) or not items:
            raise ValidationError("Missing required fields: table, items")

        config = await self.ledger.get_config()
        order_id = await self._new_order_id(
            config.get("order_prefix") or self.order_prefix
        )
        now = now_iso()
        line_items = build_line_items(order_id, items, now)
        order = Order(
            order_id=order_id,
            table=table_id,
            customer_name=str(customer_name or "").strip() or "Guest",
            status=OrderStatus.PENDING.value,
            total=sum(item.subtotal for item in line_items),
            item_count=sum(item.quantity for item in line_items),
            notes=str(notes or ""),
            created_at=now,
            updated_at=now,
            completed_at="",
            items=line_items,
        )
        await self.ledger.append(order, line_items)
        orders_created_total.inc()
        logger.info(
            "order created table=%s total=%d items=%d",
            order.table,
            order.total,
            order.item_count,
            extra={"order_id": order_id},
        )

        recipient = config.get("notification_email") or self.notification_email
        await self._notify(recipient, order)
        return order

    async def _notify(self, recipient: str | None, order: Order) -> None:
        if self.notifier is None:
            return
        try:
            await self.notifier.order_created(
                recipient, order.order_id, order.table, order.total
            )
        except NotificationError as exc:
            notifications_failed_total.inc()
            logger.warning(
                "order notification failed: %s", exc, extra={"order_id": order.order_id}
            )

    async def get_order(self, order_id: str) -> Order:
        if not order_id:
            raise ValidationError("orderId is required")
        order = await self.ledger.get(order_id)
        if order is None:
            raise NotFoundError("Order not found")
        return order

    async def advance_status(self, order_id: str, new_status: Any) -> Order:
        """Set ``new_status`` on an order if the transition policy allows it."""

        if not order_id or not new_status:
            raise ValidationError("orderId and status are required")
        target = parse_status(new_status)
        if target is None:
            raise InvalidStatusError(f"Invalid status. Valid: {VALID_STATUSES}")

        order = await self.get_order(order_id)
        current = parse_status(order.status)
        if current is not None and not can_transition(current, target, self.policy):
            raise InvalidStatusError(
                f"Invalid status transition: {current.value} -> {target.value}"
            )

        now = now_iso()
        fields = {"status": target.value, "updated_at": now}
        if target in TERMINAL_STATUSES:
            fields["completed_at"] = now
        if not await self.ledger.update_fields(order_id, fields):
            raise NotFoundError("Order not found")

        order_status_updates_total.labels(status=target.value).inc()
        logger.info(
            "order status %s -> %s",
            order.status,
            target.value,
            extra={"order_id": order_id},
        )
        order.status = target.value
        order.updated_at = now
        order.completed_at = fields.get("completed_at", order.completed_at)
        return order

    async def delete_order(self, order_id: str) -> str:
        if not order_id:
            raise ValidationError("orderId is required")
        if not await self.ledger.delete(order_id):
            raise NotFoundError("Order not found")
        orders_deleted_total.inc()
        logger.info("order deleted", extra={"order_id": order_id})
        return order_id

    async def list_orders(
        self,
        table: str | None = None,
        status: str | None = None,
        today: bool = False,
        limit: int | None = None,
    ) -> list[Order]:
        query = OrderQuery(
            table=str(table) if table not in (None, "") else None,
            status=status if status and status != "all" else None,
            limit=limit,
        )
        if today:
            query.created_from, query.created_before = local_day_bounds(self.timezone)
        return await self.ledger.query(query)

    async def stats(self) -> dict[str, int]:
        """Aggregate counts per status plus all-time and today's revenue.

        Revenue only counts ``completed`` orders.
        """

        orders = await self.ledger.query(OrderQuery())
        day_start, day_end = local_day_bounds(self.timezone)
        stats = {
            "totalOrders": 0,
            "pendingOrders": 0,
            "preparingOrders": 0,
            "readyOrders": 0,
            "completedOrders": 0,
            "cancelledOrders": 0,
            "totalRevenue": 0,
            "todayOrders": 0,
            "todayRevenue": 0,
        }
        for order in orders:
            stats["totalOrders"] += 1
            status = parse_status(order.status)
            if status is not None:
                stats[f"{status.value}Orders"] += 1
            completed = status is OrderStatus.COMPLETED
            if completed:
                stats["totalRevenue"] += order.total
            if day_start <= order.created_at < day_end:
                stats["todayOrders"] += 1
                if completed:
                    stats["todayRevenue"] += order.total
        return stats

    async def get_config(self) -> dict[str, str]:
        return await self.ledger.get_config()

    async def update_config(self, key: str | None, value: Any) -> tuple[str, str]:
        if not key:
            raise ValidationError("key is required")
        text = "" if value is None else str(value)
        if not await self.ledger.set_config(key, text):
            raise NotFoundError("Config key not found")
        return key, text


__all__ = ["OrderLifecycle", "build_line_items", "VALID_STATUSES"]
