"""SQLAlchemy-backed order ledger.

Rows are written and read without any business rules: totals, status checks
and identifiers are decided by the lifecycle service before anything reaches
this module. Line items are returned in the order they were appended.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Iterable

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncEngine

from ..db import create_schema, session_factory
from ..domain import LineItem, Order, OrderQuery
from ..models_ledger import LedgerConfig, OrderItemRow, OrderRow
from ..repos.orders_repo import OrderLedger

DEFAULT_CONFIG: dict[str, tuple[str, str]] = {
    "order_prefix": ("HPY", "Prefix for generated order ids"),
    "notification_email": ("", "Recipient of new-order emails"),
}

_ORDER_FIELDS = {
    "customer_name",
    "status",
    "notes",
    "updated_at",
    "completed_at",
}


def _to_order(row: OrderRow) -> Order:
    return Order(
        order_id=row.order_id,
        table=row.table,
        customer_name=row.customer_name,
        status=row.status,
        total=row.total,
        item_count=row.item_count,
        notes=row.notes,
        created_at=row.created_at,
        updated_at=row.updated_at,
        completed_at=row.completed_at or "",
    )


def _to_item(row: OrderItemRow) -> LineItem:
    return LineItem(
        item_id=row.item_id,
        order_id=row.order_id,
        menu_id=row.menu_id,
        name=row.name,
        category=row.category,
        quantity=row.quantity,
        unit_price=row.unit_price,
        subtotal=row.subtotal,
        notes=row.notes,
        created_at=row.created_at,
    )


class SqlOrderLedger(OrderLedger):
    """Order ledger stored in any database SQLAlchemy's async engine supports."""

    def __init__(self, engine: AsyncEngine, defaults: dict[str, str] | None = None):
        self.engine = engine
        self._sessions = session_factory(engine)
        self._defaults = defaults or {}
        self._ready = False
        self._schema_lock = asyncio.Lock()

    async def _ensure_schema(self) -> None:
        if self._ready:
            return
        async with self._schema_lock:
            if not self._ready:
                await self._create_schema()
                self._ready = True

    async def _create_schema(self) -> None:
        await create_schema(self.engine)
        now = datetime.now(timezone.utc).isoformat()
        async with self._sessions() as session:
            existing = set(await session.scalars(select(LedgerConfig.key)))
            for key, (default, description) in DEFAULT_CONFIG.items():
                if key in existing:
                    continue
                session.add(
                    LedgerConfig(
                        key=key,
                        value=self._defaults.get(key, default) or "",
                        description=description,
                        updated_at=now,
                    )
                )
            await session.commit()

    async def append(self, order: Order, items: Iterable[LineItem]) -> None:
        await self._ensure_schema()
        async with self._sessions() as session:
            session.add(
                OrderRow(
                    order_id=order.order_id,
                    table=order.table,
                    customer_name=order.customer_name,
                    status=order.status,
                    total=order.total,
                    item_count=order.item_count,
                    notes=order.notes,
                    created_at=order.created_at,
                    updated_at=order.updated_at,
                    completed_at=order.completed_at,
                )
            )
            # flush the order first so item foreign keys resolve
            await session.flush()
            for position, item in enumerate(items):
                session.add(
                    OrderItemRow(
                        item_id=item.item_id,
                        order_id=item.order_id,
                        position=position,
                        menu_id=item.menu_id,
                        name=item.name,
                        category=item.category,
                        quantity=item.quantity,
                        unit_price=item.unit_price,
                        subtotal=item.subtotal,
                        notes=item.notes,
                        created_at=item.created_at,
                    )
                )
            await session.commit()

    async def query(self, filters: OrderQuery) -> list[Order]:
        await self._ensure_schema()
        stmt = select(OrderRow)
        if filters.table is not None:
            stmt = stmt.where(OrderRow.table == str(filters.table))
        if filters.status:
            stmt = stmt.where(OrderRow.status == filters.status)
        if filters.created_from is not None:
            stmt = stmt.where(OrderRow.created_at >= filters.created_from)
        if filters.created_before is not None:
            stmt = stmt.where(OrderRow.created_at < filters.created_before)
        stmt = stmt.order_by(OrderRow.created_at.desc())
        if filters.limit is not None:
            stmt = stmt.limit(filters.limit)
        async with self._sessions() as session:
            rows = list(await session.scalars(stmt))
        return [_to_order(row) for row in rows]

    async def get(self, order_id: str) -> Order | None:
        await self._ensure_schema()
        async with self._sessions() as session:
            row = await session.get(OrderRow, order_id)
            if row is None:
                return None
            items = await session.scalars(
                select(OrderItemRow)
                .where(OrderItemRow.order_id == order_id)
                .order_by(OrderItemRow.position)
            )
            order = _to_order(row)
            order.items = [_to_item(item) for item in items]
        return order

    async def update_fields(self, order_id: str, fields: dict) -> bool:
        unknown = set(fields) - _ORDER_FIELDS
        if unknown:
            raise ValueError(f"fields not writable: {sorted(unknown)}")
        await self._ensure_schema()
        async with self._sessions() as session:
            result = await session.execute(
                update(OrderRow).where(OrderRow.order_id == order_id).values(**fields)
            )
            await session.commit()
        return result.rowcount > 0

    async def delete(self, order_id: str) -> bool:
        await self._ensure_schema()
        async with self._sessions() as session:
            await session.execute(
                delete(OrderItemRow).where(OrderItemRow.order_id == order_id)
            )
            result = await session.execute(
                delete(OrderRow).where(OrderRow.order_id == order_id)
            )
            if result.rowcount == 0:
                await session.rollback()
                return False
            await session.commit()
        return True

    async def get_config(self) -> dict[str, str]:
        await self._ensure_schema()
        async with self._sessions() as session:
            rows = await session.scalars(select(LedgerConfig))
            return {row.key: row.value for row in rows}

    async def set_config(self, key: str, value: str) -> bool:
        await self._ensure_schema()
        async with self._sessions() as session:
            row = await session.get(LedgerConfig, key)
            if row is None:
                return False
            row.value = value
            row.updated_at = datetime.now(timezone.utc).isoformat()
            await session.commit()
        return True
