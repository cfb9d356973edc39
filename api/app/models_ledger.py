"""Order ledger database models.

The tables mirror the columns of the order spreadsheet ledger: one row per
order, one row per line item, and a small key/value configuration table.
Timestamps are stored as ISO-8601 UTC strings so ordering by ``created_at``
is a plain string sort.
"""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class OrderRow(Base):
    """Orders placed from a table."""

    __tablename__ = "orders"

    order_id = Column(String(40), primary_key=True)
    table = Column("table_number", String(32), nullable=False, index=True)
    customer_name = Column(String(120), nullable=False, default="Guest")
    status = Column(String(16), nullable=False, index=True)
    total = Column(Integer, nullable=False, default=0)
    item_count = Column(Integer, nullable=False, default=0)
    notes = Column(Text, nullable=False, default="")
    created_at = Column(String(40), nullable=False, index=True)
    updated_at = Column(String(40), nullable=False)
    completed_at = Column(String(40), nullable=False, default="")


class OrderItemRow(Base):
    """Line items belonging to an order."""

    __tablename__ = "order_items"

    item_id = Column(String(48), primary_key=True)
    order_id = Column(
        String(40), ForeignKey("orders.order_id"), nullable=False, index=True
    )
    position = Column(Integer, nullable=False)
    menu_id = Column(String(64), nullable=False, default="")
    name = Column(String(120), nullable=False, default="")
    category = Column(String(64), nullable=False, default="")
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Integer, nullable=False)
    subtotal = Column(Integer, nullable=False)
    notes = Column(Text, nullable=False, default="")
    created_at = Column(String(40), nullable=False)


class LedgerConfig(Base):
    """Key/value settings editable through the ledger protocol."""

    __tablename__ = "ledger_config"

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    updated_at = Column(String(40), nullable=False, default="")
