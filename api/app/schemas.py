# schemas.py

"""Pydantic models for API payloads."""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, Field


class MenuItemIn(BaseModel):
    """Input schema for creating a menu item."""

    id: str
    category: str
    name: str
    price: int = Field(ge=0)
    description: str = ""
    image: str = ""
    available: bool = True
    stock: int = Field(default=0, ge=0)


class MenuItemUpdate(BaseModel):
    """Partial update for a menu item; only fields sent are applied."""

    category: Optional[str] = None
    name: Optional[str] = None
    price: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None
    image: Optional[str] = None
    available: Optional[bool] = None
    stock: Optional[int] = Field(default=None, ge=0)


class StockUpdateIn(BaseModel):
    """Signed stock change: positive restocks, negative consumes."""

    id: str
    category: str
    quantity: int


class BulkStockIn(BaseModel):
    updates: List[StockUpdateIn]


class CategoryIn(BaseModel):
    name: str


class CheckoutItem(BaseModel):
    id: str
    category: Optional[str] = None
    quantity: int = Field(default=1, ge=1)
    notes: str = ""


class CheckoutIn(BaseModel):
    """Cart submitted by a customer at a table."""

    table: Union[int, str]
    items: List[CheckoutItem]
    notes: str = ""
    customerName: str = ""


__all__ = [
    "MenuItemIn",
    "MenuItemUpdate",
    "StockUpdateIn",
    "BulkStockIn",
    "CategoryIn",
    "CheckoutItem",
    "CheckoutIn",
]
