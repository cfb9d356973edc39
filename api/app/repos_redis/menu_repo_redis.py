from __future__ import annotations

"""Redis-backed :class:`MenuCatalog`.

Layout:

* ``menu:<category>:<id>`` hash, each field value JSON encoded
* ``menu:index:<category>`` list of item ids, newest first
* ``categories`` set of category names
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Iterable

from redis.asyncio import Redis

from ..errors import ConflictError, NotFoundError, ValidationError
from ..menu_seed import DEFAULT_MENU
from ..repos.menu_repo import MenuCatalog

logger = logging.getLogger("menu")

CATEGORIES_KEY = "categories"


def item_key(category: str, item_id: str) -> str:
    return f"menu:{category}:{item_id}"


def index_key(category: str) -> str:
    return f"menu:index:{category}"


def _text(value: Any) -> str:
    return value.decode() if isinstance(value, bytes) else str(value)


def _encode(fields: dict[str, Any]) -> dict[str, str]:
    return {key: json.dumps(value) for key, value in fields.items()}


def _decode(raw: dict) -> dict[str, Any]:
    data: dict[str, Any] = {}
    for key, value in raw.items():
        text = _text(value)
        try:
            data[_text(key)] = json.loads(text)
        except ValueError:
            data[_text(key)] = text
    return data


def _as_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def normalize_item(data: dict[str, Any]) -> dict[str, Any]:
    """Return ``data`` with every catalog field present and typed."""

    return {
        "id": str(data.get("id") or ""),
        "category": str(data.get("category") or ""),
        "name": str(data.get("name") or ""),
        "price": _as_int(data.get("price")),
        "description": str(data.get("description") or ""),
        "image": str(data.get("image") or ""),
        "available": data.get("available") is not False,
        "stock": _as_int(data.get("stock")),
    }


@dataclass
class StockAdjustment:
    id: str
    previous_stock: int
    new_stock: int
    available: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "previousStock": self.previous_stock,
            "newStock": self.new_stock,
            "available": self.available,
        }


class RedisMenuCatalog(MenuCatalog):
    def __init__(self, redis: Redis) -> None:
        self.redis = redis

    async def categories(self) -> list[str]:
        members = await self.redis.smembers(CATEGORIES_KEY)
        return sorted(_text(m) for m in members)

    async def _ids(self, category: str) -> list[str]:
        return [_text(i) for i in await self.redis.lrange(index_key(category), 0, -1)]

    async def _load(self, category: str, item_id: str) -> dict[str, Any] | None:
        raw = await self.redis.hgetall(item_key(category, item_id))
        if not raw:
            return None
        data = _decode(raw)
        if not data.get("id"):
            return None
        return normalize_item(data)

    async def _find(self, item_id: str) -> dict[str, Any] | None:
        for category in await self.categories():
            item = await self._load(category, item_id)
            if item is not None:
                return item
        return None

    async def get_by_id(self, item_id, category=None):
        if category:
            return await self._load(category, item_id)
        return await self._find(item_id)

    async def list(self, category=None):
        categories = [category] if category else await self.categories()
        items = []
        for cat in categories:
            for item_id in await self._ids(cat):
                item = await self._load(cat, item_id)
                if item is not None:
                    items.append(item)
        return items

    async def create(self, item):
        missing = [f for f in ("id", "category", "name") if not item.get(f)]
        if missing or item.get("price") is None:
            raise ValidationError("Missing required fields: id, category, name, price")
        menu = normalize_item(item)
        if await self.redis.exists(item_key(menu["category"], menu["id"])):
            raise ConflictError("Menu with this ID already exists")

        pipe = self.redis.pipeline()
        pipe.hset(item_key(menu["category"], menu["id"]), mapping=_encode(menu))
        pipe.lpush(index_key(menu["category"]), menu["id"])
        pipe.sadd(CATEGORIES_KEY, menu["category"])
        await pipe.execute()
        logger.info("menu item %s created in %s", menu["id"], menu["category"])
        return menu

    async def _drop_if_empty(self, category: str) -> None:
        if await self.redis.llen(index_key(category)) == 0:
            await self.redis.srem(CATEGORIES_KEY, category)

    async def update(self, item_id, fields):
        existing = await self._find(item_id)
        if existing is None:
            raise NotFoundError("Menu not found")
        old_category = existing["category"]
        menu = normalize_item({**existing, **fields, "id": item_id})
        if not menu["category"]:
            menu["category"] = old_category

        if menu["category"] == old_category:
            await self.redis.hset(
                item_key(old_category, item_id), mapping=_encode(menu)
            )
            return menu

        pipe = self.redis.pipeline()
        pipe.delete(item_key(old_category, item_id))
        pipe.lrem(index_key(old_category), 0, item_id)
        pipe.hset(item_key(menu["category"], item_id), mapping=_encode(menu))
        pipe.lpush(index_key(menu["category"]), item_id)
        pipe.sadd(CATEGORIES_KEY, menu["category"])
        await pipe.execute()
        await self._drop_if_empty(old_category)
        logger.info(
            "menu item %s moved %s -> %s", item_id, old_category, menu["category"]
        )
        return menu

    async def delete(self, item_id):
        existing = await self._find(item_id)
        if existing is None:
            raise NotFoundError("Menu not found")
        category = existing["category"]
        pipe = self.redis.pipeline()
        pipe.delete(item_key(category, item_id))
        pipe.lrem(index_key(category), 0, item_id)
        await pipe.execute()
        await self._drop_if_empty(category)
        logger.info("menu item %s deleted from %s", item_id, category)
        return category

    async def adjust_stock(self, item_id, category, delta):
        """Add ``delta`` to an item's stock, never going below zero.

        Availability follows the result: zero stock marks the item
        unavailable, anything above marks it available again.
        """

        if not item_id or not category or delta is None:
            raise ValidationError("Missing required fields: id, category, quantity")
        item = await self._load(category, item_id)
        if item is None:
            raise NotFoundError("Menu not found")
        previous = item["stock"]
        new_stock = max(0, previous + int(delta))
        available = new_stock > 0
        await self.redis.hset(
            item_key(category, item_id),
            mapping=_encode({"stock": new_stock, "available": available}),
        )
        return StockAdjustment(item_id, previous, new_stock, available)

    async def bulk_adjust_stock(self, updates: Iterable[dict]) -> list[dict[str, Any]]:
        """Apply several adjustments; one failure does not stop the rest."""

        results = []
        for update in updates:
            item_id = update.get("id")
            try:
                adjustment = await self.adjust_stock(
                    item_id, update.get("category"), update.get("quantity")
                )
            except (ValidationError, NotFoundError) as exc:
                results.append({"id": item_id, "success": False, "error": exc.message})
                continue
            results.append({"success": True, **adjustment.to_dict()})
        return results

    async def list_categories(self) -> list[dict[str, Any]]:
        return [
            {"name": name, "count": await self.redis.llen(index_key(name))}
            for name in await self.categories()
        ]

    async def create_category(self, name: str | None) -> str:
        category = (name or "").strip().lower()
        if not category:
            raise ValidationError("Category name is required")
        if await self.redis.sismember(CATEGORIES_KEY, category):
            raise ConflictError("Category already exists")
        await self.redis.sadd(CATEGORIES_KEY, category)
        return category

    async def delete_category(self, name: str | None) -> str:
        if not name:
            raise ValidationError("Category name is required")
        if await self.redis.llen(index_key(name)) > 0:
            raise ConflictError(
                "Cannot delete category with menu items. Remove all items first."
            )
        await self.redis.srem(CATEGORIES_KEY, name)
        return name

    async def seed(self, items: Iterable[dict] = DEFAULT_MENU) -> list[dict[str, str]]:
        """Replace the whole catalog with ``items``."""

        pipe = self.redis.pipeline()
        for category in await self.categories():
            for item_id in await self._ids(category):
                pipe.delete(item_key(category, item_id))
            pipe.delete(index_key(category))
        pipe.delete(CATEGORIES_KEY)

        results = []
        for raw in items:
            menu = normalize_item(raw)
            pipe.hset(item_key(menu["category"], menu["id"]), mapping=_encode(menu))
            pipe.lpush(index_key(menu["category"]), menu["id"])
            pipe.sadd(CATEGORIES_KEY, menu["category"])
            results.append({"id": menu["id"], "name": menu["name"], "status": "added"})
        await pipe.execute()
        logger.info("menu seeded with %d items", len(results))
        return results

    async def seed_status(self) -> tuple[int, list[dict[str, Any]]]:
        details = [
            {"category": c["name"], "count": c["count"]}
            for c in await self.list_categories()
        ]
        return sum(d["count"] for d in details), details


__all__ = [
    "RedisMenuCatalog",
    "StockAdjustment",
    "normalize_item",
    "item_key",
    "index_key",
    "CATEGORIES_KEY",
]
