"""Repository interface for menu operations."""

from abc import ABC, abstractmethod


class MenuCatalog(ABC):
    """Contract for the menu catalog consumed while ordering."""

    @abstractmethod
    async def get_by_id(self, item_id, category=None):
        """Return a menu item, searching all categories when none is given."""
        raise NotImplementedError

    @abstractmethod
    async def list(self, category=None):
        """Return menu items, optionally restricted to ``category``."""
        raise NotImplementedError

    @abstractmethod
    async def create(self, item):
        """Store a new menu item and register its category."""
        raise NotImplementedError

    @abstractmethod
    async def update(self, item_id, fields):
        """Apply a partial update to a menu item."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, item_id):
        """Remove a menu item, dropping its category when emptied."""
        raise NotImplementedError

    @abstractmethod
    async def adjust_stock(self, item_id, category, delta):
        """Apply a signed stock delta, clamped at zero."""
        raise NotImplementedError
