"""Repository interface for the order ledger."""

from abc import ABC, abstractmethod


class OrderLedger(ABC):
    """Contract for an append-oriented store of orders and their line items.

    Implementations only persist rows; status rules, totals and identifier
    generation belong to :class:`~api.app.services.order_lifecycle.OrderLifecycle`.
    """

    @abstractmethod
    async def append(self, order, items):
        """Store ``order`` together with its ``items`` as one write."""
        raise NotImplementedError

    @abstractmethod
    async def query(self, filters):
        """Return orders matching an ``OrderQuery``, newest first."""
        raise NotImplementedError

    @abstractmethod
    async def get(self, order_id):
        """Return the order with its line items, or ``None``."""
        raise NotImplementedError

    @abstractmethod
    async def update_fields(self, order_id, fields):
        """Overwrite ``fields`` on a single order; return ``False`` if absent."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, order_id):
        """Remove an order and all of its items; return ``False`` if absent."""
        raise NotImplementedError

    @abstractmethod
    async def get_config(self):
        """Return the ledger's key/value configuration."""
        raise NotImplementedError

    @abstractmethod
    async def set_config(self, key, value):
        """Update an existing configuration key; return ``False`` if unknown."""
        raise NotImplementedError
