"""Redis implementations of repository interfaces."""

from .menu_repo_redis import RedisMenuCatalog, StockAdjustment

__all__ = ["RedisMenuCatalog", "StockAdjustment"]
