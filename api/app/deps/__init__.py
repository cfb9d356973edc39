from .services import get_catalog, get_gateway, get_guard, get_lifecycle

__all__ = ["get_catalog", "get_gateway", "get_guard", "get_lifecycle"]
