"""Dependency helpers returning the services wired onto ``app.state``."""

from fastapi import Request

from ..repos_redis import RedisMenuCatalog
from ..services.occupancy import TableOccupancyGuard
from ..services.order_gateway import OrderGateway
from ..services.order_lifecycle import OrderLifecycle


def get_lifecycle(request: Request) -> OrderLifecycle:
    return request.app.state.lifecycle


def get_gateway(request: Request) -> OrderGateway:
    return request.app.state.gateway


def get_guard(request: Request) -> TableOccupancyGuard:
    return request.app.state.guard


def get_catalog(request: Request) -> RedisMenuCatalog:
    """Return the menu catalog backed by ``app.state.redis``."""
    return request.app.state.catalog
