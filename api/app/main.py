# main.py

"""FastAPI application for QR table ordering at Hapiyo Coffee."""

from __future__ import annotations

import logging
import os
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from redis.asyncio import Redis, from_url
from sqlalchemy.ext.asyncio import AsyncEngine
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings, get_settings

from .db import get_engine
from .errors import OrderingError
from .middlewares import (
    CORSMiddleware,
    LoggingMiddleware,
    PrometheusMiddleware,
    RequestIdMiddleware,
    parse_origins,
)
from .obs import configure_logging
from .repos_redis import RedisMenuCatalog
from .repos_sqlalchemy import SqlOrderLedger
from .routes_categories import router as categories_router
from .routes_checkout import router as checkout_router
from .routes_ledger import router as ledger_router
from .routes_menu import router as menu_router
from .routes_metrics import router as metrics_router
from .routes_orders import router as orders_router
from .routes_tables import router as tables_router
from .services.notifications import OrderNotifier
from .services.occupancy import TableOccupancyGuard
from .services.order_gateway import OrderGateway
from .services.order_lifecycle import OrderLifecycle
from .utils.responses import err, ok
from .utils.ttl_cache import ResponseCache

logger = logging.getLogger("api")


def _validation_message(exc: RequestValidationError) -> str:
    fields = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        name = ".".join(loc) or "body"
        if name not in fields:
            fields.append(name)
    return "Missing or invalid fields: " + ", ".join(fields)


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(OrderingError)
    async def ordering_error_handler(request: Request, exc: OrderingError):
        log = logger.warning if exc.http_status >= 500 else logger.info
        log(
            exc.message,
            extra={"status": exc.http_status, "route": request.url.path},
        )
        return JSONResponse(err(exc.message, **exc.extra), status_code=exc.http_status)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(err(_validation_message(exc)), status_code=400)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(
            exc.detail, extra={"status": exc.status_code, "route": request.url.path}
        )
        return JSONResponse(err(str(exc.detail)), status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def general_error_handler(request: Request, exc: Exception):
        logger.exception(
            "unhandled_error", extra={"status": 500, "route": request.url.path}
        )
        return JSONResponse(err("Internal Server Error"), status_code=500)


def create_app(
    settings: Optional[Settings] = None,
    *,
    redis: Optional[Redis] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    engine: Optional[AsyncEngine] = None,
) -> FastAPI:
    """Build the application and wire its services onto ``app.state``.

    ``redis``, ``http_client`` and ``engine`` default to ones built from
    ``settings``; tests pass their own.
    """

    settings = settings or get_settings()
    app = FastAPI(title="Hapiyo Table Ordering API", version="1.0.0")
    app.state.settings = settings

    if engine is None:
        engine = get_engine(settings.ledger_database_url)
    ledger = SqlOrderLedger(
        engine,
        defaults={
            "order_prefix": settings.order_prefix,
            "notification_email": settings.notification_email or "",
        },
    )
    app.state.lifecycle = OrderLifecycle(
        ledger,
        timezone=settings.timezone,
        order_prefix=settings.order_prefix,
        policy=settings.transition_policy,
        notifier=OrderNotifier(
            settings.smtp_host, settings.smtp_port, settings.smtp_sender
        ),
        notification_email=settings.notification_email,
    )

    if redis is None:
        redis = from_url(settings.redis_url, decode_responses=True)
    app.state.redis = redis
    app.state.catalog = RedisMenuCatalog(app.state.redis)

    if http_client is None:
        http_client = httpx.AsyncClient(follow_redirects=True)
    app.state.gateway = OrderGateway(
        http_client,
        settings.ledger_url,
        orders_cache=ResponseCache(
            "orders",
            settings.cache_ttl_seconds,
            max_entries=settings.cache_max_entries,
        ),
        stats_cache=ResponseCache(
            "stats",
            settings.cache_ttl_seconds,
            max_entries=settings.cache_max_entries,
        ),
        read_timeout=settings.ledger_read_timeout,
        write_timeout=settings.ledger_write_timeout,
    )
    app.state.guard = TableOccupancyGuard(app.state.gateway)

    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware, allowed_origins=parse_origins(settings.allowed_origins)
    )
    app.add_middleware(LoggingMiddleware)

    _install_error_handlers(app)

    app.include_router(ledger_router)
    app.include_router(orders_router)
    app.include_router(checkout_router)
    app.include_router(tables_router)
    app.include_router(menu_router)
    app.include_router(categories_router)
    app.include_router(metrics_router)

    @app.get("/health")
    async def health() -> dict:
        return ok(status="ok")

    @app.on_event("shutdown")
    async def close_clients() -> None:
        await app.state.gateway.client.aclose()
        await app.state.redis.aclose()
        await engine.dispose()

    return app


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
configure_logging(getattr(logging, LOG_LEVEL, logging.INFO))

app = create_app()
