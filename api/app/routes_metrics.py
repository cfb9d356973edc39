# routes_metrics.py

"""Prometheus metrics and /metrics endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest

# Counters
http_requests_total = Counter(
    "http_requests_total", "Total HTTP requests", ["path", "method", "status"]
)
http_errors_total = Counter("http_errors_total", "Total HTTP errors", ["status"])
http_errors_total.labels(status="0").inc(0)

orders_created_total = Counter("orders_created_total", "Total orders created")
orders_created_total.inc(0)

order_status_updates_total = Counter(
    "order_status_updates_total", "Order status changes applied", ["status"]
)

orders_deleted_total = Counter("orders_deleted_total", "Total orders deleted")
orders_deleted_total.inc(0)

table_occupied_denied_total = Counter(
    "table_occupied_denied_total",
    "Checkouts refused because the table still has an active order",
)
table_occupied_denied_total.inc(0)

occupancy_check_failed_open_total = Counter(
    "occupancy_check_failed_open_total",
    "Occupancy checks that could not reach the ledger and allowed the order",
)
occupancy_check_failed_open_total.inc(0)

gateway_cache_total = Counter(
    "gateway_cache_total", "Order gateway cache lookups", ["cache", "result"]
)

ledger_upstream_failures_total = Counter(
    "ledger_upstream_failures_total",
    "Failed calls from the order gateway to the ledger",
    ["kind"],
)

notifications_failed_total = Counter(
    "notifications_failed_total", "Order notifications that could not be sent"
)
notifications_failed_total.inc(0)

ledger_slow_queries_total = Counter(
    "ledger_slow_queries_total", "Ledger SQL statements over the slow threshold", ["db", "kind"]
)

router = APIRouter()


@router.get("/metrics")
async def metrics() -> Response:
    """Expose Prometheus metrics in text format."""

    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
