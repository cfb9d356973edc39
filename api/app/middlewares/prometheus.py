"""Prometheus middleware for HTTP request metrics."""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from ..routes_metrics import http_errors_total, http_requests_total


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Count requests per route template and error responses per status."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        # route templates keep table and item ids out of label values
        route = request.scope.get("route")
        path = getattr(route, "path", None) or "unmatched"
        status = str(response.status_code)
        http_requests_total.labels(path=path, method=request.method, status=status).inc()
        if 400 <= response.status_code < 600:
            http_errors_total.labels(status=status).inc()
        return response
