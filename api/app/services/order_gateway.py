from __future__ import annotations

"""Forwarding layer between the API and the order ledger.

Every call goes over HTTP to ``ledger_url`` with a bounded timeout. Order
lists and statistics are cached briefly to absorb dashboard polling, any
mutating write clears both caches, and a failed read falls back to the
last cached value when there is one.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping

import httpx

from ..errors import OrderingError, UpstreamTimeoutError, UpstreamUnavailableError
from ..routes_metrics import gateway_cache_total, ledger_upstream_failures_total
from ..utils.ttl_cache import ResponseCache, cache_key

logger = logging.getLogger("gateway")

MUTATING_ACTIONS = frozenset({"createOrder", "updateOrderStatus", "deleteOrder"})
# only ledger filters take part in cache keys
KEY_PARAMS = ("table", "status", "today", "limit")


@dataclass
class GatewayResponse:
    """Ledger response body plus how it was obtained.

    ``cache`` is ``HIT``, ``MISS``, ``BYPASS`` or ``STALE`` for cacheable
    reads and ``None`` otherwise.
    """

    body: Any
    status_code: int = 200
    cache: str | None = None

    @property
    def succeeded(self) -> bool:
        return (
            self.status_code == 200
            and isinstance(self.body, dict)
            and self.body.get("success") is not False
            and "error" not in self.body
        )


class OrderGateway:
    """Proxy ledger reads and writes with timeouts and read caching."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        ledger_url: str | None,
        *,
        orders_cache: ResponseCache,
        stats_cache: ResponseCache,
        read_timeout: float = 10.0,
        write_timeout: float = 15.0,
    ) -> None:
        self.client = client
        self.ledger_url = ledger_url
        self.orders_cache = orders_cache
        self.stats_cache = stats_cache
        self.read_timeout = read_timeout
        self.write_timeout = write_timeout

    def _cache_for(self, action: str) -> ResponseCache | None:
        if action in ("getOrders", "getOrdersByTable"):
            return self.orders_cache
        if action == "getStats":
            return self.stats_cache
        return None

    def invalidate(self) -> None:
        self.orders_cache.clear()
        self.stats_cache.clear()

    async def _send(
        self,
        method: str,
        params: Mapping[str, Any],
        body: Any,
        timeout: float,
    ) -> GatewayResponse:
        if not self.ledger_url:
            raise OrderingError("Order ledger URL not configured")
        try:
            resp = await self.client.request(
                method, self.ledger_url, params=dict(params), json=body, timeout=timeout
            )
        except httpx.TimeoutException as exc:
            ledger_upstream_failures_total.labels(kind="timeout").inc()
            logger.warning("ledger %s %s timed out", method, params.get("action"))
            raise UpstreamTimeoutError("Order ledger timed out") from exc
        except httpx.HTTPError as exc:
            ledger_upstream_failures_total.labels(kind="transport").inc()
            logger.warning("ledger %s %s failed: %s", method, params.get("action"), exc)
            raise UpstreamUnavailableError("Failed to reach order ledger") from exc
        try:
            data = resp.json()
        except ValueError as exc:
            ledger_upstream_failures_total.labels(kind="invalid").inc()
            raise UpstreamUnavailableError(
                "Order ledger returned an invalid response"
            ) from exc
        return GatewayResponse(data, resp.status_code)

    async def read(
        self,
        action: str,
        params: Mapping[str, Any] | None = None,
        skip_cache: bool = False,
        allow_stale: bool = True,
    ) -> GatewayResponse:
        """Forward a GET ``action`` to the ledger, consulting the cache first.

        With ``allow_stale=False`` an upstream failure is raised even when an
        old cached body exists.
        """

        params = dict(params or {})
        cache = self._cache_for(action)
        key = cache_key(action, {k: v for k, v in params.items() if k in KEY_PARAMS})
        if cache is not None and not skip_cache:
            cached = cache.get(key)
            if cached is not None:
                gateway_cache_total.labels(cache=cache.name, result="hit").inc()
                return GatewayResponse(cached, cache="HIT")

        try:
            response = await self._send(
                "GET", {"action": action, **params}, None, self.read_timeout
            )
        except (UpstreamTimeoutError, UpstreamUnavailableError):
            stale = cache.get_stale(key) if cache is not None and allow_stale else None
            if stale is None:
                raise
            gateway_cache_total.labels(cache=cache.name, result="stale").inc()
            logger.warning("serving stale %s after ledger failure", cache.name)
            return GatewayResponse(stale, cache="STALE")

        if cache is not None:
            result = "bypass" if skip_cache else "miss"
            gateway_cache_total.labels(cache=cache.name, result=result).inc()
            response.cache = result.upper()
            if response.succeeded:
                cache.put(key, response.body)
        return response

    async def write(self, action: str, body: Any) -> GatewayResponse:
        """Forward a POST ``action``; mutating actions clear both caches."""

        try:
            return await self._send(
                "POST", {"action": action}, body, self.write_timeout
            )
        finally:
            # a timed-out write may still land upstream
            if action in MUTATING_ACTIONS:
                self.invalidate()

    async def get_orders(
        self, skip_cache: bool = False, allow_stale: bool = True, **filters: Any
    ) -> GatewayResponse:
        params = {k: v for k, v in filters.items() if v is not None}
        return await self.read(
            "getOrders", params, skip_cache=skip_cache, allow_stale=allow_stale
        )

    async def get_stats(self, skip_cache: bool = False) -> GatewayResponse:
        return await self.read("getStats", skip_cache=skip_cache)

    async def get_order(self, order_id: str) -> GatewayResponse:
        return await self.read("getOrderById", {"orderId": order_id})

    async def create_order(self, payload: dict) -> GatewayResponse:
        return await self.write("createOrder", payload)

    async def update_order_status(self, order_id: str, status: str) -> GatewayResponse:
        return await self.write("updateOrderStatus", {"orderId": order_id, "status": status})

    async def delete_order(self, order_id: str) -> GatewayResponse:
        return await self.write("deleteOrder", {"orderId": order_id})


__all__ = ["GatewayResponse", "OrderGateway", "MUTATING_ACTIONS"]
