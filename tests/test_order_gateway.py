import httpx
import pytest

from api.app.errors import OrderingError, UpstreamTimeoutError, UpstreamUnavailableError
from api.app.services.order_gateway import OrderGateway
from api.app.utils.ttl_cache import ResponseCache

from tests._orders import ledger_body

pytestmark = pytest.mark.anyio

LEDGER = "http://ledger.test/exec"


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class ScriptedLedger:
    """Answer gateway calls from a list of orders and record every request."""

    def __init__(self):
        self.orders = [{"orderId": "HPY-1", "table": "5", "status": "pending"}]
        self.requests = []
        self.fail_with = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            raise self.fail_with
        action = request.url.params.get("action")
        if action == "getOrders" and request.url.params.get("table") == "broken":
            return httpx.Response(200, json={"success": False, "error": "Sheet locked"})
        if action == "getOrders":
            return httpx.Response(200, json=ledger_body(list(self.orders)))
        if action == "getStats":
            return httpx.Response(200, json={"success": True, "stats": {"totalOrders": len(self.orders)}})
        if action == "getOrderById":
            return httpx.Response(200, json={"success": False, "error": "Order not found"})
        if action == "createOrder":
            self.orders.append({"orderId": f"HPY-{len(self.orders) + 1}", "table": "6", "status": "pending"})
            return httpx.Response(200, json={"success": True, "orderId": self.orders[-1]["orderId"]})
        return httpx.Response(200, json={"success": False, "error": "Invalid action"})

    def reads(self, action):
        return [r for r in self.requests if r.url.params.get("action") == action]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def upstream():
    return ScriptedLedger()


@pytest.fixture
async def gateway(upstream, clock):
    client = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
    gw = OrderGateway(
        client,
        LEDGER,
        orders_cache=ResponseCache("orders", 3.0, clock=clock),
        stats_cache=ResponseCache("stats", 3.0, clock=clock),
    )
    yield gw
    await client.aclose()


async def test_second_read_within_ttl_is_served_from_cache(gateway, upstream, clock):
    first = await gateway.get_orders()
    clock.now += 2.9
    second = await gateway.get_orders()

    assert first.cache == "MISS"
    assert second.cache == "HIT"
    assert second.body == first.body
    assert len(upstream.reads("getOrders")) == 1


async def test_cache_expires_after_ttl(gateway, upstream, clock):
    await gateway.get_orders()
    clock.now += 3.0
    again = await gateway.get_orders()

    assert again.cache == "MISS"
    assert len(upstream.reads("getOrders")) == 2


async def test_write_invalidates_both_caches(gateway, upstream):
    before = await gateway.get_orders()
    await gateway.get_stats()

    await gateway.create_order({"table": "6", "items": [{"id": "x"}]})

    after = await gateway.get_orders()
    stats = await gateway.get_stats()
    assert after.cache == "MISS"
    assert stats.cache == "MISS"
    assert after.body["count"] == before.body["count"] + 1
    assert stats.body["stats"]["totalOrders"] == 2


async def test_no_cache_bypasses_and_refreshes(gateway, upstream):
    await gateway.get_orders()
    bypass = await gateway.get_orders(skip_cache=True)

    assert bypass.cache == "BYPASS"
    assert len(upstream.reads("getOrders")) == 2


async def test_filters_are_cached_separately(gateway, upstream):
    await gateway.get_orders(table="5")
    other = await gateway.get_orders(table="6")
    same = await gateway.get_orders(table="5")

    assert other.cache == "MISS"
    assert same.cache == "HIT"
    assert upstream.reads("getOrders")[0].url.params["table"] == "5"


async def test_failed_bodies_are_not_cached(gateway, upstream):
    single = await gateway.get_order("nope")
    assert single.cache is None
    assert single.body["success"] is False

    first = await gateway.get_orders(table="broken")
    second = await gateway.get_orders(table="broken")
    assert first.body["success"] is False
    assert second.cache == "MISS"
    assert len(upstream.reads("getOrders")) == 2


async def test_stale_value_served_when_ledger_times_out(gateway, upstream, clock):
    fresh = await gateway.get_orders()
    clock.now += 60
    upstream.fail_with = httpx.ReadTimeout("slow")

    stale = await gateway.get_orders()

    assert stale.cache == "STALE"
    assert stale.body == fresh.body


async def test_timeout_without_cache_is_an_error(gateway, upstream):
    upstream.fail_with = httpx.ReadTimeout("slow")
    with pytest.raises(UpstreamTimeoutError) as excinfo:
        await gateway.get_orders()
    assert excinfo.value.http_status == 504


async def test_transport_failure_is_unavailable(gateway, upstream):
    upstream.fail_with = httpx.ConnectError("refused")
    with pytest.raises(UpstreamUnavailableError):
        await gateway.get_stats()


async def test_write_failure_surfaces_and_still_invalidates(gateway, upstream):
    await gateway.get_orders()
    upstream.fail_with = httpx.WriteTimeout("slow")

    with pytest.raises(UpstreamTimeoutError):
        await gateway.create_order({"table": "6", "items": [{"id": "x"}]})

    assert len(gateway.orders_cache) == 0


async def test_non_json_response_is_unavailable(clock):
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda r: httpx.Response(200, text="<html>"))
    )
    gw = OrderGateway(
        client,
        LEDGER,
        orders_cache=ResponseCache("orders", 3.0, clock=clock),
        stats_cache=ResponseCache("stats", 3.0, clock=clock),
    )
    with pytest.raises(UpstreamUnavailableError):
        await gw.get_orders()
    await client.aclose()


async def test_missing_ledger_url(clock):
    gw = OrderGateway(
        httpx.AsyncClient(),
        None,
        orders_cache=ResponseCache("orders", 3.0, clock=clock),
        stats_cache=ResponseCache("stats", 3.0, clock=clock),
    )
    with pytest.raises(OrderingError) as excinfo:
        await gw.get_orders()
    assert excinfo.value.http_status == 500
    await gw.client.aclose()


async def test_timeouts_are_passed_per_request(gateway, upstream):
    await gateway.get_orders()
    await gateway.delete_order("HPY-1")

    read, write = upstream.requests
    assert read.extensions["timeout"]["read"] == 10.0
    assert write.extensions["timeout"]["read"] == 15.0
    assert write.method == "POST"
    assert write.url.params["action"] == "deleteOrder"


async def test_stale_fallback_can_be_refused(gateway, upstream):
    await gateway.get_orders(table="5")
    upstream.fail_with = httpx.ConnectError("refused")

    with pytest.raises(UpstreamUnavailableError):
        await gateway.get_orders(table="5", allow_stale=False)
    stale = await gateway.get_orders(table="5")
    assert stale.cache == "STALE"


async def test_unknown_params_do_not_create_cache_entries(gateway, upstream):
    for i in range(50):
        await gateway.read("getOrders", {"table": "5", "junk": str(i)})

    assert len(gateway.orders_cache) == 1
    assert upstream.reads("getOrders")[-1].url.params["junk"] == "0"
    assert len(upstream.reads("getOrders")) == 1


async def test_cache_size_is_capped(upstream, clock):
    client = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
    gw = OrderGateway(
        client,
        LEDGER,
        orders_cache=ResponseCache("orders", 3.0, clock=clock, max_entries=10),
        stats_cache=ResponseCache("stats", 3.0, clock=clock),
    )
    for table in range(200):
        await gw.get_orders(table=str(table))
    await client.aclose()

    assert len(gw.orders_cache) == 10
