import pytest

from api.app.errors import ValidationError
from api.app.qr import render_table_qr, resolve_table_code, table_url

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


def test_table_url():
    assert table_url("https://order.hapiyo.test/", "5") == "https://order.hapiyo.test/?table=5"


def test_render_is_png():
    assert render_table_qr("5", "https://order.hapiyo.test").startswith(PNG_MAGIC)


@pytest.mark.parametrize(
    "code,table",
    [
        ("5", "5"),
        (" 12 ", "12"),
        ("https://order.hapiyo.test/?table=7", "7"),
        ("http://localhost:3000/?lang=id&table=A3", "A3"),
    ],
)
def test_resolve_table_code(code, table):
    assert resolve_table_code(code) == table


@pytest.mark.parametrize(
    "code",
    ["", None, "five", "https://order.hapiyo.test/", "ftp://x/?table=1", "javascript:alert(1)"],
)
def test_resolve_rejects_garbage(code):
    with pytest.raises(ValidationError, match="Invalid table code"):
        resolve_table_code(code)


@pytest.mark.anyio
async def test_qr_route_encodes_public_url(client):
    resp = await client.get("/api/tables/9/qr.png")
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/png"
    assert resp.content.startswith(PNG_MAGIC)


@pytest.mark.anyio
async def test_resolve_route(client):
    ok = await client.get(
        "/api/tables/resolve", params={"code": "https://order.hapiyo.test/?table=4"}
    )
    bad = await client.get("/api/tables/resolve", params={"code": "nope"})
    assert ok.json() == {"success": True, "table": "4"}
    assert bad.status_code == 400
    assert bad.json()["error"] == "Invalid table code"


@pytest.mark.anyio
async def test_availability_route(client):
    free = (await client.get("/api/tables/3/availability")).json()
    assert free == {"success": True, "table": "3", "available": True}

    await client.post(
        "/ledger",
        params={"action": "createOrder"},
        json={"table": "3", "items": [{"id": "coffee_001", "price": 25000}]},
    )
    busy = (await client.get("/api/tables/3/availability")).json()
    assert busy["available"] is False
    assert busy["activeOrder"]["table"] == "3"
