import pytest

pytestmark = pytest.mark.anyio

MOCHA = {
    "id": "coffee_010",
    "category": "coffee",
    "name": "Iced Mocha",
    "price": 30000,
    "stock": 4,
}


async def test_seed_then_browse(client):
    empty = (await client.get("/api/seed")).json()
    assert empty["message"] == "Database is empty"
    assert empty["totalItems"] == 0

    seeded = (await client.post("/api/seed")).json()
    assert seeded["itemsAdded"] == 18

    menu = (await client.get("/api/menu")).json()
    assert len(menu["menus"]) == 18
    assert menu["categories"] == ["coffee", "meals", "non-coffee", "snacks"]

    snacks = (await client.get("/api/menu", params={"category": "snacks"})).json()
    assert {m["category"] for m in snacks["menus"]} == {"snacks"}
    assert "categories" not in snacks

    status = (await client.get("/api/seed")).json()
    assert status["message"] == "Database has menu items"
    assert status["totalItems"] == 18


async def test_menu_crud(client):
    created = await client.post("/api/menu", json=MOCHA)
    assert created.json()["menu"]["available"] is True

    dup = await client.post("/api/menu", json=MOCHA)
    assert dup.status_code == 200
    assert dup.json()["error"] == "Menu with this ID already exists"

    updated = await client.put("/api/menu/coffee_010", json={"price": 32000})
    assert updated.json()["menu"]["price"] == 32000
    assert updated.json()["menu"]["name"] == "Iced Mocha"

    fetched = (await client.get("/api/menu/coffee_010")).json()
    assert fetched["menu"]["price"] == 32000

    deleted = (await client.delete("/api/menu/coffee_010")).json()
    assert deleted["success"] is True
    missing = (await client.get("/api/menu/coffee_010")).json()
    assert missing["success"] is False
    assert missing["error"] == "Menu not found"


async def test_create_menu_validation(client):
    resp = await client.post("/api/menu", json={"id": "x", "category": "coffee"})
    assert resp.status_code == 400
    assert resp.json()["success"] is False

    negative = await client.post("/api/menu", json={**MOCHA, "price": -1})
    assert negative.status_code == 400


async def test_stock_adjustment(client):
    await client.post("/api/menu", json=MOCHA)

    resp = await client.patch(
        "/api/menu/stock", json={"id": "coffee_010", "category": "coffee", "quantity": -10}
    )

    body = resp.json()
    assert body["newStock"] == 0
    assert body["available"] is False
    assert body["message"] == "Stock updated from 4 to 0"


async def test_bulk_stock(client):
    await client.post("/api/menu", json=MOCHA)

    resp = await client.post(
        "/api/menu/stock",
        json={
            "updates": [
                {"id": "coffee_010", "category": "coffee", "quantity": 6},
                {"id": "nope", "category": "coffee", "quantity": 1},
            ]
        },
    )

    body = resp.json()
    assert body["message"] == "Processed 2 stock updates"
    assert body["results"][0]["newStock"] == 10
    assert body["results"][1]["success"] is False


async def test_category_endpoints(client):
    created = (await client.post("/api/categories", json={"name": "Desserts"})).json()
    assert created["category"] == "desserts"

    await client.post("/api/menu", json=MOCHA)
    listing = (await client.get("/api/categories")).json()
    assert listing["categories"] == [
        {"name": "coffee", "count": 1},
        {"name": "desserts", "count": 0},
    ]

    busy = (await client.delete("/api/categories", params={"name": "coffee"})).json()
    assert busy["success"] is False
    gone = (await client.delete("/api/categories", params={"name": "desserts"})).json()
    assert gone["success"] is True
    nameless = await client.delete("/api/categories")
    assert nameless.status_code == 400
