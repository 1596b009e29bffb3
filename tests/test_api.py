"""HTTP endpoints, exercised through FastAPI's TestClient."""

import json

from tests.conftest import StubSuggester
from main import app, get_suggester


def cart_line(client, item_id, qty):
    item = client.get(f"/api/items/{item_id}").json()
    item["quantity_in_cart"] = qty
    return item


def test_root_and_health(client):
    assert client.get("/").json() == {"name": "LankaPOS API", "status": "ok"}
    assert client.get("/api/health").json() == {"status": "ok"}


def test_list_and_get_items(client):
    items = client.get("/api/items").json()

    assert len(items) == 7
    assert client.get("/api/items/ITM005").json()["name"] == "Laojee Tea Leaves 200g"
    assert client.get("/api/items/ITM404").status_code == 404


def test_create_item(client):
    resp = client.post("/api/items", json={"name": "Elephant House Cream Soda", "price": 220, "stock": 24})

    assert resp.status_code == 201
    assert resp.json()["id"] == "ITM008"
    assert client.get("/api/items/ITM008").json()["stock"] == 24


def test_create_item_validation(client):
    assert client.post("/api/items", json={"name": "Ok name", "price": 0, "stock": 1}).status_code == 422
    assert client.post("/api/items", json={"name": "Ok name", "price": 10, "stock": -1}).status_code == 422
    assert client.post("/api/items", json={"name": "ab", "price": 10, "stock": 1}).status_code == 422


def test_process_sale(client):
    body = {"items": [cart_line(client, "ITM003", 45)], "total_amount": 980 * 45}

    resp = client.post("/api/sales", json=body)

    assert resp.status_code == 201
    data = resp.json()
    assert data["sale"]["id"] == "SALE0001"
    assert data["sale"]["total_amount"] == 44100
    assert data["sale"]["receipt_settings_snapshot"]["shop_name"] == "LankaPOS Grocery"
    assert data["low_stock_alerts"] == ["Anchor Full Cream Milk Powder 400g is running low (Stock: 5)!"]
    assert client.get("/api/items/ITM003").json()["stock"] == 5
    assert [s["id"] for s in client.get("/api/sales").json()] == ["SALE0001"]
    assert client.get("/api/sales/SALE0001").json()["items"][0]["quantity"] == 45


def test_empty_cart_rejected(client):
    resp = client.post("/api/sales", json={"items": [], "total_amount": 0})

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Cart is empty"
    assert client.get("/api/sales").json() == []


def test_unknown_item_rejected(client):
    line = {"id": "ITM999", "name": "Ghost", "price": 10, "stock": 1, "quantity_in_cart": 1}

    resp = client.post("/api/sales", json={"items": [line], "total_amount": 10})

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Unknown item: ITM999"


def test_total_mismatch_rejected(client):
    body = {"items": [cart_line(client, "ITM001", 2)], "total_amount": 100}

    resp = client.post("/api/sales", json=body)

    assert resp.status_code == 400
    assert client.get("/api/items/ITM001").json()["stock"] == 100


def test_missing_sale_is_404(client):
    assert client.get("/api/sales/SALE0042").status_code == 404
    assert client.get("/api/sales/SALE0042/receipt").status_code == 404


def test_receipt_uses_snapshot(client):
    client.post("/api/sales", json={"items": [cart_line(client, "ITM006", 2)], "total_amount": 160})
    client.patch("/api/settings/receipt", json={"shop_name": "Renamed", "grand_total": False})

    lines = client.get("/api/sales/SALE0001/receipt").json()["lines"]

    assert lines[0] == "LankaPOS Grocery"
    assert "Sunlight Soap Bar (ITM006) 2 x LKR 80.00 = LKR 160.00" in lines
    assert lines[-1] == "Total: LKR 160.00"


def test_receipt_settings_partial_update(client):
    before = client.get("/api/settings/receipt").json()

    resp = client.patch("/api/settings/receipt", json={"shop_name": "NewName"})

    after = resp.json()
    assert resp.status_code == 200
    assert after["shop_name"] == "NewName"
    assert {k: v for k, v in after.items() if k != "shop_name"} == \
        {k: v for k, v in before.items() if k != "shop_name"}


def test_low_stock_threshold(client):
    assert client.get("/api/settings/low-stock-threshold").json() == {"low_stock_threshold": 10}


def test_restock_placeholder_skips_model(client, suggester):
    resp = client.get("/api/restock-suggestions")

    assert resp.status_code == 200
    assert json.loads(resp.json()["restock_suggestions"])[0]["itemName"] == "No sales data available"
    assert suggester.calls == []


def test_restock_suggestions(client, suggester):
    client.post("/api/sales", json={"items": [cart_line(client, "ITM004", 3)], "total_amount": 840})

    resp = client.get("/api/restock-suggestions")

    assert resp.status_code == 200
    assert resp.json()["restock_suggestions"] == suggester.answer
    assert json.loads(suggester.calls[0])[0] == {
        "itemName": "White Sugar 1kg",
        "quantitySold": 3,
        "saleDate": client.get("/api/sales/SALE0001").json()["timestamp"][:10],
    }


def test_restock_failure_is_502(client):
    app.dependency_overrides[get_suggester] = lambda: StubSuggester(error=RuntimeError("quota"))
    client.post("/api/sales", json={"items": [cart_line(client, "ITM004", 1)], "total_amount": 280})

    resp = client.get("/api/restock-suggestions")

    assert resp.status_code == 502
    assert resp.json() == {"error": "Failed to generate restocking suggestions."}


def test_seed_resets_store(client):
    client.post("/api/sales", json={"items": [cart_line(client, "ITM001", 1)], "total_amount": 250})

    resp = client.post("/api/seed")

    assert resp.json() == {"status": "ok", "items": 7, "sales": 0}
    assert client.get("/api/items/ITM001").json()["stock"] == 100
