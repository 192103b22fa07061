import pytest
from fastapi.testclient import TestClient

from depot_cart.database.catalog import InMemoryCatalog
from depot_cart.database.kv import InMemoryKeyValueStore
from depot_cart.engine import build_engine
from depot_cart.main import app


@pytest.fixture
def client():
    app.state.engine = build_engine(storage=InMemoryKeyValueStore(), catalog=InMemoryCatalog())
    with TestClient(app) as test_client:
        yield test_client


def _add(client, product_id, variant_id, quantity=1):
    return client.post(
        "/api/cart/items",
        json={"productId": product_id, "variantId": variant_id, "quantity": quantity},
    )


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_add_requires_location(client):
    response = _add(client, 101, 1002)
    assert response.status_code == 400


def test_unknown_pincode(client):
    response = client.post("/api/delivery/pincode/999999")
    assert response.status_code == 404
    assert response.json()["detail"] == "Service not available for this pincode"


def test_cart_follows_location_change(client):
    context = client.post("/api/delivery/pincode/421201").json()
    assert context["depotId"] == 1

    response = _add(client, 101, 1002, quantity=2)
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Added 2x A2 Cow Milk (1 Ltrs) to cart"
    assert body["subtotal"] == 200
    assert body["totalQuantity"] == 2

    response = _add(client, 102, 1003)
    assert response.status_code == 200

    assert client.post("/api/delivery/pincode/400601").json()["depotId"] == 3

    items = {item["productId"]: item for item in client.get("/api/cart").json()["items"]}
    milk = items[101]
    assert milk["variantId"] == 3002
    assert milk["price"] == 110
    assert milk["quantity"] == 2
    assert milk["originalDepotId"] == 1
    assert milk["originalVariantId"] == 1002
    assert milk["isAvailable"] is True

    buffalo = items[102]
    assert buffalo["isAvailable"] is False
    assert buffalo["unavailableReason"] == "Not available in this location"

    summary = client.get("/api/cart/summary").json()
    assert summary["canCheckout"] is True
    assert [i["variantId"] for i in summary["availableItems"]] == [3002]
    assert summary["availableSubtotal"] == 220


def test_validate_reports_summary(client):
    client.post("/api/delivery/pincode/421201")
    _add(client, 102, 1003)

    response = client.post("/api/cart/validate", json={"depotId": 3})

    assert response.status_code == 200
    assert response.json()["message"] == "No items are available in this location"


def test_quantity_endpoints(client):
    client.post("/api/delivery/pincode/421201")
    _add(client, 101, 1002)

    assert client.post("/api/cart/items/1002/increment").json()["totalQuantity"] == 2
    assert client.post("/api/cart/items/1002/decrement").json()["totalQuantity"] == 1
    assert client.post("/api/cart/items/1002/decrement").json()["totalQuantity"] == 1
    assert client.post("/api/cart/items/9999/increment").status_code == 404

    assert client.delete("/api/cart/items/1002").json()["items"] == []


def test_empty_cart_cannot_checkout(client):
    summary = client.get("/api/cart/summary").json()
    assert summary["canCheckout"] is False
    assert summary["message"] == "No items are available for checkout"


def test_quote_subscription_savings(client):
    response = client.get(
        "/api/pricing/quote",
        params={"product_id": 101, "unit": "1L", "period": 15, "channel": "home"},
    )

    assert response.status_code == 200
    quote = response.json()
    assert quote["variantId"] == 1002
    assert quote["price"] == 80
    assert quote["savingsPercent"] == 20
    assert quote["savingsAmount"] == 20


def test_quote_unknown_product(client):
    assert client.get("/api/pricing/quote", params={"product_id": 999}).status_code == 404


def test_schedule_options_follow_period(client):
    options = client.get("/api/pricing/schedules", params={"period": 10}).json()
    assert [o["id"] for o in options] == ["daily"]

    options = client.get("/api/pricing/schedules", params={"period": 30}).json()
    assert [o["id"] for o in options] == ["daily", "alternate-days", "day1-day2", "select-days"]


def test_estimate_rejects_illegal_schedule(client):
    response = client.post(
        "/api/pricing/estimate",
        json={"productId": 101, "variantId": 1002, "period": 3, "option": "select-days"},
    )
    assert response.status_code == 400


def test_delivery_dates_for_area(client):
    client.post("/api/delivery/pincode/421201")

    response = client.get("/api/delivery/dates", params={"today": "2026-10-21"})

    dates = [d["deliveryDate"] for d in response.json()["dates"]]
    assert dates == ["2026-10-22", "2026-10-26"]
