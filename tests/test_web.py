import pytest
from fastapi.testclient import TestClient

from voice_checkout.adapters.inbound.web.fastapi_app import create_app


@pytest.fixture
def client(wiring):
    app = create_app(
        wiring.checkout, wiring.cart, wiring.lifecycle, wiring.dispatcher, wiring.catalog
    )
    return TestClient(app)


def _finalize(client, args):
    res = client.post(
        "/sessions/s-1/tools/update_order_data", json=dict(args, confirm="yes")
    )
    assert res.status_code == 200
    return res.json()["order"]


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_menu_and_tools(client):
    menu = client.get("/menu").json()
    assert {"name": "Fries", "category": "sides", "unit_price": "3.19", "available": True} in menu

    tools = client.get("/tools").json()
    assert "update_order_data" in {t["name"] for t in tools}


def test_tool_call_and_draft(client):
    res = client.post(
        "/sessions/s-1/tools/update_order_data",
        json={"name": "Juan Perez", "confirm": "no"},
    )
    assert res.status_code == 200
    assert res.json()["success"] is True

    draft = client.get("/sessions/s-1/draft").json()
    assert draft["name"] == "Juan Perez"
    assert draft["state"] == "collecting"


def test_tool_failures_stay_in_body(client):
    res = client.post("/sessions/s-1/tools/update_order_data", json={"confirm": "yes"})

    assert res.status_code == 200
    assert res.json()["error"] == "IncompleteOrder"


def test_unknown_tool_is_404(client):
    res = client.post("/sessions/s-1/tools/nope", json={})

    assert res.status_code == 404
    assert res.json()["error"] == "UnknownTool"


def test_call_id_header_replays(client, wiring, full_order_args):
    body = dict(full_order_args, confirm="yes")
    headers = {"Call-Id": "call-9"}

    first = client.post("/sessions/s-1/tools/update_order_data", json=body, headers=headers)
    retry = client.post("/sessions/s-1/tools/update_order_data", json=body, headers=headers)

    assert first.json() == retry.json()
    assert len(wiring.payment.charges) == 1


def test_cart_routes(client):
    res = client.post("/sessions/s-1/cart/items", json={"menu_item": "Hamburger", "quantity": 2})
    assert res.status_code == 200
    assert res.json()["total_quantity"] == 2

    res = client.patch("/sessions/s-1/cart/items/Hamburger", json={"quantity": 5})
    assert res.json()["items"][0]["quantity"] == 5

    res = client.delete("/sessions/s-1/cart/items/Hamburger")
    assert res.json()["item_count"] == 0

    assert client.get("/sessions/s-1/cart").status_code == 200


def test_unknown_session_maps_to_404(client):
    for path in ("/sessions/ghost/draft", "/sessions/ghost/cart"):
        res = client.get(path)
        assert res.status_code == 404
    assert client.delete("/sessions/ghost").status_code == 404


def test_unknown_menu_item_is_400(client):
    res = client.post("/sessions/s-1/cart/items", json={"menu_item": "Pizza"})

    assert res.status_code == 400
    assert res.json()["type"] == "ValidationError"


def test_request_validation_is_400(client):
    res = client.post("/sessions/s-1/cart/items", json={"quantity": 1})

    assert res.status_code == 400
    assert res.json()["type"] == "RequestValidationError"


def test_abandon_session(client):
    client.post("/sessions/s-1/tools/update_order_data", json={"name": "Juan Perez", "confirm": "no"})

    assert client.delete("/sessions/s-1").status_code == 204
    assert client.get("/sessions/s-1/draft").status_code == 404


def test_cart_after_finalization_is_inactive(client, full_order_args):
    _finalize(client, full_order_args)

    res = client.post("/sessions/s-1/cart/items", json={"menu_item": "Fries"})
    assert res.status_code == 409
    assert res.json()["type"] == "CartInactive"

    summary = client.get("/sessions/s-1/cart").json()
    assert summary["total_quantity"] == 3


def test_order_routes(client, full_order_args):
    order = _finalize(client, full_order_args)
    order_id = order["order_id"]

    fetched = client.get(f"/orders/{order_id}").json()
    assert fetched == order

    res = client.post(f"/orders/{order_id}/status", json={"status": "processing"})
    assert res.status_code == 200
    assert res.json()["status"] == "processing"

    res = client.post(f"/orders/{order_id}/status", json={"status": "creating"})
    assert res.status_code == 409
    assert res.json()["details"] == {"current": "processing", "target": "creating"}

    assert client.get("/orders/00000000-0000-0000-0000-000000000000").status_code == 404
    assert client.get("/orders/not-a-uuid").status_code == 400
