CART = {
    "items": [
        {"menu_item_id": "m-1", "name": "Nasi Goreng", "price": 15000, "quantity": 2},
        {"menu_item_id": "m-2", "name": "Es Teh", "price": 5000, "quantity": 1},
    ],
    "child": {"name": "Budi", "class_name": "1A"},
}

def test_checkout_ok(client, store, gateway):
    res = client.post("/api/v1/checkout", json=CART)
    assert res.status_code == 200
    data = res.json()
    assert data["snap_token"] == "snap-token-1"
    assert data["order"]["total_amount"] == 35000
    assert gateway.last_payload["transaction_details"]["gross_amount"] == 35000

def test_checkout_empty_cart(client, store, gateway):
    res = client.post("/api/v1/checkout", json={"items": []})
    assert res.status_code == 400
    assert res.json()["detail"] == "Panier vide"
    assert store.writes == []

def test_checkout_gateway_failure_returns_order_id(client, store, gateway):
    gateway.status_code = 500
    gateway.body = "Internal Server Error"
    res = client.post("/api/v1/checkout", json=CART)
    assert res.status_code == 502
    data = res.json()
    assert data["type"] == "GatewayError"
    assert data["order_id"] in store.orders

def test_checkout_missing_server_key(client, store, gateway, monkeypatch):
    monkeypatch.setattr("catering.config.MIDTRANS_SERVER_KEY", "")
    res = client.post("/api/v1/checkout", json=CART)
    assert res.status_code == 500
    assert res.json()["type"] == "ConfigurationError"
    assert gateway.calls == []

def test_checkout_requires_authentication(app, client):
    from catering.utils.security import get_current_user
    app.dependency_overrides.pop(get_current_user, None)
    res = client.post("/api/v1/checkout", json=CART)
    assert res.status_code == 401

def test_checkout_with_child_id_only(client, store, gateway):
    cart = {**CART, "child": {"id": "c-7"}}
    res = client.post("/api/v1/checkout", json=cart)
    assert res.status_code == 200
    assert [it["name"] for it in gateway.last_payload["item_details"]] == ["Nasi Goreng", "Es Teh"]
    assert all(li["child_id"] == "c-7" for li in store.line_items)
