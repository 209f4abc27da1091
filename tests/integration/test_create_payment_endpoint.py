import pytest

def test_preflight_returns_cors_headers(client):
    res = client.options("/api/v1/payments/create-payment")
    assert res.status_code == 200
    assert res.content == b""
    assert res.headers["access-control-allow-origin"] == "*"
    assert "content-type" in res.headers["access-control-allow-headers"]

def test_create_payment_returns_snap_token(client, gateway):
    res = client.post("/api/v1/payments/create-payment", json={
        "orderId": "ORDER-1",
        "amount": 15000,
        "itemDetails": [{"id": "m-1", "name": "Nasi Goreng", "price": 15000, "quantity": 1}],
    })
    assert res.status_code == 200
    assert res.json() == {
        "snap_token": "snap-token-1",
        "redirect_url": "https://app.sandbox.midtrans.com/snap/v2/vtweb/snap-token-1",
    }
    assert res.headers["access-control-allow-origin"] == "*"

def test_zero_amount_rejected_without_side_effects(client, gateway, store):
    res = client.post("/api/v1/payments/create-payment", json={
        "orderId": "BATCH-1", "amount": 0, "batchOrderIds": ["A", "B"],
    })
    assert res.status_code == 500
    assert res.json() == {
        "error": "Valid amount is required",
        "details": "InvalidRequest: Valid amount is required",
        "type": "InvalidRequest",
    }
    assert gateway.calls == []
    assert store.batch_orders == []

def test_gateway_error_body_is_surfaced(client, gateway):
    gateway.status_code = 401
    gateway.body = '{"error_messages":["Access denied"]}'
    res = client.post("/api/v1/payments/create-payment", json={"orderId": "ORDER-1", "amount": 15000})
    assert res.status_code == 500
    data = res.json()
    assert data["type"] == "GatewayError"
    assert data["error"].startswith("Midtrans API error: 401")
    assert data["details"] == '{"error_messages":["Access denied"]}'
    assert res.headers["access-control-allow-origin"] == "*"

def test_invalid_json_body(client, gateway):
    res = client.post(
        "/api/v1/payments/create-payment",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert res.status_code == 500
    assert res.json()["error"] == "Invalid JSON in request body"

def test_unexpected_error_is_wrapped(client, gateway, monkeypatch):
    def _boom(payload):
        raise KeyError("token")
    monkeypatch.setattr("catering.payments.midtrans_client.create_transaction", _boom)
    res = client.post("/api/v1/payments/create-payment", json={"orderId": "ORDER-1", "amount": 15000})
    assert res.status_code == 500
    data = res.json()
    assert data["type"] == "UnexpectedError"
    assert data["details"].startswith("KeyError")


@pytest.mark.parametrize("raw_amount", [b"NaN", b"Infinity", b"-Infinity", b"1e400"])
def test_non_finite_amount_rejected_without_side_effects(client, gateway, store, raw_amount):
    body = b'{"orderId":"BATCH-X","amount":' + raw_amount + b',"batchOrderIds":["A","B"]}'
    res = client.post(
        "/api/v1/payments/create-payment",
        content=body,
        headers={"Content-Type": "application/json"},
    )
    assert res.status_code == 500
    assert res.json()["type"] == "InvalidRequest"
    assert store.batch_orders == []
    assert gateway.calls == []

def test_batch_ids_as_string_rejected(client, gateway, store):
    res = client.post("/api/v1/payments/create-payment", json={
        "orderId": "BATCH-X", "amount": 40000, "batchOrderIds": "abc",
    })
    assert res.status_code == 500
    assert res.json()["error"] == "batchOrderIds must be a list of order ids"
    assert store.batch_orders == []

def test_malformed_items_leave_no_orphan_mapping(client, gateway, store):
    res = client.post("/api/v1/payments/create-payment", json={
        "orderId": "BATCH-X", "amount": 40000, "batchOrderIds": ["A", "B"], "itemDetails": ["oops"],
    })
    assert res.status_code == 500
    assert res.json()["type"] == "InvalidRequest"
    assert store.batch_orders == []
    assert gateway.calls == []

def test_create_payment_requires_authentication(app, client, gateway, store):
    from catering.utils.security import get_current_user
    app.dependency_overrides.pop(get_current_user, None)
    res = client.post("/api/v1/payments/create-payment", json={
        "orderId": "BATCH-X", "amount": 40000, "batchOrderIds": ["A", "B"],
    })
    assert res.status_code == 401
    assert store.batch_orders == []
    assert gateway.calls == []
    # Le préflight reste ouvert
    assert client.options("/api/v1/payments/create-payment").status_code == 200

def test_create_payment_rate_limited(app, client, gateway, monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    monkeypatch.setattr(app.state, "_rl_store", {}, raising=False)
    payload = {"orderId": "ORDER-1", "amount": 15000}
    codes = [client.post("/api/v1/payments/create-payment", json=payload).status_code for _ in range(11)]
    assert codes[:10] == [200] * 10
    assert codes[10] == 429
    assert len(gateway.calls) == 10
