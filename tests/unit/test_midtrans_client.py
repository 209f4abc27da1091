import pytest
import requests

from catering.payments import midtrans_client
from catering.payments.errors import GatewayError, ConfigurationError

def test_require_server_key_reads_config_at_call_time(monkeypatch):
    monkeypatch.setattr("catering.config.MIDTRANS_SERVER_KEY", "")
    with pytest.raises(ConfigurationError):
        midtrans_client.require_server_key()
    monkeypatch.setattr("catering.config.MIDTRANS_SERVER_KEY", "SB-key")
    assert midtrans_client.require_server_key() == "SB-key"

def test_create_transaction_posts_to_snap_url(gateway, monkeypatch):
    monkeypatch.setattr("catering.config.MIDTRANS_SNAP_URL", "https://app.sandbox.midtrans.com/snap/v1/transactions")
    data = midtrans_client.create_transaction({"transaction_details": {"order_id": "ORDER-1", "gross_amount": 1}})
    assert data["token"] == "snap-token-1"
    call = gateway.calls[0]
    assert call["url"] == "https://app.sandbox.midtrans.com/snap/v1/transactions"
    assert call["headers"]["Accept"] == "application/json"

def test_create_transaction_unreachable(gateway):
    gateway.raise_exc = requests.ConnectionError("connection refused")
    with pytest.raises(GatewayError) as exc:
        midtrans_client.create_transaction({"transaction_details": {"order_id": "ORDER-1"}})
    assert exc.value.status is None
    assert exc.value.message.startswith("Midtrans API error: n/a - ")

def test_create_transaction_non_2xx(gateway):
    gateway.status_code = 500
    gateway.body = "Internal Server Error"
    with pytest.raises(GatewayError) as exc:
        midtrans_client.create_transaction({})
    assert exc.value.status == 500
    assert exc.value.body == "Internal Server Error"
