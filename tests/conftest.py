import os
import copy
import itertools
import pytest
from typing import Generator, Dict, Any, List, Optional
from fastapi.testclient import TestClient

os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

from catering.asgi import app as fastapi_app
from catering.utils.security import get_current_user
from catering.payments.errors import StorageError

PARENT_USER: Dict[str, Any] = {
    "id": "parent-1",
    "email": "parent@example.com",
    "role": "parent",
    "metadata": {"full_name": "Ibu Sari", "phone": "081200000000"},
    "token": "fake-token",
}

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)

@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

@pytest.fixture
def current_user() -> Dict[str, Any]:
    """Utilisateur injecté dans les routes; modifier son rôle pour simuler un caissier."""
    return copy.deepcopy(PARENT_USER)

# Simuler un utilisateur authentifié pour les endpoints protégés
@pytest.fixture(autouse=True)
def _override_current_user(app, current_user):
    app.dependency_overrides[get_current_user] = lambda: current_user
    try:
        yield
    finally:
        app.dependency_overrides.pop(get_current_user, None)


class FakeOrderStore:
    """
    Store en mémoire qui remplace les repositories Supabase (orders, order_line_items,
    batch_orders, payments, cash_payments). Compte les écritures et permet d'injecter des pannes.
    """

    def __init__(self):
        self._ids = itertools.count(1)
        self.orders: Dict[str, Dict[str, Any]] = {}
        self.line_items: List[Dict[str, Any]] = []
        self.batch_orders: List[Dict[str, Any]] = []
        self.payments: List[Dict[str, Any]] = []
        self.cash_payments: List[Dict[str, Any]] = []
        self.menu_names: Dict[str, str] = {}
        self.writes: List[tuple] = []
        self.fail_line_items = False
        self.fail_batch_mapping = False
        self.fail_update_for: set = set()

    # --- seed ---
    def add_order(self, total_amount, user_id="parent-1", child_name="Budi", payment_status="pending",
                  items: Optional[List[Dict[str, Any]]] = None, **fields) -> Dict[str, Any]:
        order_id = fields.pop("id", None) or f"ord-{next(self._ids)}"
        self.orders[order_id] = {
            "id": order_id,
            "user_id": user_id,
            "order_number": f"ORDER-{order_id}",
            "total_amount": total_amount,
            "status": "pending",
            "payment_status": payment_status,
            "payment_method": None,
            "midtrans_order_id": None,
            "snap_token": None,
            "child_name": child_name,
            "child_class": "1A",
            **fields,
        }
        for it in items or [{"menu_item_id": "menu-1", "quantity": 1, "unit_price": total_amount}]:
            self.line_items.append({
                "id": f"li-{next(self._ids)}",
                "order_id": order_id,
                "child_name": child_name,
                "child_class": "1A",
                "total_price": it["unit_price"] * it["quantity"],
                **it,
            })
        return self.fetch_order(order_id)

    # --- orders repository ---
    def insert_order(self, row):
        order_id = f"ord-{next(self._ids)}"
        self.orders[order_id] = {"id": order_id, **row}
        self.writes.append(("insert_order", order_id))
        return dict(self.orders[order_id])

    def insert_line_items(self, rows):
        if self.fail_line_items:
            raise StorageError("Impossible d'enregistrer le détail de la commande: boom")
        created = []
        for row in rows:
            item = {"id": f"li-{next(self._ids)}", "total_price": row["unit_price"] * row["quantity"], **row}
            self.line_items.append(item)
            created.append(item)
        self.writes.append(("insert_line_items", len(rows)))
        return created

    def delete_order(self, order_id):
        self.orders.pop(order_id, None)
        self.line_items = [li for li in self.line_items if li["order_id"] != order_id]
        self.writes.append(("delete_order", order_id))
        return True

    def update_order(self, order_id, fields):
        if order_id in self.fail_update_for:
            raise StorageError(f"Failed to update order {order_id}: boom")
        self.orders[order_id].update(fields)
        self.writes.append(("update_order", order_id, dict(fields)))
        return dict(self.orders[order_id])

    def fetch_order(self, order_id):
        order = self.orders.get(order_id)
        if not order:
            return None
        items = []
        for li in self.line_items:
            if li["order_id"] == order_id:
                items.append({**li, "menu_items": {"name": self.menu_names.get(li["menu_item_id"], "Nasi Goreng")}})
        return {**copy.deepcopy(order), "order_line_items": items}

    def fetch_orders_by_ids(self, ids, user_id=None):
        found = [self.fetch_order(i) for i in ids if i in self.orders]
        return [o for o in found if not user_id or o["user_id"] == user_id]

    def fetch_user_orders(self, user_id, limit=50):
        return [self.fetch_order(i) for i, o in self.orders.items() if o["user_id"] == user_id][:limit]

    def fetch_pending_orders(self, child_name=None, limit=50):
        return [
            self.fetch_order(i) for i, o in self.orders.items()
            if o["payment_status"] == "pending" and (not child_name or child_name.lower() in (o.get("child_name") or "").lower())
        ][:limit]

    # --- payments repository ---
    def insert_batch_mappings(self, batch_id, order_ids):
        if self.fail_batch_mapping:
            raise StorageError("Failed to save batch mapping: boom")
        for oid in order_ids:
            self.batch_orders.append({"batch_id": batch_id, "order_id": oid})
        self.writes.append(("insert_batch_mappings", batch_id))
        return True

    def fetch_batch_order_ids(self, batch_id):
        return [b["order_id"] for b in self.batch_orders if b["batch_id"] == batch_id]

    # --- cashier repository ---
    def insert_payment(self, row):
        self.payments.append(dict(row))
        self.writes.append(("insert_payment", row["order_id"]))
        return dict(row)

    def insert_cash_payment(self, row):
        self.cash_payments.append(dict(row))
        self.writes.append(("insert_cash_payment", row["order_id"]))
        return dict(row)


@pytest.fixture
def store(monkeypatch) -> FakeOrderStore:
    fake = FakeOrderStore()
    for name in (
        "insert_order", "insert_line_items", "delete_order", "update_order", "fetch_order",
        "fetch_orders_by_ids", "fetch_user_orders", "fetch_pending_orders",
    ):
        monkeypatch.setattr(f"catering.orders.repository.{name}", getattr(fake, name))
    monkeypatch.setattr("catering.payments.repository.insert_batch_mappings", fake.insert_batch_mappings)
    monkeypatch.setattr("catering.payments.repository.fetch_batch_order_ids", fake.fetch_batch_order_ids)
    monkeypatch.setattr("catering.cashier.repository.insert_payment", fake.insert_payment)
    monkeypatch.setattr("catering.cashier.repository.insert_cash_payment", fake.insert_cash_payment)
    return fake


class _FakeResponse:
    def __init__(self, status_code: int, body: Any):
        self.status_code = status_code
        self._body = body
        self.ok = 200 <= status_code < 300
        self.text = body if isinstance(body, str) else repr(body)

    def json(self):
        return self._body


class FakeGateway:
    """Remplace requests.post pour l'endpoint Snap: enregistre les appels, réponse configurable."""

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []
        self.status_code = 201
        self.body: Any = {"token": "snap-token-1", "redirect_url": "https://app.sandbox.midtrans.com/snap/v2/vtweb/snap-token-1"}
        self.raise_exc: Optional[Exception] = None

    def post(self, url, json=None, auth=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "auth": auth, "headers": headers, "timeout": timeout})
        if self.raise_exc:
            raise self.raise_exc
        return _FakeResponse(self.status_code, self.body)

    @property
    def last_payload(self) -> Dict[str, Any]:
        return self.calls[-1]["json"]


@pytest.fixture
def gateway(monkeypatch) -> FakeGateway:
    fake = FakeGateway()
    monkeypatch.setattr("catering.config.MIDTRANS_SERVER_KEY", "SB-Mid-server-test")
    monkeypatch.setattr("catering.payments.midtrans_client.requests.post", fake.post)
    return fake
