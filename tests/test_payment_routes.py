import pytest
import requests

from config import TestConfig
from dietbuddy import create_app, db
from dietbuddy import payments
from dietbuddy.auth import issue_token
from dietbuddy.models.payment import Payment
from dietbuddy.models.user import User
from dietbuddy.payments import RazorpayConfig, RazorpayGateway


class FakeResponse:
    def __init__(self, status_code, body):
        self.status_code = status_code
        self._body = body
        self.content = b"{}"

    def json(self):
        return self._body


@pytest.fixture
def gateway_ok(monkeypatch):
    calls = []

    def fake_post(url, auth=None, json=None, timeout=None):
        calls.append({"url": url, "auth": auth, "json": json})
        return FakeResponse(200, {"id": "order_ABC123", "amount": json["amount"], "currency": json["currency"]})

    monkeypatch.setattr(payments.requests, "post", fake_post)
    return calls


@pytest.fixture
def gateway_down(monkeypatch):
    def fake_post(*args, **kwargs):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(payments.requests, "post", fake_post)


def _signature(app, order_id, payment_id):
    return app.extensions["dietbuddy.razorpay"].expected_signature(order_id, payment_id)


# ------------------------------
# Gateway
# ------------------------------
def test_signature_is_hmac_of_order_and_payment():
    gateway = RazorpayGateway(RazorpayConfig("key", "secret"))
    good = gateway.expected_signature("order_1", "pay_1")
    assert gateway.verify_signature("order_1", "pay_1", good)
    assert not gateway.verify_signature("order_1", "pay_2", good)
    assert not gateway.verify_signature("order_1", "pay_1", None)


def test_missing_credentials_use_placeholders():
    config = RazorpayConfig("", "  ")
    assert not config.has_valid_credentials
    assert config.key_id == payments.PLACEHOLDER_KEY_ID


# ------------------------------
# Routes
# ------------------------------
def test_get_key(client, user):
    _, headers = user
    assert client.get("/api/payments/get-key", headers=headers).get_json() == {"keyId": "rzp_test_key"}


def test_create_order_and_verify(app, client, user, gateway_ok):
    user_id, headers = user
    r = client.post("/api/payments/create-order", headers=headers)
    assert r.status_code == 200
    body = r.get_json()
    assert body["orderId"] == "order_ABC123"
    assert body["amount"] == 99900
    assert "isDummyOrder" not in body
    assert gateway_ok[0]["json"]["receipt"].startswith(f"order_{user_id}_")
    assert gateway_ok[0]["auth"] == ("rzp_test_key", "rzp_test_secret")

    r = client.post(
        "/api/payments/verify",
        json={
            "razorpay_order_id": "order_ABC123",
            "razorpay_payment_id": "pay_XYZ",
            "razorpay_signature": _signature(app, "order_ABC123", "pay_XYZ"),
        },
        headers=headers,
    )
    assert r.status_code == 200
    assert r.get_json()["user"]["isMember"] is True
    assert r.get_json()["user"]["membershipExpiry"]

    with app.app_context():
        payment = Payment.query.filter_by(razorpay_order_id="order_ABC123").one()
        assert payment.status == "successful"
        assert payment.razorpay_payment_id == "pay_XYZ"


def test_bad_signature_marks_payment_failed(app, client, user, gateway_ok):
    _, headers = user
    client.post("/api/payments/create-order", headers=headers)

    r = client.post(
        "/api/payments/verify",
        json={
            "razorpay_order_id": "order_ABC123",
            "razorpay_payment_id": "pay_XYZ",
            "razorpay_signature": "deadbeef",
        },
        headers=headers,
    )
    assert r.status_code == 400
    assert r.get_json()["message"] == "Invalid signature"

    with app.app_context():
        assert Payment.query.filter_by(razorpay_order_id="order_ABC123").one().status == "failed"
    assert client.get("/api/auth/profile", headers=headers).get_json()["isMember"] is False


def test_dummy_order_when_gateway_down(client, user, gateway_down):
    _, headers = user
    body = client.post("/api/payments/create-order", headers=headers).get_json()
    assert body["isDummyOrder"] is True
    assert body["orderId"].startswith("dummy_order_")

    r = client.post(
        "/api/payments/verify",
        json={"razorpay_order_id": body["orderId"], "isDummyOrder": True},
        headers=headers,
    )
    assert r.status_code == 200
    assert r.get_json()["user"]["isMember"] is True


def test_production_rejects_dummy_orders(gateway_down):
    class ProdConfig(TestConfig):
        ENV = "production"
        ALLOW_DUMMY_PAYMENTS = False

    app = create_app(ProdConfig)
    client = app.test_client()
    with app.app_context():
        u = User(name="Prod", email="prod@example.com")
        u.set_password("secret123")
        db.session.add(u)
        db.session.commit()
        headers = {"Authorization": f"Bearer {issue_token(u)}"}

    assert client.post("/api/payments/create-order", headers=headers).status_code == 502

    r = client.post(
        "/api/payments/verify",
        json={"razorpay_order_id": "dummy_order_1", "isDummyOrder": True},
        headers=headers,
    )
    assert r.status_code == 400
    assert client.post("/api/payments/test-upgrade", headers=headers).status_code == 403


def test_test_upgrade(client, user):
    _, headers = user
    r = client.post("/api/payments/test-upgrade", headers=headers)
    assert r.status_code == 200
    assert r.get_json()["user"]["isMember"] is True
