"""API tests: dispatch surface, error mapping, caller header."""
import pytest
from fastapi.testclient import TestClient

from conftest import ALICE, BOB, FEE, OWNER, START
from subledger.api.deps import get_clock
from subledger.db.session import get_db
from subledger.main import app


@pytest.fixture
def client(session_factory, clock, ledger):
    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_clock] = lambda: clock
    # No context manager: lifespan (bootstrap against the configured database) stays off.
    yield TestClient(app)
    app.dependency_overrides.clear()


def _as(identity):
    return {"X-Caller-Id": identity}


def _subscribe(client, identity=ALICE, email="test@example.com", amount=FEE, **extra):
    body = {"email": email, "first_name": "John", "last_name": "Doe", "amount": amount}
    body.update(extra)
    return client.post("/subscriptions", json=body, headers=_as(identity))


class TestSubscriptions:
    def test_subscribe(self, client):
        resp = _subscribe(client)
        assert resp.status_code == 201
        assert resp.json() == {
            "observations": [
                {"name": "Subscribed", "args": [ALICE, START + 60, "test@example.com", "John", "Doe"]}
            ]
        }

    def test_check_subscription(self, client):
        _subscribe(client)
        resp = client.get(f"/subscriptions/{ALICE}")
        assert resp.status_code == 200
        assert resp.json() == {
            "is_active": True,
            "subscription_due": START + 60,
            "email": "test@example.com",
            "first_name": "John",
            "last_name": "Doe",
        }

    def test_unknown_identity(self, client):
        resp = client.get(f"/subscriptions/{BOB}")
        assert resp.json()["is_active"] is False
        assert resp.json()["subscription_due"] == 0

    def test_is_subscribed_user(self, client):
        _subscribe(client)
        assert client.get(f"/subscriptions/{ALICE}/active").json() == {"identity": ALICE, "is_subscribed": True}
        assert client.get(f"/subscriptions/{BOB}/active").json()["is_subscribed"] is False

    def test_validation_error_named(self, client):
        resp = _subscribe(client, email="invalid-email")
        assert resp.status_code == 400
        assert resp.json() == {"error": "InvalidEmailFormat", "detail": "Invalid email format"}

    def test_incorrect_fee(self, client):
        resp = _subscribe(client, amount=FEE // 2)
        assert resp.status_code == 400
        assert resp.json()["error"] == "IncorrectFee"

    def test_already_subscribed(self, client):
        _subscribe(client)
        resp = _subscribe(client)
        assert resp.status_code == 409
        assert resp.json()["error"] == "AlreadySubscribed"

    def test_missing_caller(self, client):
        resp = client.post(
            "/subscriptions",
            json={"email": "a@b.c", "first_name": "A", "last_name": "B", "amount": FEE},
        )
        assert resp.status_code == 401

    def test_payment_flow(self, client, clock):
        _subscribe(client)
        early = client.post("/subscriptions/me/payments", json={"amount": FEE}, headers=_as(ALICE))
        assert early.status_code == 409
        assert early.json()["error"] == "PaymentNotDue"

        clock.advance(61)
        resp = client.post("/subscriptions/me/payments", json={"amount": FEE}, headers=_as(ALICE))
        assert resp.status_code == 200
        assert resp.json()["observations"] == [{"name": "Payment", "args": [ALICE, FEE, START + 121]}]

    def test_unsubscribe(self, client):
        _subscribe(client)
        resp = client.delete("/subscriptions/me", headers=_as(ALICE))
        assert resp.json()["observations"] == [{"name": "Unsubscribed", "args": [ALICE]}]
        again = client.delete("/subscriptions/me", headers=_as(ALICE))
        assert again.status_code == 409
        assert again.json()["error"] == "NotSubscribed"


class TestLedger:
    def test_summary(self, client):
        _subscribe(client)
        assert client.get("/ledger").json() == {
            "owner": OWNER,
            "subscription_fee": FEE,
            "balance": FEE,
            "subscription_period": 60,
        }

    def test_is_owner(self, client):
        assert client.get("/ledger/is-owner", headers=_as(OWNER)).json()["is_owner"] is True
        assert client.get("/ledger/is-owner", headers=_as(ALICE)).json()["is_owner"] is False

    def test_events(self, client):
        _subscribe(client)
        client.delete("/subscriptions/me", headers=_as(ALICE))
        events = client.get("/ledger/events", params={"identity": ALICE}).json()
        assert [e["name"] for e in events] == ["Subscribed", "Unsubscribed"]


class TestAdmin:
    @pytest.mark.parametrize(
        "method,path,body",
        [
            ("get", "/admin/subscribers", None),
            ("put", "/admin/fee", {"subscription_fee": 2 * FEE}),
            ("post", "/admin/withdrawals", None),
            ("post", "/admin/self-destruct", None),
            ("get", "/admin/payouts", None),
        ],
    )
    def test_non_owner_rejected(self, client, method, path, body):
        kwargs = {"headers": _as(ALICE)}
        if body is not None:
            kwargs["json"] = body
        resp = client.request(method.upper(), path, **kwargs)
        assert resp.status_code == 403
        assert resp.json() == {"error": "NotOwner", "detail": "Only the owner can call this function"}
        assert client.get("/ledger").json()["subscription_fee"] == FEE

    def test_get_all_subscribers(self, client):
        _subscribe(client, identity=ALICE, email="test1@example.com")
        _subscribe(client, identity=BOB, email="test2@example.com")
        records = client.get("/admin/subscribers", headers=_as(OWNER)).json()
        assert [r["email"] for r in records] == ["test1@example.com", "test2@example.com"]

    def test_update_fee(self, client):
        resp = client.put("/admin/fee", json={"subscription_fee": 2 * FEE}, headers=_as(OWNER))
        assert resp.json() == {"subscription_fee": 2 * FEE}
        assert _subscribe(client, amount=FEE).json()["error"] == "IncorrectFee"

    def test_fee_above_64_bit_range(self, client):
        resp = client.put("/admin/fee", json={"subscription_fee": 2**64}, headers=_as(OWNER))
        assert resp.status_code == 400
        assert resp.json()["error"] == "InvalidFee"
        assert client.get("/ledger").json()["subscription_fee"] == FEE

    def test_negative_fee(self, client):
        resp = client.put("/admin/fee", json={"subscription_fee": -1}, headers=_as(OWNER))
        assert resp.status_code == 400
        assert resp.json()["error"] == "InvalidFee"

    def test_withdraw(self, client):
        _subscribe(client)
        resp = client.post("/admin/withdrawals", headers=_as(OWNER))
        assert resp.json()["amount"] == FEE
        assert client.get("/ledger").json()["balance"] == 0
        payouts = client.get("/admin/payouts", headers=_as(OWNER)).json()
        assert [(p["amount"], p["reason"]) for p in payouts] == [(FEE, "withdrawal")]

    def test_self_destruct_is_terminal(self, client):
        _subscribe(client)
        resp = client.post("/admin/self-destruct", headers=_as(OWNER))
        assert resp.status_code == 200
        assert resp.json()["amount"] == FEE

        gone = _subscribe(client, identity=BOB, email="test2@example.com")
        assert gone.status_code == 410
        assert gone.json()["error"] == "LedgerDestroyed"
        assert client.get(f"/subscriptions/{ALICE}").status_code == 410
        assert client.get("/ledger").status_code == 410


class TestHealth:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_ready(self, client):
        assert client.get("/ready").json() == {"status": "ready"}

    def test_metrics(self, client):
        _subscribe(client)
        resp = client.get("/metrics")
        assert resp.status_code == 200
        assert "ledger_operations_total" in resp.text
