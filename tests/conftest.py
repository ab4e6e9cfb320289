"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timezone
from typing import Any, Dict, List, Tuple
import httpx
from fastapi.testclient import TestClient
from stripe_reports.api.main import create_app
from stripe_reports.api.dependencies import get_stripe_client
from stripe_reports.infrastructure.clients.stripe import StripeClient


def ts(value: str) -> int:
    """Unix seconds for a 'YYYY-MM-DD HH:MM' string read as UTC"""
    return int(datetime.strptime(value, "%Y-%m-%d %H:%M").replace(tzinfo=timezone.utc).timestamp())


class FakeStripeAPI:
    """
    In-memory stand-in for the Stripe list API, served through httpx.MockTransport.

    Honors limit, created[gte]/created[lte] and starting_after the way the
    real API does, and records every request for assertions.
    """

    def __init__(self):
        self.accounts: Dict[str, Dict[str, Any]] = {}
        self.records: Dict[Tuple[str, str], List[Dict[str, Any]]] = {}
        self.failures: Dict[Tuple[str, str], str] = {}
        self.failing_accounts: set = set()
        self.list_accounts_fails = False
        self.calls: List[httpx.Request] = []

    def add_account(self, account_id: str, **fields: Any) -> None:
        self.accounts[account_id] = {"id": account_id, "country": "US", "charges_enabled": True, **fields}

    def add_records(self, account_id: str, kind: str, records: List[Dict[str, Any]]) -> None:
        self.records.setdefault((account_id, kind), []).extend(records)

    def fail(self, account_id: str, kind: str, mode: str = "always") -> None:
        """mode: 'always' or 'after_first_page' (pages requested with a cursor fail)"""
        self.failures[(account_id, kind)] = mode

    def list_calls(self, kind: str, account_id: str | None = None) -> List[httpx.Request]:
        return [
            r for r in self.calls
            if r.url.path == f"/v1/{kind}" and (account_id is None or r.headers.get("Stripe-Account") == account_id)
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        parts = request.url.path.strip("/").split("/")
        params = request.url.params

        if parts[1] == "accounts":
            if len(parts) == 3:
                account_id = parts[2]
                if account_id in self.failing_accounts or account_id not in self.accounts:
                    return httpx.Response(404, json={"error": {"message": "No such account"}})
                return httpx.Response(200, json=self.accounts[account_id])
            if self.list_accounts_fails:
                return httpx.Response(500, json={"error": {"message": "boom"}})
            return httpx.Response(200, json={"data": list(self.accounts.values()), "has_more": False})

        kind = parts[1]
        account_id = request.headers.get("Stripe-Account")
        mode = self.failures.get((account_id, kind))
        if mode == "always" or (mode == "after_first_page" and "starting_after" in params):
            return httpx.Response(500, json={"error": {"message": "upstream exploded"}})

        gte = int(params.get("created[gte]", 0))
        lte = int(params.get("created[lte]", 2**62))
        limit = int(params.get("limit", 10))
        matching = [r for r in self.records.get((account_id, kind), []) if gte <= r["created"] <= lte]

        start = 0
        cursor = params.get("starting_after")
        if cursor:
            ids = [r["id"] for r in matching]
            start = ids.index(cursor) + 1
        page = matching[start:start + limit]
        return httpx.Response(200, json={"data": page, "has_more": start + limit < len(matching)})


@pytest.fixture
def fake_api() -> FakeStripeAPI:
    return FakeStripeAPI()


@pytest.fixture
def stripe_client(fake_api: FakeStripeAPI) -> StripeClient:
    """Stripe client wired to the in-memory API"""
    return StripeClient("sk_test_123", base_url="https://api.stripe.test", transport=httpx.MockTransport(fake_api.handler))


@pytest.fixture
def client(fake_api: FakeStripeAPI) -> TestClient:
    """Create FastAPI test client backed by the fake Stripe API"""
    app = create_app()

    async def override_get_stripe_client():
        async with StripeClient(
            "sk_test_123",
            base_url="https://api.stripe.test",
            transport=httpx.MockTransport(fake_api.handler),
        ) as stripe_client:
            yield stripe_client

    app.dependency_overrides[get_stripe_client] = override_get_stripe_client
    return TestClient(app, headers={"Authorization": "Bearer sk_test_123"})


@pytest.fixture
def sample_charge() -> Dict[str, Any]:
    """Fully populated succeeded charge"""
    return {
        "id": "ch_1",
        "object": "charge",
        "amount": 12345,
        "currency": "usd",
        "status": "succeeded",
        "created": ts("2024-03-01 15:30"),
        "paid": True,
        "captured": True,
        "disputed": True,
        "failure_code": None,
        "failure_message": None,
        "outcome": {
            "network_status": "approved_by_network",
            "type": "authorized",
            "risk_level": "normal",
            "reason": None,
            "seller_message": "Payment complete.",
        },
        "dispute": {
            "id": "dp_1",
            "amount": 12345,
            "currency": "usd",
            "reason": "fraudulent",
            "status": "needs_response",
            "created": ts("2024-03-05 10:00"),
            "evidence_details": {"due_by": ts("2024-03-20 23:59")},
        },
        "billing_details": {"name": "Ada Lovelace", "email": "ada@example.com", "phone": None},
        "customer": "cus_1",
        "payment_method": "pm_1",
        "payment_intent": "pi_1",
        "balance_transaction": "txn_1",
        "receipt_email": "ada@example.com",
        "description": "Order #1001",
        "statement_descriptor": None,
        "authorization_code": "123456",
        "fraud_details": {},
        "metadata": {"customer_ip": "198.51.100.7", "request_ip": "10.0.0.1"},
    }


@pytest.fixture
def sample_payment_intent() -> Dict[str, Any]:
    """Failed payment intent with a card decline"""
    return {
        "id": "pi_9",
        "object": "payment_intent",
        "amount": 5000,
        "currency": "usd",
        "status": "requires_payment_method",
        "created": ts("2024-03-02 09:00"),
        "customer": {"id": "cus_9", "object": "customer"},
        "payment_method": None,
        "receipt_email": "grace@example.com",
        "description": None,
        "last_payment_error": {
            "code": "card_declined",
            "decline_code": "insufficient_funds",
            "message": "Your card has insufficient funds.",
            "type": "card_error",
        },
        "metadata": {"client_ip": "2001:db8::1"},
    }
