"""Pytest fixtures for the store gateway tests."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import httpx
import pytest
import pytest_asyncio

from src.database.redis import PaymentStore
from src.utils.config_loader import BrevoConfig, MpesaConfig, Settings


class FakeClock:
    """Controllable UTC clock."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2025, 3, 14, 9, 30, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


def make_callback(
    checkout_request_id: str,
    result_code: int = 0,
    amount: float = 100,
    receipt: str = "NLJ7RT61SV",
    merchant_request_id: str = "29115-34620561-1",
) -> Dict[str, Any]:
    callback: Dict[str, Any] = {
        "MerchantRequestID": merchant_request_id,
        "CheckoutRequestID": checkout_request_id,
        "ResultCode": result_code,
        "ResultDesc": "The service request is processed successfully."
        if result_code == 0
        else "Request cancelled by user",
    }
    if result_code == 0:
        callback["CallbackMetadata"] = {
            "Item": [
                {"Name": "Amount", "Value": amount},
                {"Name": "MpesaReceiptNumber", "Value": receipt},
                {"Name": "TransactionDate", "Value": 20250314093512},
                {"Name": "PhoneNumber", "Value": 254712345678},
            ]
        }
    return {"Body": {"stkCallback": callback}}


@pytest.fixture
def settings() -> Settings:
    return Settings(
        brevo=BrevoConfig(
            api_key="test-brevo-key",
            from_email="store@example.com",
            admin_email="admin@example.com",
            admin_name="Store Admin",
            newsletter_list_id=7,
        ),
        mpesa=MpesaConfig(
            consumer_key="consumer-key",
            consumer_secret="consumer-secret",
            short_code="174379",
            passkey="test-passkey",
            callback_url="https://shop.example.com/api/stkpush/callback",
        ),
        http_timeout_seconds=2.0,
        newsletter_timeout_seconds=0.5,
        payment_callback_timeout_seconds=300.0,
    )


@pytest.fixture
def store() -> PaymentStore:
    """In-memory payment store for tests."""
    return PaymentStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def app():
    from src.api.main import app as fastapi_app

    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    with TestClient(app) as c:
        yield c


@pytest_asyncio.fixture
async def mock_http():
    """Factory for httpx clients backed by a MockTransport handler; all are closed after the test."""
    clients = []

    def _make(handler) -> httpx.AsyncClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(http_client)
        return http_client

    yield _make
    for http_client in clients:
        await http_client.aclose()
