"""API tests for /api/newsletter."""

import asyncio

import pytest

from src.api.dependencies import get_newsletter_service
from src.integrations.clients.mocks.brevo import BrevoMockContactsClient
from src.integrations.errors import ContactsError
from src.integrations.policy.newsletter_service import NewsletterService


class SlowContactsClient(BrevoMockContactsClient):
    async def create_contact(self, email):
        await asyncio.sleep(5)


class RejectingContactsClient(BrevoMockContactsClient):
    async def create_contact(self, email):
        raise ContactsError("Contact creation failed with HTTP 400.", payload={"code": "invalid_parameter"})


@pytest.fixture
def use_contacts(app, settings):
    def _use(contacts):
        app.dependency_overrides[get_newsletter_service] = lambda: NewsletterService(settings, contacts)
        return contacts

    return _use


def test_signup_then_repeat_signup_both_succeed(client, use_contacts):
    use_contacts(BrevoMockContactsClient())

    first = client.post("/api/newsletter", json={"email": "fan@example.com"})
    second = client.post("/api/newsletter", json={"email": "Fan@Example.com"})

    assert first.status_code == 200
    assert first.json()["status"] == "subscribed"
    assert second.status_code == 200
    assert second.json() == {
        "success": True,
        "status": "already_subscribed",
        "message": "You're already subscribed!",
    }


@pytest.mark.parametrize("body", [{}, {"email": ""}, {"email": "   "}])
def test_missing_email_is_400(client, use_contacts, body):
    use_contacts(BrevoMockContactsClient())

    response = client.post("/api/newsletter", json=body)

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_provider_timeout_is_500(client, use_contacts):
    use_contacts(SlowContactsClient())

    response = client.post("/api/newsletter", json={"email": "fan@example.com"})

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Failed to subscribe. Please try again later."}


def test_provider_rejection_is_500(client, use_contacts):
    use_contacts(RejectingContactsClient())

    response = client.post("/api/newsletter", json={"email": "fan@example.com"})

    assert response.status_code == 500
