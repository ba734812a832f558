"""
Brevo: MOCK clients.

⚠️  Mock implementation for development and testing.
    Emails are logged and kept in memory; contacts are kept in an in-memory set
    so a repeated signup behaves like the real provider's duplicate response.
"""

import logging
import uuid
from typing import Any, Dict, List, Set

from src.integrations.contracts.interfaces import ContactsProvider, EmailMessage, EmailSender
from src.integrations.errors import DuplicateSubscriberError

logger = logging.getLogger(__name__)


class BrevoMockEmailClient(EmailSender):
    def __init__(self) -> None:
        self.sent: List[EmailMessage] = []

    async def send(self, message: EmailMessage) -> Dict[str, Any]:
        self.sent.append(message)
        logger.info("[BREVO MOCK] Email '%s' → %s", message.subject, [r.email for r in message.to])
        return {"messageId": f"<{uuid.uuid4().hex}@mock.brevo>"}


class BrevoMockContactsClient(ContactsProvider):
    def __init__(self) -> None:
        self._contacts: Set[str] = set()

    async def create_contact(self, email: str) -> Dict[str, Any]:
        key = email.strip().lower()
        if key in self._contacts:
            raise DuplicateSubscriberError(
                "Contact already exists.",
                payload={"code": "duplicate_parameter", "message": "Contact already exist"},
            )
        self._contacts.add(key)
        logger.info("[BREVO MOCK] Contact created: %s", email)
        return {"id": len(self._contacts)}
