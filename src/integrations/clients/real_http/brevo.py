"""
Real Brevo HTTP clients (transactional email + contacts).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from src.integrations.clients.real_http.base import http_session, read_json
from src.integrations.contracts.interfaces import ContactsProvider, EmailMessage, EmailSender
from src.integrations.errors import (
    ContactsError,
    DuplicateSubscriberError,
    EmailDeliveryError,
    ProviderTimeoutError,
)
from src.utils.config_loader import BrevoConfig

logger = logging.getLogger(__name__)

DUPLICATE_CONTACT_CODE = "duplicate_parameter"


class _BrevoClient:
    def __init__(
        self,
        config: BrevoConfig,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout_seconds: float = 15.0,
    ) -> None:
        self.config = config
        self.timeout_seconds = timeout_seconds
        self._http_client = http_client

    def _headers(self) -> Dict[str, str]:
        return {
            "api-key": self.config.api_key,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def _post(self, path: str, payload: Dict[str, Any], operation: str) -> httpx.Response:
        url = f"{self.config.base_url}{path}"
        try:
            async with http_session(self._http_client, self.timeout_seconds) as client:
                return await client.post(url, json=payload, headers=self._headers())
        except httpx.TimeoutException as exc:
            raise ProviderTimeoutError(operation, self.timeout_seconds) from exc


class BrevoEmailClient(_BrevoClient, EmailSender):
    async def send(self, message: EmailMessage) -> Dict[str, Any]:
        payload = {
            "sender": message.sender.to_dict(),
            "to": [recipient.to_dict() for recipient in message.to],
            "subject": message.subject,
            "htmlContent": message.html_content,
        }
        try:
            response = await self._post("/smtp/email", payload, "brevo send email")
        except httpx.RequestError as exc:
            raise EmailDeliveryError(f"Email transport error: {exc}", payload={"error": str(exc)}) from exc

        data = read_json(response)
        if response.status_code >= 400:
            logger.error("[BREVO] Email rejected: %s %s", response.status_code, data)
            raise EmailDeliveryError(f"Email send failed with HTTP {response.status_code}.", payload=data)

        logger.info("[BREVO] Email '%s' sent to %s", message.subject, [r.email for r in message.to])
        return data if isinstance(data, dict) else {"raw": data}


class BrevoContactsClient(_BrevoClient, ContactsProvider):
    async def create_contact(self, email: str) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"email": email, "updateEnabled": False}
        if self.config.newsletter_list_id is not None:
            payload["listIds"] = [self.config.newsletter_list_id]

        try:
            response = await self._post("/contacts", payload, "brevo create contact")
        except httpx.RequestError as exc:
            raise ContactsError(f"Contacts transport error: {exc}", payload={"error": str(exc)}) from exc

        data = read_json(response)
        if response.status_code >= 400:
            if _is_duplicate(data):
                logger.info("[BREVO] Contact already exists: %s", email)
                raise DuplicateSubscriberError("Contact already exists.", payload=data)
            logger.error("[BREVO] Contact creation rejected: %s %s", response.status_code, data)
            raise ContactsError(f"Contact creation failed with HTTP {response.status_code}.", payload=data)

        logger.info("[BREVO] Contact created: %s", email)
        return data if isinstance(data, dict) else {"raw": data}


def _is_duplicate(data: Any) -> bool:
    if isinstance(data, dict):
        if data.get("code") == DUPLICATE_CONTACT_CODE:
            return True
        message = str(data.get("message") or "")
    else:
        message = str(data or "")
    return "already exist" in message.lower()
