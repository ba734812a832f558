"""
Real M-Pesa (Daraja) HTTP clients.

Used when merchant consumer key/secret, short code and passkey are configured.
"""

from __future__ import annotations

import asyncio
import base64
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

import httpx

from src.integrations.clients.real_http.base import http_session, read_json
from src.integrations.contracts.interfaces import (
    AccessToken,
    MobileMoneyProvider,
    StkPushRequest,
    TokenProvider,
)
from src.integrations.errors import AuthError, GatewayError, ProviderTimeoutError, TokenRejectedError
from src.integrations.policy.response_wrappers import normalize_token_response
from src.utils.config_loader import MpesaConfig

logger = logging.getLogger(__name__)

# Refresh this long before the gateway's stated expiry.
TOKEN_EXPIRY_MARGIN_SECONDS = 60

# Daraja answers an expired or revoked bearer token with this errorCode.
INVALID_TOKEN_ERROR_CODE = "404.001.03"


def basic_credential(consumer_key: str, consumer_secret: str) -> str:
    raw = f"{consumer_key}:{consumer_secret}".encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


class DarajaTokenProvider(TokenProvider):
    """
    OAuth client-credentials token provider with an in-process cache.

    The token is reused until shortly before its expiry; concurrent callers
    wait on one in-flight fetch instead of each requesting a token.
    """

    def __init__(
        self,
        config: MpesaConfig,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout_seconds: float = 15.0,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.config = config
        self.timeout_seconds = timeout_seconds
        self._http_client = http_client
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._token: Optional[AccessToken] = None
        self._lock = asyncio.Lock()

    async def get_access_token(self) -> AccessToken:
        cached = self._token
        if cached and cached.is_valid(self._clock(), TOKEN_EXPIRY_MARGIN_SECONDS):
            return cached

        async with self._lock:
            cached = self._token
            if cached and cached.is_valid(self._clock(), TOKEN_EXPIRY_MARGIN_SECONDS):
                return cached
            self._token = await self._fetch_token()
            return self._token

    def invalidate(self) -> None:
        self._token = None

    async def _fetch_token(self) -> AccessToken:
        headers = {
            "Authorization": f"Basic {basic_credential(self.config.consumer_key, self.config.consumer_secret)}",
        }
        logger.info("[MPESA] Requesting access token (%s)", self.config.environment.value)

        try:
            async with http_session(self._http_client, self.timeout_seconds) as client:
                response = await client.get(self.config.oauth_url, headers=headers)
        except httpx.TimeoutException as exc:
            raise ProviderTimeoutError("mpesa token request", self.timeout_seconds) from exc

        data = read_json(response)
        if response.status_code >= 400:
            logger.error("[MPESA] Token request rejected: %s %s", response.status_code, data)
            raise AuthError(f"Token request failed with HTTP {response.status_code}.", payload=data)

        token = normalize_token_response(data, now=self._clock())
        logger.info("[MPESA] Access token issued, expires_at=%s", token.expires_at.isoformat())
        return token


class DarajaPaymentsClient(MobileMoneyProvider):
    def __init__(
        self,
        config: MpesaConfig,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout_seconds: float = 15.0,
    ) -> None:
        self.config = config
        self.timeout_seconds = timeout_seconds
        self._http_client = http_client

    async def initiate(self, token: AccessToken, request: StkPushRequest) -> Dict[str, Any]:
        headers: Dict[str, str] = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token.value}",
        }
        payload = request.to_payload()
        logger.info(
            "[MPESA] STK push amount=%s phone=%s ref=%s",
            request.amount, request.phone_number, request.account_reference,
        )

        try:
            async with http_session(self._http_client, self.timeout_seconds) as client:
                response = await client.post(self.config.stk_push_url, json=payload, headers=headers)
        except httpx.TimeoutException as exc:
            raise ProviderTimeoutError("mpesa stk push", self.timeout_seconds) from exc
        except httpx.RequestError as exc:
            raise GatewayError(f"STK push transport error: {exc}", payload={"error": str(exc)}) from exc

        data = read_json(response)
        if _token_rejected(response.status_code, data):
            logger.error("[MPESA] STK push rejected the access token: %s", data)
            raise TokenRejectedError(
                f"STK push rejected the access token (HTTP {response.status_code}).", payload=data
            )
        if response.status_code >= 400:
            logger.error("[MPESA] STK push rejected: %s %s", response.status_code, data)
            raise GatewayError(f"STK push failed with HTTP {response.status_code}.", payload=data)
        if not isinstance(data, dict):
            raise GatewayError("STK push response was not a JSON object.", payload=data)

        logger.info(
            "[MPESA] STK push acknowledged ResponseCode=%s CheckoutRequestID=%s",
            data.get("ResponseCode"), data.get("CheckoutRequestID"),
        )
        return data


def _token_rejected(status_code: int, data: Any) -> bool:
    if status_code == 401:
        return True
    return isinstance(data, dict) and data.get("errorCode") == INVALID_TOKEN_ERROR_CODE
