"""
M-Pesa STK push: MOCK clients.

⚠️  Mock implementation for development and testing.
    Used when Daraja credentials are not configured. No network calls are made;
    acknowledgments are shaped like the real gateway's so the rest of the flow
    (record persistence, callback reconciliation) behaves the same.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

from src.integrations.contracts.interfaces import (
    AccessToken,
    MobileMoneyProvider,
    StkPushRequest,
    TokenProvider,
)
from src.integrations.errors import GatewayError

logger = logging.getLogger(__name__)


class MpesaMockTokenProvider(TokenProvider):
    def __init__(self) -> None:
        self.issued = 0

    async def get_access_token(self) -> AccessToken:
        self.issued += 1
        return AccessToken(
            value=f"mock-token-{self.issued}",
            expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
        )


class MpesaMockClient(MobileMoneyProvider):
    """
    Mock STK push client.

    Parameters
    ----------
    fail_with : dict, optional
        When set, every initiation raises GatewayError carrying this payload.
    """

    def __init__(self, fail_with: Dict[str, Any] = None):
        self._fail_with = fail_with
        # In-memory log of sent requests (reset on restart)
        self.requests: List[StkPushRequest] = []
        logger.info("[MPESA MOCK] Client initialised")

    def _new_ids(self) -> Dict[str, str]:
        stamp = datetime.now(timezone.utc).strftime("%d%m%Y%H%M%S")
        return {
            "MerchantRequestID": f"{uuid.uuid4().int % 100000}-{uuid.uuid4().int % 10**8}-1",
            "CheckoutRequestID": f"ws_CO_{stamp}{uuid.uuid4().hex[:8]}",
        }

    async def initiate(self, token: AccessToken, request: StkPushRequest) -> Dict[str, Any]:
        logger.info("[MPESA MOCK] STK push amount=%s phone=%s", request.amount, request.phone_number)
        self.requests.append(request)

        if self._fail_with is not None:
            raise GatewayError("Mock gateway rejected the request.", payload=self._fail_with)

        return {
            **self._new_ids(),
            "ResponseCode": "0",
            "ResponseDescription": "Success. Request accepted for processing",
            "CustomerMessage": "Success. Request accepted for processing",
        }
