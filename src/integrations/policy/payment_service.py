"""
STK push payment service.

Runs the initiation flow (token → signed request → gateway acknowledgment),
records every accepted initiation by its CheckoutRequestID, and reconciles the
gateway's asynchronous result callback against that record.

Record lifecycle: INITIATED → CONFIRMED | FAILED | TIMED_OUT.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from src.database.models import PaymentRecord
from src.integrations.contracts.interfaces import MobileMoneyProvider, PaymentStatus, TokenProvider
from src.integrations.contracts.payments import build_stk_request, is_terminal_status
from src.integrations.errors import PaymentRecordError, TokenRejectedError
from src.integrations.policy.bounded_call import bounded_call
from src.integrations.policy.response_wrappers import (
    checkout_request_id,
    merchant_request_id,
    parse_stk_callback,
)
from src.utils.config_loader import Settings

logger = logging.getLogger(__name__)


class PaymentService:
    def __init__(
        self,
        settings: Settings,
        token_provider: TokenProvider,
        payments_client: MobileMoneyProvider,
        store,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.settings = settings
        self.token_provider = token_provider
        self.payments_client = payments_client
        self.store = store
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def initiate_stk_push(self, phone: str, amount: Any, item: Optional[str] = None) -> Dict[str, Any]:
        """
        Send an STK push and return the gateway acknowledgment unmodified.

        Raises FormValidationError, AuthError or GatewayError; nothing is
        recorded unless the gateway returned a CheckoutRequestID. A store failure
        after the gateway accepted the push raises PaymentRecordError carrying
        the acknowledgment, so the caller still learns the CheckoutRequestID.
        """
        mpesa = self.settings.mpesa
        timeout = self.settings.http_timeout_seconds

        token = await bounded_call(self.token_provider.get_access_token(), timeout, "mpesa token request")

        request = build_stk_request(
            short_code=mpesa.short_code,
            passkey=mpesa.passkey,
            phone=phone,
            amount=amount,
            account_reference=mpesa.account_reference,
            description=item or "Payment",
            callback_url=mpesa.callback_url,
            transaction_type=mpesa.transaction_type,
            timestamp=self._clock(),
        )

        try:
            result = await bounded_call(self.payments_client.initiate(token, request), timeout, "mpesa stk push")
        except TokenRejectedError:
            # No retry here; the next request fetches a fresh token.
            self.token_provider.invalidate()
            logger.warning("Gateway rejected the cached access token; it will be refreshed on the next request")
            raise

        checkout_id = checkout_request_id(result)
        if not checkout_id:
            logger.warning("STK push acknowledgment had no CheckoutRequestID; nothing recorded: %s", result)
            return result

        now = self._clock()
        record = PaymentRecord(
            checkout_request_id=checkout_id,
            merchant_request_id=merchant_request_id(result),
            phone=request.phone_number,
            amount=request.amount,
            item=item,
            status=PaymentStatus.INITIATED,
            created_at=now,
            updated_at=now,
        )
        try:
            self.store.save(record)
        except Exception as exc:
            logger.error(
                "Payment %s accepted by the gateway but not recorded: %s | ack=%s",
                checkout_id, exc, result, exc_info=True,
            )
            raise PaymentRecordError(
                f"STK push {checkout_id} was sent but could not be recorded.", payload=result
            ) from exc
        logger.info("Payment %s recorded as INITIATED", checkout_id)
        return result

    def get_payment(self, checkout_id: str) -> Optional[PaymentRecord]:
        """Fetch a record, moving it to TIMED_OUT if the callback window has passed."""
        record = self.store.get(checkout_id)
        if record is None:
            return None
        return self._expire_if_stale(record)

    async def handle_callback(self, payload: Any) -> Optional[PaymentRecord]:
        """
        Apply a result callback to its record.

        Returns the updated record, or None when the CheckoutRequestID is unknown.
        Raises IntegrationResponseError when the body is malformed.
        """
        callback = parse_stk_callback(payload)
        record = self.store.get(callback.checkout_request_id)
        if record is None:
            logger.warning("Callback for unknown CheckoutRequestID %s ignored", callback.checkout_request_id)
            return None

        record = self._expire_if_stale(record)
        if is_terminal_status(record.status):
            logger.warning(
                "Callback for %s ignored; record already %s (ResultCode=%s)",
                record.checkout_request_id, record.status.value, callback.result_code,
            )
            return record

        if callback.succeeded and not _amounts_match(record.amount, callback.amount):
            logger.warning(
                "Payment %s confirmed for %s but %s was requested",
                record.checkout_request_id, callback.amount, record.amount,
            )

        record.status = callback.status
        record.result_code = callback.result_code
        record.result_desc = callback.result_desc
        record.receipt_number = callback.receipt_number
        record.confirmed_amount = callback.amount
        record.updated_at = self._clock()
        self.store.save(record)

        logger.info(
            "Payment %s → %s (ResultCode=%s %s)",
            record.checkout_request_id, record.status.value, callback.result_code, callback.result_desc,
        )
        return record

    def _expire_if_stale(self, record: PaymentRecord) -> PaymentRecord:
        if record.status != PaymentStatus.INITIATED:
            return record
        age = (self._clock() - record.created_at).total_seconds()
        if age <= self.settings.payment_callback_timeout_seconds:
            return record

        record.status = PaymentStatus.TIMED_OUT
        record.updated_at = self._clock()
        self.store.save(record)
        logger.warning("Payment %s timed out after %.0fs without a callback", record.checkout_request_id, age)
        return record


def _amounts_match(requested: Any, confirmed: Optional[float]) -> bool:
    try:
        return float(requested) == float(confirmed)
    except (TypeError, ValueError):
        return False
