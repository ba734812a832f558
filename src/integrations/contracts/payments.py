
import base64
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from src.integrations.contracts.interfaces import PaymentStatus, StkPushRequest
from src.integrations.errors import FormValidationError

"""
Payment contracts.

Defines the request/response structures of the STK push flow:
- building the signed initiation payload
- parsing the asynchronous result callback

These contracts are shared by:
- clients/mocks/mpesa.py (fake acknowledgments for development/testing)
- clients/real_http/mpesa.py (real gateway calls)
"""

TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
DEFAULT_TRANSACTION_TYPE = "CustomerPayBillOnline"

# Gateway field limits
ACCOUNT_REFERENCE_MAX = 12
TRANSACTION_DESC_MAX = 13


# ---------------------------------------------------------------------------
# Request builder
# ---------------------------------------------------------------------------


def format_timestamp(moment: Optional[datetime] = None) -> str:
    """
    Render the password timestamp as YYYYMMDDHHMMSS in UTC.

    Naive datetimes are taken to already be UTC.
    """
    moment = moment or datetime.now(timezone.utc)
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime(TIMESTAMP_FORMAT)


def build_password(short_code: str, passkey: str, timestamp: str) -> str:
    raw = f"{short_code}{passkey}{timestamp}".encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def build_stk_request(
    short_code: str,
    passkey: str,
    phone: Any,
    amount: Any,
    account_reference: str,
    description: str,
    callback_url: str,
    transaction_type: str = DEFAULT_TRANSACTION_TYPE,
    timestamp: Optional[datetime] = None,
) -> StkPushRequest:
    """
    Assemble a signed STK push request.

    Deterministic for a given timestamp: the same inputs within the same
    second produce the same password.
    """
    errors: Dict[str, str] = {}
    if not phone:
        errors["phone"] = "phone is required"
    if not amount:
        errors["amount"] = "amount is required"
    if errors:
        raise FormValidationError(errors, message="Phone and amount are required.")

    stamp = format_timestamp(timestamp)
    phone = str(phone).strip()
    short_code = str(short_code)

    return StkPushRequest(
        business_short_code=short_code,
        password=build_password(short_code, passkey, stamp),
        timestamp=stamp,
        transaction_type=transaction_type,
        amount=amount,
        party_a=phone,
        party_b=short_code,
        phone_number=phone,
        callback_url=callback_url,
        account_reference=(account_reference or "")[:ACCOUNT_REFERENCE_MAX],
        transaction_desc=(description or "Payment")[:TRANSACTION_DESC_MAX],
    )


# ---------------------------------------------------------------------------
# Callback contract
# ---------------------------------------------------------------------------


@dataclass
class StkCallback:
    """Result callback posted by the gateway once the payer acts on the prompt."""
    merchant_request_id: str
    checkout_request_id: str
    result_code: int
    result_desc: str
    amount: Optional[float] = None
    receipt_number: Optional[str] = None
    transaction_date: Optional[str] = None
    phone_number: Optional[str] = None
    raw_payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.result_code == 0

    @property
    def status(self) -> PaymentStatus:
        return PaymentStatus.CONFIRMED if self.succeeded else PaymentStatus.FAILED


def is_terminal_status(status: PaymentStatus) -> bool:
    """Return True if the payment has reached a final, non-changeable state."""
    return status in {PaymentStatus.CONFIRMED, PaymentStatus.FAILED, PaymentStatus.TIMED_OUT}
