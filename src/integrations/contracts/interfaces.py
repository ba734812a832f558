from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class PaymentStatus(str, Enum):
    INITIATED = "INITIATED"
    CONFIRMED = "CONFIRMED"
    FAILED = "FAILED"
    TIMED_OUT = "TIMED_OUT"


class MpesaEnvironment(str, Enum):
    SANDBOX = "sandbox"
    PRODUCTION = "production"


class SubscriptionOutcome(str, Enum):
    SUBSCRIBED = "SUBSCRIBED"
    ALREADY_SUBSCRIBED = "ALREADY_SUBSCRIBED"


# ---------------------------------------------------------------------------
# Shared data models
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AccessToken:
    value: str
    expires_at: datetime

    def is_valid(self, now: Optional[datetime] = None, margin_seconds: float = 0.0) -> bool:
        now = now or utcnow()
        return (self.expires_at - now).total_seconds() > margin_seconds


@dataclass(frozen=True)
class StkPushRequest:
    business_short_code: str
    password: str
    timestamp: str                       # YYYYMMDDHHMMSS, UTC
    transaction_type: str
    amount: Any
    party_a: str                         # payer phone
    party_b: str                         # receiving short code
    phone_number: str                    # payer phone
    callback_url: str
    account_reference: str
    transaction_desc: str

    def to_payload(self) -> Dict[str, Any]:
        return {
            "BusinessShortCode": self.business_short_code,
            "Password": self.password,
            "Timestamp": self.timestamp,
            "TransactionType": self.transaction_type,
            "Amount": self.amount,
            "PartyA": self.party_a,
            "PartyB": self.party_b,
            "PhoneNumber": self.phone_number,
            "CallBackURL": self.callback_url,
            "AccountReference": self.account_reference,
            "TransactionDesc": self.transaction_desc,
        }


@dataclass
class EmailAddress:
    email: str
    name: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        out = {"email": self.email}
        if self.name:
            out["name"] = self.name
        return out


@dataclass
class EmailMessage:
    sender: EmailAddress
    to: List[EmailAddress]
    subject: str
    html_content: str


@dataclass
class Order:
    name: str
    email: str
    phone: str
    item: str
    quantity: int
    size: Optional[str] = None
    color: Optional[str] = None


@dataclass
class OrderReceipt:
    order: Order
    unit_price: int
    total: int
    currency: str = "KES"
    created_at: datetime = field(default_factory=utcnow)


# ---------------------------------------------------------------------------
# Abstract provider interfaces
# ---------------------------------------------------------------------------

class TokenProvider(ABC):
    @abstractmethod
    async def get_access_token(self) -> AccessToken:
        """Return a bearer token for the payment gateway, raising AuthError on failure."""

    def invalidate(self) -> None:
        """Forget any cached token so the next call fetches a new one."""


class MobileMoneyProvider(ABC):
    """Every STK push gateway client must implement this interface."""

    @abstractmethod
    async def initiate(self, token: AccessToken, request: StkPushRequest) -> Dict[str, Any]:
        """Send the STK push and return the gateway acknowledgment verbatim."""


class EmailSender(ABC):
    @abstractmethod
    async def send(self, message: EmailMessage) -> Dict[str, Any]:
        """Send one transactional email."""


class ContactsProvider(ABC):
    @abstractmethod
    async def create_contact(self, email: str) -> Dict[str, Any]:
        """Create a newsletter contact, raising DuplicateSubscriberError if it exists."""
