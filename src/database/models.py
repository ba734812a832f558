"""
Payment records kept between STK push initiation and the gateway callback.
Serialised to plain dicts so both the in-memory and Redis stores share one shape.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from src.integrations.contracts.interfaces import PaymentStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class PaymentRecord:
    checkout_request_id: str
    merchant_request_id: Optional[str]
    phone: str
    amount: Any
    item: Optional[str] = None
    status: PaymentStatus = PaymentStatus.INITIATED
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    result_code: Optional[int] = None
    result_desc: Optional[str] = None
    receipt_number: Optional[str] = None
    confirmed_amount: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        data["created_at"] = self.created_at.isoformat()
        data["updated_at"] = self.updated_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PaymentRecord":
        data = dict(data)
        data["status"] = PaymentStatus(data.get("status", PaymentStatus.INITIATED.value))
        for key in ("created_at", "updated_at"):
            value = data.get(key)
            if isinstance(value, str):
                data[key] = datetime.fromisoformat(value)
        return cls(**data)
