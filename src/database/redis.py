"""
Lightweight in-memory payment store for local development.

Implements the interface used by `PaymentService` so the API can run without a
real Redis instance. Records are lost on restart; set REDIS_URL to use
src.database.redis_real instead.
"""

from __future__ import annotations

from typing import Dict, Optional

from src.database.models import PaymentRecord


class PaymentStore:
    def __init__(self) -> None:
        # Simple in-memory store: checkout_request_id -> serialised record
        self._records: Dict[str, Dict] = {}

    def save(self, record: PaymentRecord) -> None:
        self._records[record.checkout_request_id] = record.to_dict()

    def get(self, checkout_request_id: str) -> Optional[PaymentRecord]:
        data = self._records.get(checkout_request_id)
        return PaymentRecord.from_dict(data) if data else None

    def delete(self, checkout_request_id: str) -> None:
        self._records.pop(checkout_request_id, None)

    def ping(self) -> bool:
        """Health check; always True in local/dev mode."""
        return True
