"""
Real Redis-backed payment store for production when REDIS_URL is set.
Implements the same interface as src.database.redis (in-memory stub), so a
callback arriving after a restart can still be matched to its initiation.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import redis

from src.database.models import PaymentRecord

logger = logging.getLogger(__name__)


class RedisPaymentStore:
    """
    Redis-backed payment store keyed by checkout request id.
    """

    def __init__(self, url: str = None, ttl: int = 604800, client: Any = None) -> None:
        self._client = client or redis.from_url(url, decode_responses=True)
        self._ttl = ttl

    @staticmethod
    def _key(checkout_request_id: str) -> str:
        return f"stkpush:{checkout_request_id}"

    def save(self, record: PaymentRecord) -> None:
        payload = json.dumps(record.to_dict(), default=str)
        self._client.setex(self._key(record.checkout_request_id), self._ttl, payload)

    def get(self, checkout_request_id: str) -> Optional[PaymentRecord]:
        raw = self._client.get(self._key(checkout_request_id))
        if not raw:
            return None
        try:
            return PaymentRecord.from_dict(json.loads(raw))
        except (json.JSONDecodeError, TypeError, ValueError) as exc:
            logger.error("Unreadable payment record %s: %s | raw=%r", checkout_request_id, exc, raw)
            return None

    def delete(self, checkout_request_id: str) -> None:
        self._client.delete(self._key(checkout_request_id))

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False
