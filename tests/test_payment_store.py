import logging
from datetime import datetime, timezone

import pytest

from src.database.models import PaymentRecord
from src.database.redis import PaymentStore
from src.database.redis_real import RedisPaymentStore
from src.integrations.contracts.interfaces import PaymentStatus


class FakeRedis:
    def __init__(self):
        self.data = {}
        self.ttls = {}

    def setex(self, key, ttl, value):
        self.data[key] = value
        self.ttls[key] = ttl

    def get(self, key):
        return self.data.get(key)

    def delete(self, key):
        self.data.pop(key, None)

    def ping(self):
        return True


def _record(**overrides):
    moment = datetime(2025, 3, 14, 9, 30, tzinfo=timezone.utc)
    data = dict(
        checkout_request_id="ws_CO_1",
        merchant_request_id="29115-1",
        phone="254712345678",
        amount=100,
        item="Jersey",
        created_at=moment,
        updated_at=moment,
    )
    data.update(overrides)
    return PaymentRecord(**data)


@pytest.fixture(params=["memory", "redis"])
def payment_store(request):
    if request.param == "memory":
        return PaymentStore()
    return RedisPaymentStore(client=FakeRedis())


def test_save_and_get_round_trip(payment_store):
    record = _record(status=PaymentStatus.CONFIRMED, result_code=0, receipt_number="NLJ7RT61SV", confirmed_amount=100.0)
    payment_store.save(record)

    loaded = payment_store.get("ws_CO_1")

    assert loaded == record
    assert loaded.status is PaymentStatus.CONFIRMED


def test_get_missing_returns_none(payment_store):
    assert payment_store.get("ws_CO_missing") is None


def test_delete(payment_store):
    payment_store.save(_record())
    payment_store.delete("ws_CO_1")
    assert payment_store.get("ws_CO_1") is None


def test_redis_store_keys_and_ttl():
    fake = FakeRedis()
    store = RedisPaymentStore(client=fake, ttl=60)
    store.save(_record())

    assert list(fake.data) == ["stkpush:ws_CO_1"]
    assert fake.ttls["stkpush:ws_CO_1"] == 60
    assert store.ping() is True


def test_redis_store_ignores_corrupt_entries():
    fake = FakeRedis()
    fake.data["stkpush:ws_CO_bad"] = "{not json"
    assert RedisPaymentStore(client=fake).get("ws_CO_bad") is None


def test_to_dict_is_json_friendly():
    data = _record().to_dict()
    assert data["status"] == "INITIATED"
    assert data["created_at"] == "2025-03-14T09:30:00+00:00"


def test_corrupt_redis_entry_is_logged(caplog):
    fake = FakeRedis()
    fake.data["stkpush:ws_CO_bad"] = "{not json"

    with caplog.at_level(logging.ERROR, logger="src.database.redis_real"):
        assert RedisPaymentStore(client=fake).get("ws_CO_bad") is None

    assert "Unreadable payment record ws_CO_bad" in caplog.text
