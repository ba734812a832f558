"""
Service wiring.

Chooses mock vs real integration clients and the payment store backend in one
place. Every factory is cached so the process shares one set of collaborators;
tests replace them through `app.dependency_overrides`.
"""

import logging
from functools import lru_cache

from src.integrations.clients.mocks.brevo import BrevoMockContactsClient, BrevoMockEmailClient
from src.integrations.clients.mocks.mpesa import MpesaMockClient, MpesaMockTokenProvider
from src.integrations.clients.real_http.brevo import BrevoContactsClient, BrevoEmailClient
from src.integrations.clients.real_http.mpesa import DarajaPaymentsClient, DarajaTokenProvider
from src.integrations.policy.newsletter_service import NewsletterService
from src.integrations.policy.order_service import OrderService
from src.integrations.policy.payment_service import PaymentService
from src.utils.config_loader import Settings, get_settings, load_pricing_config

logger = logging.getLogger(__name__)


def _should_use_real_integrations(settings: Settings, configured: bool) -> bool:
    mode = settings.integrations_mode
    if mode in {"real", "live"}:
        return True
    if mode in {"mock", "test"}:
        return False
    return configured


@lru_cache(maxsize=1)
def get_payment_store():
    settings = get_settings()
    if settings.redis_url:
        from src.database.redis_real import RedisPaymentStore

        logger.info("Payment store: redis")
        return RedisPaymentStore(url=settings.redis_url)

    from src.database.redis import PaymentStore

    logger.info("Payment store: in-memory (records are lost on restart)")
    return PaymentStore()


@lru_cache(maxsize=1)
def get_payment_service() -> PaymentService:
    settings = get_settings()
    if _should_use_real_integrations(settings, settings.mpesa.configured):
        token_provider = DarajaTokenProvider(settings.mpesa, timeout_seconds=settings.http_timeout_seconds)
        payments_client = DarajaPaymentsClient(settings.mpesa, timeout_seconds=settings.http_timeout_seconds)
    else:
        logger.warning("M-Pesa credentials not configured; using mock STK push client")
        token_provider = MpesaMockTokenProvider()
        payments_client = MpesaMockClient()
    return PaymentService(settings, token_provider, payments_client, get_payment_store())


@lru_cache(maxsize=1)
def get_order_service() -> OrderService:
    settings = get_settings()
    if _should_use_real_integrations(settings, settings.brevo.configured):
        email_sender = BrevoEmailClient(settings.brevo, timeout_seconds=settings.http_timeout_seconds)
    else:
        logger.warning("BREVO_API_KEY not configured; using mock email client")
        email_sender = BrevoMockEmailClient()
    return OrderService(settings, email_sender, load_pricing_config(settings.pricing_config_path))


@lru_cache(maxsize=1)
def get_newsletter_service() -> NewsletterService:
    settings = get_settings()
    if _should_use_real_integrations(settings, settings.brevo.configured):
        contacts = BrevoContactsClient(settings.brevo, timeout_seconds=settings.newsletter_timeout_seconds)
    else:
        logger.warning("BREVO_API_KEY not configured; using mock contacts client")
        contacts = BrevoMockContactsClient()
    return NewsletterService(settings, contacts)
