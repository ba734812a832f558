"""
Order Service

Prices an order from the static table and sends the customer confirmation
followed by the admin notification. Orders are not stored.
"""

import logging

from src.integrations.contracts.interfaces import EmailAddress, EmailMessage, EmailSender, Order, OrderReceipt
from src.integrations.errors import EmailDeliveryError, IntegrationError
from src.integrations.policy.bounded_call import bounded_call
from src.orders import templates
from src.orders.pricing import compute_total
from src.utils.config_loader import PricingConfig, Settings

logger = logging.getLogger(__name__)


class OrderService:
    def __init__(self, settings: Settings, email_sender: EmailSender, pricing: PricingConfig):
        self.settings = settings
        self.email_sender = email_sender
        self.pricing = pricing

    def price(self, order: Order) -> OrderReceipt:
        unit_price, total = compute_total(order, self.pricing)
        return OrderReceipt(order=order, unit_price=unit_price, total=total, currency=self.pricing.currency)

    async def submit_order(self, order: Order) -> OrderReceipt:
        receipt = self.price(order)
        logger.info("New order: item=%s qty=%s total=%s", order.item, order.quantity, receipt.total)

        brevo = self.settings.brevo
        sender = EmailAddress(email=brevo.from_email, name=brevo.from_name)

        await self._send(
            EmailMessage(
                sender=sender,
                to=[EmailAddress(email=order.email, name=order.name)],
                subject=templates.customer_confirmation_subject(),
                html_content=templates.customer_confirmation_html(receipt),
            ),
            "customer confirmation",
        )
        logger.info("Customer confirmation sent to %s", order.email)

        if brevo.admin_email:
            await self._send(
                EmailMessage(
                    sender=sender,
                    to=[EmailAddress(email=brevo.admin_email, name=brevo.admin_name)],
                    subject=templates.admin_notification_subject(receipt),
                    html_content=templates.admin_notification_html(receipt),
                ),
                "admin notification",
            )
            logger.info("Admin notification sent to %s", brevo.admin_email)
        else:
            logger.warning("ADMIN_EMAIL is not set; admin notification skipped")

        return receipt

    async def _send(self, message: EmailMessage, label: str) -> None:
        try:
            await bounded_call(
                self.email_sender.send(message),
                self.settings.http_timeout_seconds,
                f"brevo send {label}",
            )
        except EmailDeliveryError:
            raise
        except IntegrationError as exc:
            raise EmailDeliveryError(f"Failed to send {label}: {exc}", payload=exc.payload) from exc
