"""
Integrations layer.
This package contains all code used to communicate with external systems:
- the mobile-money payment gateway (OAuth token + STK push)
- the transactional email provider (order confirmations)
- the contacts provider (newsletter signups)

Key rule:
- API routes MUST NOT call external APIs directly.
- Routes call services (under src/integrations/policy), which call integration
  clients (under src/integrations/clients).
- We use MOCK clients when credentials are missing and REAL_HTTP clients otherwise.

Switching implementations:
- The selection of mock vs real clients happens in ONE place (src/api/dependencies.py).
"""

from .contracts.interfaces import (
    AccessToken,
    ContactsProvider,
    EmailAddress,
    EmailMessage,
    EmailSender,
    MobileMoneyProvider,
    MpesaEnvironment,
    Order,
    OrderReceipt,
    PaymentStatus,
    StkPushRequest,
    SubscriptionOutcome,
    TokenProvider,
)
from .contracts.payments import (
    StkCallback,
    build_password,
    build_stk_request,
    format_timestamp,
    is_terminal_status,
)
from .errors import (
    AuthError,
    ContactsError,
    DuplicateSubscriberError,
    EmailDeliveryError,
    FormValidationError,
    GatewayError,
    IntegrationError,
    ProviderTimeoutError,
)

__all__ = [
    # interfaces
    "AccessToken", "ContactsProvider", "EmailAddress", "EmailMessage", "EmailSender",
    "MobileMoneyProvider", "MpesaEnvironment", "Order", "OrderReceipt",
    "PaymentStatus", "StkPushRequest", "SubscriptionOutcome", "TokenProvider",
    # payments
    "StkCallback", "build_password", "build_stk_request", "format_timestamp",
    "is_terminal_status",
    # errors
    "AuthError", "ContactsError", "DuplicateSubscriberError", "EmailDeliveryError",
    "FormValidationError", "GatewayError", "IntegrationError", "ProviderTimeoutError",
]
