"""
Integration error taxonomy.

Every failure talking to an external provider is raised as an
`IntegrationError` subclass carrying the raw diagnostic payload (when one is
available) so the API layer can log it in full and decide how much of it the
caller gets to see.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class FormValidationError(Exception):
    """Raised when an inbound request is missing required fields.

    Attributes:
        field_errors: mapping of field name -> human-readable error message.
        message: top-level message returned to the caller.
    """

    field_errors: Dict[str, str]
    message: str = "All fields are required."

    def __str__(self) -> str:  # pragma: no cover
        return self.message


class IntegrationError(Exception):
    def __init__(self, message: str, *, payload: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.payload = payload


class AuthError(IntegrationError):
    """The payment gateway did not issue an access token."""


class GatewayError(IntegrationError):
    """The payment gateway call failed or returned malformed data."""


class ProviderTimeoutError(GatewayError):
    def __init__(self, operation: str, timeout_seconds: float) -> None:
        super().__init__(
            f"{operation} did not complete within {timeout_seconds:g}s",
            payload={"operation": operation, "timeout_seconds": timeout_seconds},
        )
        self.operation = operation
        self.timeout_seconds = timeout_seconds


class EmailDeliveryError(IntegrationError):
    pass


class ContactsError(IntegrationError):
    pass


class DuplicateSubscriberError(ContactsError):
    """The contact already exists. Callers treat this as a successful signup."""


class TokenRejectedError(GatewayError):
    """The gateway refused the bearer token (HTTP 401). The cached token must not be reused."""


class PaymentRecordError(GatewayError):
    """The push was accepted but could not be recorded. `payload` is the gateway acknowledgment."""
