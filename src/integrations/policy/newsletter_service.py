"""
Newsletter Service

Creates a contact with the newsletter provider. A repeat signup is reported as
success; a provider that doesn't answer within the newsletter timeout is a failure.
"""

import logging

from src.integrations.contracts.interfaces import ContactsProvider, SubscriptionOutcome
from src.integrations.errors import DuplicateSubscriberError
from src.integrations.policy.bounded_call import bounded_call
from src.utils.config_loader import Settings

logger = logging.getLogger(__name__)


class NewsletterService:
    def __init__(self, settings: Settings, contacts: ContactsProvider):
        self.settings = settings
        self.contacts = contacts

    async def subscribe(self, email: str) -> SubscriptionOutcome:
        try:
            await bounded_call(
                self.contacts.create_contact(email),
                self.settings.newsletter_timeout_seconds,
                "brevo create contact",
            )
        except DuplicateSubscriberError:
            logger.info("Newsletter signup for existing contact %s", email)
            return SubscriptionOutcome.ALREADY_SUBSCRIBED

        logger.info("Newsletter signup: %s", email)
        return SubscriptionOutcome.SUBSCRIBED
