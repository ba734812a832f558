from fastapi import APIRouter, Depends, Request

from src.api.dependencies import get_newsletter_service
from src.api.request_body import read_json_object
from src.error_handler import error_handler
from src.integrations.contracts.interfaces import SubscriptionOutcome
from src.integrations.policy.newsletter_service import NewsletterService
from src.utils.validation import validate_newsletter

api = APIRouter()
newsletter_api = api


@api.post("/newsletter", tags=["Newsletter"])
async def subscribe(request: Request, service: NewsletterService = Depends(get_newsletter_service)):
    try:
        payload = await read_json_object(request)
        email = validate_newsletter(payload)
        outcome = await service.subscribe(email)
    except Exception as e:
        return error_handler.to_response(e, "Failed to subscribe. Please try again later.", context={"endpoint": "newsletter"})

    if outcome == SubscriptionOutcome.ALREADY_SUBSCRIBED:
        return {"success": True, "status": "already_subscribed", "message": "You're already subscribed!"}
    return {"success": True, "status": "subscribed", "message": "Subscribed successfully!"}
