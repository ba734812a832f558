import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from src.api.dependencies import get_payment_service
from src.api.request_body import read_json_object
from src.error_handler import error_handler
from src.integrations.errors import AuthError
from src.integrations.policy.payment_service import PaymentService
from src.integrations.policy.response_wrappers import IntegrationResponseError
from src.utils.validation import validate_stk_push

logger = logging.getLogger(__name__)

api = APIRouter()
payments_api = api

CALLBACK_ACCEPTED = {"ResultCode": 0, "ResultDesc": "Accepted"}


@api.post("/stkpush", tags=["Payments"])
async def initiate_stk_push(request: Request, service: PaymentService = Depends(get_payment_service)):
    """
    Send an STK push prompt to the payer's handset.

    The gateway's acknowledgment is returned verbatim; the final result arrives
    later on /stkpush/callback.
    """
    try:
        payload = await read_json_object(request)
        fields = validate_stk_push(payload)
        return await service.initiate_stk_push(fields["phone"], fields["amount"], fields["item"])
    except AuthError as e:
        return error_handler.to_response(e, "Failed to authenticate with the payment gateway.", context={"endpoint": "stkpush"})
    except Exception as e:
        return error_handler.to_response(
            e, "Failed to initiate payment.", context={"endpoint": "stkpush"}, expose_details=True
        )


@api.post("/stkpush/callback", tags=["Payments"])
async def stk_push_callback(request: Request, service: PaymentService = Depends(get_payment_service)):
    """
    Result callback from the gateway. Always acknowledged unless the body is malformed,
    so the gateway doesn't keep redelivering results we have already recorded.
    """
    payload: Optional[Dict[str, Any]]
    try:
        payload = await request.json()
    except ValueError:
        payload = None

    try:
        await service.handle_callback(payload)
    except IntegrationResponseError as e:
        logger.error("Malformed STK callback: %s | payload=%s", e, e.payload)
        return JSONResponse(status_code=400, content={"ResultCode": 1, "ResultDesc": "Malformed callback"})

    return CALLBACK_ACCEPTED


@api.get("/stkpush/{checkout_request_id}", tags=["Payments"])
async def get_payment_status(checkout_request_id: str, service: PaymentService = Depends(get_payment_service)):
    record = service.get_payment(checkout_request_id)
    if record is None:
        return JSONResponse(status_code=404, content={"success": False, "message": "Payment not found."})
    return {"success": True, "payment": record.to_dict()}
